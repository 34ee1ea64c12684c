import pytest
from pydantic import ValidationError

from retail_ledger.core.config import Settings


def test_cash_pay_method_is_normalized():
    assert Settings(database_url="sqlite://", cash_pay_method=" enzona ").cash_pay_method == "ENZONA"


@pytest.mark.parametrize("value", ["CASH", "CHEQUE", ""])
def test_cash_pay_method_must_be_an_accepted_pay_method(value):
    with pytest.raises(ValidationError, match="CASH_PAY_METHOD must be one of"):
        Settings(database_url="sqlite://", cash_pay_method=value)
