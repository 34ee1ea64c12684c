import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from retail_ledger.core.config import settings
from retail_ledger.core.errors import InvalidAmountError, InvalidDateError, InvalidQuantityError
from retail_ledger.core.money import MAX_MONEY, MONEY_QUANT

# Quantities are stored in a 32-bit INTEGER column.
MAX_QUANTITY = 2**31 - 1
_QUANTITY_RE = re.compile(r"^\+?(\d+)(?:\.0*)?$")


def parse_ledger_date(value: str | date, date_format: str | None = None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(value)
    try:
        return datetime.strptime(value.strip(), date_format or settings.ledger_date_format).date()
    except ValueError as exc:
        raise InvalidDateError(value) from exc


def parse_quantity(value: str | int) -> int:
    if isinstance(value, bool):
        raise InvalidQuantityError(value)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        match = _QUANTITY_RE.match(value.strip())
        if match is None:
            raise InvalidQuantityError(value)
        parsed = int(match.group(1))
    else:
        raise InvalidQuantityError(value)
    if parsed <= 0 or parsed > MAX_QUANTITY:
        raise InvalidQuantityError(value)
    return parsed


def parse_amount(value: str | int | Decimal) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(value)
    try:
        parsed = Decimal(str(value).strip())
        if not parsed.is_finite() or parsed <= 0 or parsed > MAX_MONEY or parsed != parsed.quantize(MONEY_QUANT):
            raise InvalidAmountError(value)
        return parsed.quantize(MONEY_QUANT)
    except InvalidOperation as exc:
        raise InvalidAmountError(value) from exc
