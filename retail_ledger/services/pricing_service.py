from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from retail_ledger.core.money import to_money
from retail_ledger.models.product import Product


@dataclass(frozen=True)
class Amounts:
    cost_amount: Decimal
    sale_amount: Decimal


def get_product(db: Session, product_id: str) -> Product | None:
    return db.get(Product, product_id)


def compute_amounts(product: Product | None, quantity: int) -> Amounts | None:
    """
    Valuation of ``quantity`` units at the product's current reference prices.

    Returns ``None`` when there is nothing to value (unknown product or a
    non-positive quantity); callers turn that into a precondition error.
    """
    if product is None or quantity <= 0:
        return None
    return Amounts(
        cost_amount=to_money(to_money(product.cost_price) * quantity),
        sale_amount=to_money(to_money(product.sale_price) * quantity),
    )
