"""
Domain errors raised by the ledger engine.

Every error carries the HTTP status class and machine code used by the API
error envelope. Messages are shown to the user verbatim, except for
``StorageError`` which always returns a generic message.
"""

from datetime import date
from decimal import Decimal


class LedgerError(Exception):
    """Base exception for all ledger engine failures."""

    status_code: int = 400
    code: str = "ledger_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_details(self) -> list[dict] | None:
        return None


class InvalidDateError(LedgerError):
    code = "invalid_date"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date: {value}")


class InvalidQuantityError(LedgerError):
    code = "invalid_quantity"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid quantity: {value}")


class InvalidAmountError(LedgerError):
    code = "invalid_amount"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid amount: {value}")


class InvalidDestinationError(LedgerError):
    code = "invalid_destination"


class LocationNotFoundError(LedgerError):
    status_code = 404
    code = "location_not_found"

    def __init__(self, kind: str, location_id: str):
        self.kind = kind
        self.location_id = location_id
        label = kind.replace("_", " ")
        super().__init__(f"{label.capitalize()} not found: {location_id}")


class ProductNotFoundError(LedgerError):
    status_code = 404
    code = "product_not_found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class InsufficientStockError(LedgerError):
    status_code = 409
    code = "insufficient_stock"

    def __init__(
        self,
        *,
        available: int,
        requested: int,
        location_kind: str | None = None,
        location_id: str | None = None,
        product_id: str | None = None,
    ):
        self.available = available
        self.requested = requested
        self.location_kind = location_kind
        self.location_id = location_id
        self.product_id = product_id
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available}, requested: {requested}"
        )

    def to_details(self) -> list[dict] | None:
        return [
            {
                "location_kind": self.location_kind,
                "location_id": self.location_id,
                "product_id": self.product_id,
                "available": self.available,
                "requested": self.requested,
            }
        ]


class ExcessiveWithdrawalError(LedgerError):
    status_code = 409
    code = "excessive_withdrawal"

    def __init__(self, *, amount: Decimal, available: Decimal, on_date: date, date_format: str = "%d/%m/%Y"):
        self.amount = amount
        self.available = available
        self.shortfall = amount - available
        self.on_date = on_date
        super().__init__(
            f"Withdrawal of {amount:.2f} exceeds the available cash of {available:.2f} "
            f"for {on_date.strftime(date_format)} (short by {self.shortfall:.2f})"
        )

    def to_details(self) -> list[dict] | None:
        return [
            {
                "date": self.on_date.isoformat(),
                "amount": float(self.amount),
                "available": float(self.available),
                "shortfall": float(self.shortfall),
            }
        ]


class StorageError(LedgerError):
    status_code = 500
    code = "storage_error"

    def __init__(self, message: str = "Could not save changes to the database"):
        super().__init__(message)
