# pos_backend/domain/sales/errors.py
import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    PRODUCT_NOT_FOUND = "product_not_found"
    PAYMENT_MISMATCH = "payment_mismatch"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_BUNDLE_CONFIG = "invalid_bundle_config"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    TRANSACTION_STATE = "transaction_state"
    EMPTY_TRANSACTION = "empty_transaction"


class SaleError(Exception):
    """Base class for every failure the reconciliation engine reports.

    The ``kind`` attribute identifies the failure; callers classify on it and
    never on the message text.
    """

    kind: ErrorKind

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


class ValidationError(SaleError):
    kind = ErrorKind.VALIDATION


class ProductNotFoundError(SaleError):
    kind = ErrorKind.PRODUCT_NOT_FOUND

    def __init__(self, product_id: int, name: Optional[str] = None):
        label = f"Product with ID {product_id}"
        if name:
            label += f" ({name})"
        super().__init__(f"{label} not found in database.", {"product_id": product_id})
        self.product_id = product_id


class PaymentMismatchError(SaleError):
    kind = ErrorKind.PAYMENT_MISMATCH

    def __init__(self, total_amount, total_paid):
        super().__init__(
            f"Payment amount mismatch. Cart Total: {total_amount}, Amount Paid: {total_paid}",
            {"total_amount": str(total_amount), "total_paid": str(total_paid)},
        )


class InsufficientStockError(SaleError):
    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_id: int, name: str):
        super().__init__(f"Insufficient stock for product: {name}", {"product_id": product_id})
        self.product_id = product_id


class InvalidBundleConfigError(SaleError):
    kind = ErrorKind.INVALID_BUNDLE_CONFIG

    def __init__(self, product_id: int, name: str):
        super().__init__(f"Invalid bundle configuration for product: {name}", {"product_id": product_id})
        self.product_id = product_id


class TransactionNotFoundError(SaleError):
    kind = ErrorKind.TRANSACTION_NOT_FOUND

    def __init__(self, transaction_id: int):
        super().__init__("Transaction not found.", {"transaction_id": transaction_id})


class TransactionStateError(SaleError):
    kind = ErrorKind.TRANSACTION_STATE


class EmptyTransactionError(SaleError):
    kind = ErrorKind.EMPTY_TRANSACTION

    def __init__(self, transaction_id: int):
        super().__init__("Transaction has no items or does not exist.", {"transaction_id": transaction_id})
