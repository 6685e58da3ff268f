import enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func

from pos_backend.db.base import Base


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    MPESA = "mpesa"
    CARD = "card"


class TransactionPayment(Base):
    """One tender applied to a transaction.

    A sale paid with several tenders (split payment) has one row per tender;
    together they must add up to the transaction total.
    """

    __tablename__ = "transaction_payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)

    method = Column(String(16), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("method IN ('cash', 'mpesa', 'card')", name="ck_transaction_payments_method"),
    )
