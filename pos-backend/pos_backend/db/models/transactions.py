import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, Numeric, String
from sqlalchemy.sql import func

from pos_backend.db.base import Base


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Transaction(Base):
    """Represents a single sale (receipt header).

    A transaction is either held as ``pending`` (credit / lay-by sale with a
    customer name and no payments yet) or recorded directly as ``completed``.
    Completed sales can later be ``cancelled``; cancellation keeps the row and
    its line items for auditing.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False)

    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total_profit = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(16), nullable=False, default=TransactionStatus.PENDING.value)
    customer_name = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'completed', 'cancelled')", name="ck_transactions_status"),
        Index("ix_transactions_status_created", "status", "created_at"),
    )
