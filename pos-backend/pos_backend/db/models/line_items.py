from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric

from pos_backend.db.base import Base


class TransactionItem(Base):
    """Represents a single product line within a transaction.

    Price and cost are frozen at the time of sale so that reporting and
    profit figures do not depend on later catalog changes.
    """

    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    price_at_sale = Column(Numeric(12, 2), nullable=False)
    cost_price_at_sale = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        Index("ix_transaction_items_transaction", "transaction_id"),
    )
