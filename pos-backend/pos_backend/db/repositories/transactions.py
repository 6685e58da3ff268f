from typing import List, Optional, Sequence, Tuple

from sqlalchemy import String, cast, delete, update
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func, select

from pos_backend.db.models.line_items import TransactionItem
from pos_backend.db.models.payments import TransactionPayment
from pos_backend.db.models.products import Product
from pos_backend.db.models.transactions import Transaction, TransactionStatus

PAYMENT_SEPARATOR = ";"
PAYMENT_FIELD_SEPARATOR = ":"


async def get_transaction_for_update(
    db: AsyncSession,
    transaction_id: int,
) -> Optional[Transaction]:
    """Fetch a transaction and lock its row until the surrounding commit.

    SQLite ignores FOR UPDATE; other backends honor it.
    """
    result = await db.execute(
        select(Transaction)
        .where(Transaction.id == transaction_id)
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def get_line_items_with_products(
    db: AsyncSession,
    transaction_id: int,
) -> List[Tuple[TransactionItem, Optional[Product]]]:
    """Line items of a transaction paired with their current catalog record."""
    result = await db.execute(
        select(TransactionItem, Product)
        .outerjoin(Product, TransactionItem.product_id == Product.id)
        .where(TransactionItem.transaction_id == transaction_id)
        .order_by(TransactionItem.id)
    )
    return [(row[0], row[1]) for row in result.all()]


async def set_status_if_current(
    db: AsyncSession,
    transaction_id: int,
    current: TransactionStatus,
    new: TransactionStatus,
    **values,
) -> bool:
    """Move a transaction from ``current`` to ``new`` status in one statement."""
    result = await db.execute(
        update(Transaction)
        .where(Transaction.id == transaction_id, Transaction.status == current.value)
        .values(status=new.value, **values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def delete_pending_transaction(
    db: AsyncSession,
    transaction_id: int,
) -> bool:
    txn = await get_transaction_for_update(db, transaction_id)
    if txn is None or txn.status != TransactionStatus.PENDING.value:
        return False

    await db.execute(
        delete(TransactionItem).where(TransactionItem.transaction_id == transaction_id)
    )
    await db.execute(
        delete(Transaction)
        .where(Transaction.id == transaction_id, Transaction.status == TransactionStatus.PENDING.value)
        .execution_options(synchronize_session=False)
    )
    return True


def _payments_summary():
    """Correlated subquery folding a transaction's payments into ``method:amount;...``."""
    entry = TransactionPayment.method.concat(PAYMENT_FIELD_SEPARATOR).concat(
        cast(TransactionPayment.amount, String)
    )
    return (
        select(func.aggregate_strings(entry, PAYMENT_SEPARATOR))
        .where(TransactionPayment.transaction_id == Transaction.id)
        .correlate(Transaction)
        .scalar_subquery()
    )


async def get_history_rows(db: AsyncSession) -> Sequence[Row]:
    """Flat rows (one per line item) of completed and cancelled transactions."""
    result = await db.execute(
        select(
            Transaction.id,
            Transaction.total_amount,
            Transaction.total_profit,
            Transaction.status,
            Transaction.created_at.label("timestamp"),
            TransactionItem.product_id,
            TransactionItem.quantity,
            TransactionItem.price_at_sale,
            TransactionItem.cost_price_at_sale,
            Product.name.label("product_name"),
            Product.barcode.label("product_barcode"),
            _payments_summary().label("payments"),
        )
        .join(TransactionItem, TransactionItem.transaction_id == Transaction.id)
        .join(Product, TransactionItem.product_id == Product.id)
        .where(Transaction.status.in_([
            TransactionStatus.COMPLETED.value,
            TransactionStatus.CANCELLED.value,
        ]))
        .order_by(Transaction.created_at.desc(), Transaction.id.desc(), TransactionItem.id)
    )
    return result.all()


async def get_pending_rows(db: AsyncSession) -> Sequence[Row]:
    """Flat rows (one per line item) of held transactions."""
    result = await db.execute(
        select(
            Transaction.id,
            Transaction.total_amount,
            Transaction.customer_name,
            Transaction.status,
            Transaction.created_at.label("timestamp"),
            TransactionItem.product_id,
            TransactionItem.quantity,
            TransactionItem.price_at_sale,
            TransactionItem.cost_price_at_sale,
            Product.name.label("product_name"),
            Product.barcode.label("product_barcode"),
            Product.stock,
        )
        .join(TransactionItem, TransactionItem.transaction_id == Transaction.id)
        .join(Product, TransactionItem.product_id == Product.id)
        .where(Transaction.status == TransactionStatus.PENDING.value)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc(), TransactionItem.id)
    )
    return result.all()
