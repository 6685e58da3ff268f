# pos_backend/domain/sales/history.py
import math
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pos_backend.db.repositories.transactions import (
    PAYMENT_FIELD_SEPARATOR,
    PAYMENT_SEPARATOR,
    get_history_rows,
    get_pending_rows,
)


def parse_payment_summary(summary: Optional[str]) -> List[dict]:
    """Turn ``"cash:300.00;mpesa:200.00"`` into payment dicts.

    Entries without a method or with an unparseable amount are dropped.
    """
    payments = []
    for entry in (summary or "").split(PAYMENT_SEPARATOR):
        method, _, amount = entry.partition(PAYMENT_FIELD_SEPARATOR)
        method = method.strip()
        try:
            value = float(amount)
        except ValueError:
            continue
        if not method or math.isnan(value):
            continue
        payments.append({"method": method, "amount": value})
    return payments


def _item(row) -> dict:
    return {
        "id": row.product_id,
        "name": row.product_name,
        "barcode": row.product_barcode,
        "quantity": row.quantity,
        "price": float(row.price_at_sale),
        "cost_price": float(row.cost_price_at_sale),
    }


async def list_completed_transactions(db: AsyncSession) -> List[dict]:
    """Completed and cancelled sales, newest first, with their items and payments."""
    grouped: Dict[int, dict] = {}
    for row in await get_history_rows(db):
        txn = grouped.get(row.id)
        if txn is None:
            txn = grouped[row.id] = {
                "id": row.id,
                "total": float(row.total_amount),
                "profit": float(row.total_profit),
                "status": row.status,
                "timestamp": row.timestamp,
                "payments": parse_payment_summary(row.payments),
                "items": [],
            }
        txn["items"].append(_item(row))
    return list(grouped.values())


async def list_pending_transactions(db: AsyncSession) -> List[dict]:
    """Held sales, newest first, with their items and current stock levels."""
    grouped: Dict[int, dict] = {}
    for row in await get_pending_rows(db):
        txn = grouped.get(row.id)
        if txn is None:
            txn = grouped[row.id] = {
                "id": row.id,
                "total": float(row.total_amount),
                "customer_name": row.customer_name,
                "status": row.status,
                "timestamp": row.timestamp,
                "items": [],
            }
        item = _item(row)
        item["stock"] = row.stock
        txn["items"].append(item)
    return list(grouped.values())
