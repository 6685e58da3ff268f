# pos_backend/domain/sales/service.py
"""Sale reconciliation: checkout, hold, completion of held sales and cancellation.

Every operation runs on the session it is given and either commits all of its
writes or rolls all of them back before re-raising.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from pos_backend.db.models.line_items import TransactionItem
from pos_backend.db.models.payments import TransactionPayment
from pos_backend.db.models.products import Product
from pos_backend.db.models.transactions import Transaction, TransactionStatus
from pos_backend.db.repositories import transactions as ledger
from pos_backend.db.repositories.products import get_products_by_ids

from .errors import (
    EmptyTransactionError,
    PaymentMismatchError,
    ProductNotFoundError,
    TransactionNotFoundError,
    TransactionStateError,
    ValidationError,
)
from .schemas import CartItem, CompletePending, HoldSaleCreate, PaymentIn, TransactionCreate
from .stock import base_product_ids, deduct_stock, restore_stock

logger = logging.getLogger(__name__)

PAYMENT_TOLERANCE = Decimal("0.01")


async def _load_catalog(db: AsyncSession, product_ids) -> Dict[int, Product]:
    """Products for ``product_ids`` plus the base products of any bundles among them."""
    catalog = await get_products_by_ids(db, product_ids)
    missing_bases = base_product_ids(catalog) - catalog.keys()
    if missing_bases:
        catalog.update(await get_products_by_ids(db, missing_bases))
    return catalog


def _price_cart(items: List[CartItem], catalog: Dict[int, Product]) -> Tuple[Decimal, Decimal]:
    total_amount = Decimal("0")
    total_profit = Decimal("0")
    for item in items:
        product = catalog.get(item.id)
        if product is None or not product.is_active:
            raise ProductNotFoundError(item.id, item.name)
        total_amount += item.price * item.quantity
        total_profit += (item.price - Decimal(product.cost_price)) * item.quantity
    return total_amount, total_profit


def _check_payments(total_amount: Decimal, payments: List[PaymentIn]) -> None:
    total_paid = sum((p.amount for p in payments), Decimal("0"))
    if abs(Decimal(total_amount) - total_paid) > PAYMENT_TOLERANCE:
        raise PaymentMismatchError(total_amount, total_paid)


def _add_payments(db: AsyncSession, transaction_id: int, payments: List[PaymentIn]) -> None:
    for payment in payments:
        db.add(TransactionPayment(
            transaction_id=transaction_id,
            method=payment.method.value,
            amount=payment.amount,
        ))


def _add_line_items(
    db: AsyncSession,
    transaction_id: int,
    items: List[CartItem],
    catalog: Dict[int, Product],
) -> None:
    for item in items:
        db.add(TransactionItem(
            transaction_id=transaction_id,
            product_id=item.id,
            quantity=item.quantity,
            price_at_sale=item.price,
            cost_price_at_sale=catalog[item.id].cost_price,
        ))


async def complete_sale(
    db: AsyncSession,
    data: TransactionCreate,
    user_id: Optional[int],
) -> int:
    """Record a paid sale and take its items out of stock."""
    if not data.items or not data.payments or not user_id:
        raise ValidationError("Missing required transaction data.")

    try:
        catalog = await _load_catalog(db, (item.id for item in data.items))
        total_amount, total_profit = _price_cart(data.items, catalog)
        _check_payments(total_amount, data.payments)

        txn = Transaction(
            user_id=user_id,
            total_amount=total_amount,
            total_profit=total_profit,
            status=TransactionStatus.COMPLETED.value,
            completed_at=func.now(),
        )
        db.add(txn)
        await db.flush()

        _add_payments(db, txn.id, data.payments)
        _add_line_items(db, txn.id, data.items, catalog)
        await db.flush()

        for item in data.items:
            await deduct_stock(db, catalog[item.id], item.quantity, catalog)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Sale %s completed by user %s: total=%s", txn.id, user_id, total_amount)
    return txn.id


async def hold_sale(
    db: AsyncSession,
    data: HoldSaleCreate,
    user_id: Optional[int],
) -> int:
    """Record a pending (credit) sale; stock stays untouched until it is completed."""
    customer_name = (data.customer_name or "").strip()
    if not data.items or not customer_name or not user_id:
        raise ValidationError("Missing required data for holding a sale.")

    try:
        catalog = await get_products_by_ids(db, (item.id for item in data.items))
        total_amount, total_profit = _price_cart(data.items, catalog)

        txn = Transaction(
            user_id=user_id,
            total_amount=total_amount,
            total_profit=total_profit,
            customer_name=customer_name,
            status=TransactionStatus.PENDING.value,
        )
        db.add(txn)
        await db.flush()

        _add_line_items(db, txn.id, data.items, catalog)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Sale %s held for %r by user %s", txn.id, customer_name, user_id)
    return txn.id


async def complete_pending_transaction(
    db: AsyncSession,
    transaction_id: int,
    data: CompletePending,
) -> None:
    """Take payment for a held sale and deduct its stock."""
    if not data.payments:
        raise ValidationError("Payment method is required to complete the sale.")

    try:
        lines = await ledger.get_line_items_with_products(db, transaction_id)
        if not lines:
            raise EmptyTransactionError(transaction_id)

        for line, product in lines:
            if product is None:
                raise ProductNotFoundError(line.product_id)

        txn = await ledger.get_transaction_for_update(db, transaction_id)
        if txn is None or txn.status != TransactionStatus.PENDING.value:
            raise TransactionStateError(
                "Pending sale could not be found or was already completed.",
                {"transaction_id": transaction_id},
            )
        _check_payments(txn.total_amount, data.payments)

        catalog = await _load_catalog(db, (line.product_id for line, _ in lines))

        for line, _ in lines:
            await deduct_stock(db, catalog[line.product_id], line.quantity, catalog)

        _add_payments(db, transaction_id, data.payments)
        await db.flush()

        completed = await ledger.set_status_if_current(
            db,
            transaction_id,
            TransactionStatus.PENDING,
            TransactionStatus.COMPLETED,
            completed_at=func.now(),
        )
        if not completed:
            raise TransactionStateError(
                "Pending sale could not be found or was already completed.",
                {"transaction_id": transaction_id},
            )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Pending sale %s completed", transaction_id)


async def cancel_transaction(db: AsyncSession, transaction_id: int) -> None:
    """Cancel a completed sale and put its items back into stock."""
    try:
        txn = await ledger.get_transaction_for_update(db, transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_id)
        if txn.status != TransactionStatus.COMPLETED.value:
            raise TransactionStateError(
                f"Cannot cancel a transaction with status: {txn.status}",
                {"transaction_id": transaction_id, "status": txn.status},
            )

        lines = await ledger.get_line_items_with_products(db, transaction_id)
        for line, product in lines:
            if product is None:
                raise ProductNotFoundError(line.product_id)

        catalog = await _load_catalog(db, (line.product_id for line, _ in lines))
        for line, _ in lines:
            await restore_stock(db, catalog[line.product_id], line.quantity, catalog)

        cancelled = await ledger.set_status_if_current(
            db,
            transaction_id,
            TransactionStatus.COMPLETED,
            TransactionStatus.CANCELLED,
            cancelled_at=func.now(),
        )
        if not cancelled:
            raise TransactionStateError(
                "Transaction could not be found or was already cancelled.",
                {"transaction_id": transaction_id},
            )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Sale %s cancelled, stock restored", transaction_id)


async def delete_pending_transaction(db: AsyncSession, transaction_id: int) -> bool:
    """Drop a held sale outright. Returns False if no such pending sale exists."""
    try:
        deleted = await ledger.delete_pending_transaction(db, transaction_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    if deleted:
        logger.info("Pending sale %s removed", transaction_id)
    return deleted
