from typing import Dict, Iterable

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from pos_backend.db.models.products import Product


async def get_products_by_ids(
    db: AsyncSession,
    product_ids: Iterable[int],
) -> Dict[int, Product]:
    ids = set(product_ids)
    if not ids:
        return {}
    result = await db.execute(
        select(Product).where(Product.id.in_(ids))
    )
    return {product.id: product for product in result.scalars().all()}


async def decrement_stock_if_available(
    db: AsyncSession,
    product_id: int,
    units: int,
) -> bool:
    """Take ``units`` off the product's stock only if that much is on hand.

    The check and the write are one UPDATE statement, so two concurrent
    sales can never both pass the check against the same row.
    """
    result = await db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock >= units)
        .values(stock=Product.stock - units)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def increment_stock(
    db: AsyncSession,
    product_id: int,
    units: int,
) -> bool:
    result = await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock=Product.stock + units)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0
