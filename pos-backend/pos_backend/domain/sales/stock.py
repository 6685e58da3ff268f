# pos_backend/domain/sales/stock.py
"""Stock mutations shared by every sale operation.

Bundle products never carry stock of their own: selling or returning one
moves ``bundle_quantity`` units of its base product per unit. Deductions go
through a single guarded UPDATE, which is what keeps concurrent sales from
driving stock below zero.
"""
from typing import Mapping, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from pos_backend.db.models.products import Product
from pos_backend.db.repositories.products import decrement_stock_if_available, increment_stock

from .errors import InsufficientStockError, InvalidBundleConfigError, ProductNotFoundError


def base_product_ids(products: Mapping[int, Product]):
    return {p.base_product_id for p in products.values() if p.is_bundle and p.base_product_id}


def resolve_stock_target(
    product: Product,
    catalog: Mapping[int, Product],
) -> Tuple[int, int]:
    """Return ``(product id whose stock moves, base units per unit sold)``.

    Bundles must point at an existing product that is not itself a bundle.
    """
    if not product.is_bundle:
        return product.id, 1

    if not product.base_product_id or not product.bundle_quantity or product.bundle_quantity <= 0:
        raise InvalidBundleConfigError(product.id, product.name)

    base = catalog.get(product.base_product_id)
    if base is None or base.is_bundle:
        raise InvalidBundleConfigError(product.id, product.name)

    return base.id, product.bundle_quantity


async def deduct_stock(
    db: AsyncSession,
    product: Product,
    quantity: int,
    catalog: Mapping[int, Product],
) -> None:
    target_id, per_unit = resolve_stock_target(product, catalog)
    units = per_unit * quantity
    if not await decrement_stock_if_available(db, target_id, units):
        raise InsufficientStockError(product.id, product.name)


async def restore_stock(
    db: AsyncSession,
    product: Product,
    quantity: int,
    catalog: Mapping[int, Product],
) -> None:
    target_id, per_unit = resolve_stock_target(product, catalog)
    if not await increment_stock(db, target_id, per_unit * quantity):
        raise ProductNotFoundError(target_id)
