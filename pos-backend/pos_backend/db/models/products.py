from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func

from pos_backend.db.base import Base


class Product(Base):
    """Represents a sellable catalog entry.

    Regular products track their own on-hand ``stock``. Bundle products
    (``is_bundle``) are sold as ``bundle_quantity`` units of the product
    referenced by ``base_product_id``; their own ``stock`` column is not
    authoritative and is never touched by sales or cancellations.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    barcode = Column(String, nullable=True, unique=True)

    price = Column(Numeric(12, 2), nullable=False)
    cost_price = Column("costPrice", Numeric(12, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)

    is_bundle = Column(Boolean, nullable=False, default=False)
    base_product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    bundle_quantity = Column(Integer, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("bundle_quantity IS NULL OR bundle_quantity > 0", name="ck_products_bundle_quantity"),
    )
