# app/models/product_models.py
from sqlalchemy import (
    Column, Integer, String, Text, Numeric, Boolean, CheckConstraint, Index,
    ForeignKey, DateTime, func
)
from sqlalchemy.orm import relationship
from app.core.db import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    stock_code = Column(String(100), nullable=False, unique=True)
    product_type = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Running total; only the stock ledger changes it after creation
    quantity = Column(Integer, default=0, nullable=False)
    barcode = Column(String(100), nullable=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=True)
    entry_price = Column(Numeric(10, 2), default=0, nullable=False)
    exit_price = Column(Numeric(10, 2), default=0, nullable=False)
    entry_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # Mirrors the photo flagged is_main; no FK to avoid a products <-> product_photos cycle
    main_photo_id = Column(Integer, nullable=True)

    warehouse = relationship("Warehouse", lazy="selectin")
    photos = relationship(
        "ProductPhoto",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProductPhoto.id",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(quantity >= 0, name="check_product_quantity_non_negative"),
        CheckConstraint(entry_price >= 0, name="check_product_entry_price_non_negative"),
        CheckConstraint(exit_price >= 0, name="check_product_exit_price_non_negative"),
        Index("products_barcode_idx", "barcode"),
        Index("products_stock_code_idx", "stock_code"),
        Index("products_warehouse_idx", "warehouse_id"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, stock_code='{self.stock_code}', quantity={self.quantity})>"


class ProductPhoto(Base):
    __tablename__ = "product_photos"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(500), nullable=False)
    filename = Column(String(255), nullable=False)
    is_main = Column(Boolean, default=False, nullable=False)

    product = relationship("Product", back_populates="photos")
