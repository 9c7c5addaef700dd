# app/models/stock_movement_models.py
from sqlalchemy import (
    Column, Integer, Text, Numeric, ForeignKey, DateTime, CheckConstraint, Index, Enum, func
)
from sqlalchemy.orm import relationship
from app.core.db import Base
import enum


class MovementType(str, enum.Enum):
    entry = "entry"
    exit = "exit"


# Append-only ledger row; never updated or deleted by the application
class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    type = Column(Enum(MovementType, name="movement_type"), nullable=False)
    quantity = Column(Integer, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    notes = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=True)

    product = relationship("Product", lazy="selectin")
    project = relationship("Project", lazy="selectin")

    __table_args__ = (
        CheckConstraint(quantity > 0, name="check_movement_quantity_positive"),
        Index("stock_movements_product_idx", "product_id"),
        Index("stock_movements_project_idx", "project_id"),
        Index("stock_movements_date_idx", "date"),
    )
