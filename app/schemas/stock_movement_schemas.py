# app/schemas/stock_movement_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.models.stock_movement_models import MovementType
from app.schemas.product_schemas import ProductSummary
from app.schemas.project_schemas import ProjectOut


class StockMovementCreate(BaseModel):
    product_id: int
    type: MovementType
    quantity: int = Field(gt=0)
    project_id: Optional[int] = None
    notes: Optional[str] = None
    unit_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    date: Optional[datetime] = None


class StockMovementOut(BaseModel):
    id: int
    product_id: int
    type: MovementType
    quantity: int
    project_id: Optional[int] = None
    notes: Optional[str] = None
    date: Optional[datetime] = None
    unit_price: Optional[Decimal] = None
    product: Optional[ProductSummary] = None
    project: Optional[ProjectOut] = None

    class Config:
        from_attributes = True


class StockMovementResponse(BaseModel):
    message: str
    data: Optional[StockMovementOut] = None


class StockMovementListResponse(BaseModel):
    message: str
    data: List[StockMovementOut]
