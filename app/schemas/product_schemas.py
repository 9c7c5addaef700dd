# app/schemas/product_schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.schemas.warehouse_schemas import WarehouseOut


# --------------------------
# Schema for creating Product
# --------------------------
class ProductCreate(BaseModel):
    stock_code: str
    product_type: str
    name: str
    description: Optional[str] = None
    # Opening stock; later changes go through stock movements only
    quantity: int = 0
    barcode: Optional[str] = None
    warehouse_id: int
    entry_price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    exit_price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    entry_date: Optional[datetime] = None

    @field_validator("stock_code", "product_type", "name")
    def required_text(cls, value):
        if not value or not value.strip():
            raise ValueError("Field is required")
        return value.strip()

    @field_validator("quantity", "entry_price", "exit_price")
    def non_negative_values(cls, value):
        """
        Ensure numeric fields are non-negative.
        """
        if value < 0:
            raise ValueError("Must be non-negative")
        return value


# --------------------------
# Schema for updating Product
# --------------------------
class ProductUpdate(BaseModel):
    """
    All fields optional for partial updates. Quantity is deliberately absent:
    unknown fields are rejected, so stock can only change through the ledger.
    """
    model_config = ConfigDict(extra="forbid")

    stock_code: Optional[str] = None
    product_type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    barcode: Optional[str] = None
    warehouse_id: Optional[int] = None
    entry_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    exit_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    entry_date: Optional[datetime] = None

    # Omitted fields keep their value; an explicit null on a NOT NULL column is rejected
    @field_validator("stock_code", "product_type", "name", "entry_price", "exit_price", "entry_date")
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("stock_code", "product_type", "name")
    def required_text(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Field cannot be blank")
        return value.strip() if value else value

    @field_validator("entry_price", "exit_price")
    def non_negative_values(cls, value):
        if value is not None and value < 0:
            raise ValueError("Must be non-negative")
        return value


# --------------------------
# Photo schemas
# --------------------------
class ProductPhotoOut(BaseModel):
    id: int
    product_id: int
    url: str
    filename: str
    is_main: bool

    class Config:
        from_attributes = True


class ProductPhotoResponse(BaseModel):
    message: str
    data: Optional[ProductPhotoOut] = None


class ProductPhotoListResponse(BaseModel):
    message: str
    data: List[ProductPhotoOut]


# --------------------------
# Output schemas for Product
# --------------------------
class ProductSummary(BaseModel):
    id: int
    stock_code: str
    product_type: str
    name: str
    description: Optional[str] = None
    quantity: int
    barcode: Optional[str] = None
    warehouse_id: Optional[int] = None
    entry_price: Decimal
    exit_price: Decimal
    entry_date: Optional[datetime] = None
    main_photo_id: Optional[int] = None

    class Config:
        from_attributes = True


class ProductOut(ProductSummary):
    warehouse: Optional[WarehouseOut] = None
    photos: List[ProductPhotoOut] = []


# --------------------------
# Response schemas
# --------------------------
class ProductResponse(BaseModel):
    message: str
    data: Optional[ProductOut] = None


class ProductListResponse(BaseModel):
    message: str
    data: List[ProductOut]


# --------------------------
# Generic Message Response
# --------------------------
class MessageResponse(BaseModel):
    message: str
