# app/schemas/warehouse_schemas.py
from pydantic import BaseModel, field_validator
from typing import List, Optional


class WarehouseCreate(BaseModel):
    name: str
    address: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    def name_not_blank(cls, value):
        if not value or not value.strip():
            raise ValueError("Name is required")
        return value.strip()


class WarehouseUpdate(BaseModel):
    """All fields optional for partial updates."""
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    def name_not_blank(cls, value):
        if value is None:
            raise ValueError("Name cannot be null")
        if not value.strip():
            raise ValueError("Name cannot be blank")
        return value.strip()


class WarehouseOut(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


class WarehouseResponse(BaseModel):
    message: str
    data: Optional[WarehouseOut] = None


class WarehouseListResponse(BaseModel):
    message: str
    data: List[WarehouseOut]
