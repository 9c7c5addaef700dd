from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.services.warehouse_service import (
    create_warehouse, get_all_warehouses, get_warehouse, update_warehouse, delete_warehouse
)
from app.schemas.warehouse_schemas import (
    WarehouseCreate, WarehouseUpdate, WarehouseResponse, WarehouseListResponse
)
from app.schemas.product_schemas import MessageResponse

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])


@router.post("", response_model=WarehouseResponse, status_code=status.HTTP_201_CREATED)
async def create_warehouse_route(data: WarehouseCreate, db: AsyncSession = Depends(get_db)):
    return await create_warehouse(db, data)


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(db: AsyncSession = Depends(get_db)):
    return await get_all_warehouses(db)


@router.get("/{warehouse_id}", response_model=WarehouseResponse)
async def get_warehouse_by_id(warehouse_id: int, db: AsyncSession = Depends(get_db)):
    return await get_warehouse(db, warehouse_id)


@router.patch("/{warehouse_id}", response_model=WarehouseResponse)
async def update_warehouse_route(warehouse_id: int, data: WarehouseUpdate, db: AsyncSession = Depends(get_db)):
    return await update_warehouse(db, warehouse_id, data)


@router.delete("/{warehouse_id}", response_model=MessageResponse)
async def delete_warehouse_route(warehouse_id: int, db: AsyncSession = Depends(get_db)):
    return await delete_warehouse(db, warehouse_id)
