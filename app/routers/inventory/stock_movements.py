# app/routers/inventory/stock_movements.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.services.stock_movement_service import record_movement, get_all_movements
from app.schemas.stock_movement_schemas import (
    StockMovementCreate,
    StockMovementResponse,
    StockMovementListResponse,
)

router = APIRouter(prefix="/stock-movements", tags=["Stock Movements"])


@router.get("", response_model=StockMovementListResponse)
async def list_stock_movements(db: AsyncSession = Depends(get_db)):
    """
    All ledger entries, newest first, with product and project.
    """
    return await get_all_movements(db)


@router.post("", response_model=StockMovementResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_movement(data: StockMovementCreate, db: AsyncSession = Depends(get_db)):
    """
    Record a stock entry or exit. Movements cannot be edited or deleted;
    post a compensating movement to correct a mistake.
    """
    return await record_movement(db, data)
