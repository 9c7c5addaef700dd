# app/routers/inventory/activity.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.db import get_db
from app.services.activity_service import get_activities
from app.schemas.activity_schemas import ActivityOut, ActivityListResponse

router = APIRouter(prefix="/activity", tags=["Activity Log"])


@router.get("", response_model=ActivityListResponse)
async def list_activities(
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    order: str = Query("desc"),
):
    """
    Fetch activity log entries with pagination and text search.
    """
    total, activities = await get_activities(
        db=db,
        search=search,
        page=page,
        page_size=page_size,
        order=order,
    )

    return ActivityListResponse(
        message="Activities fetched successfully",
        total=total,
        data=[ActivityOut.model_validate(a) for a in activities],
    )
