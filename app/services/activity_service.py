# app/services/activity_service.py
from sqlalchemy import select, desc, asc, func
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Tuple
from app.models.activity_models import ActivityLog


async def get_activities(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
    order: str = "desc",
) -> Tuple[int, List[ActivityLog]]:
    sort_order = (desc if order.lower() == "desc" else asc)
    filters = []
    if search:
        filters.append(ActivityLog.message.ilike(f"%{search}%"))

    stmt = select(ActivityLog)
    count_stmt = select(func.count(ActivityLog.id))
    if filters:
        stmt = stmt.where(*filters)
        count_stmt = count_stmt.where(*filters)

    total_result = await db.execute(count_stmt)
    total = total_result.scalar() or 0

    # id breaks ties between entries written in the same second
    stmt = (
        stmt.order_by(sort_order(ActivityLog.created_at), sort_order(ActivityLog.id))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(stmt)
    activities = result.scalars().all()

    return total, activities
