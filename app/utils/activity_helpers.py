# app/utils/activity_helpers.py
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.activity_models import ActivityLog


async def log_activity(db: AsyncSession, message: str) -> None:
    """
    Adds an activity log entry to the session. The caller commits, so the entry
    lands in the same transaction as the change it describes.
    """
    db.add(ActivityLog(message=message))
