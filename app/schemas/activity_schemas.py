# app/schemas/activity_schemas.py
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class ActivityOut(BaseModel):
    id: int
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    message: str
    total: int
    data: List[ActivityOut]
