# app/schemas/project_schemas.py
from pydantic import BaseModel, EmailStr, field_validator
from typing import List, Optional
from app.models.project_models import ProjectType


class ProjectCreate(BaseModel):
    name: str
    type: ProjectType = ProjectType.project
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator("name")
    def name_not_blank(cls, value):
        if not value or not value.strip():
            raise ValueError("Name is required")
        return value.strip()


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[ProjectType] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator("name", "type")
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("name")
    def name_not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Name cannot be blank")
        return value.strip() if value else value


class ProjectOut(BaseModel):
    id: int
    name: str
    type: ProjectType
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    class Config:
        from_attributes = True


class ProjectResponse(BaseModel):
    message: str
    data: Optional[ProjectOut] = None


class ProjectListResponse(BaseModel):
    message: str
    data: List[ProjectOut]
