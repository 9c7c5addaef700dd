from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.services.project_service import (
    create_project, get_all_projects, get_project, update_project, delete_project
)
from app.schemas.project_schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectListResponse
)
from app.schemas.product_schemas import MessageResponse

router = APIRouter(prefix="/projects", tags=["Projects & Companies"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_route(data: ProjectCreate, db: AsyncSession = Depends(get_db)):
    return await create_project(db, data)


@router.get("", response_model=ProjectListResponse)
async def list_projects(db: AsyncSession = Depends(get_db)):
    return await get_all_projects(db)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project_by_id(project_id: int, db: AsyncSession = Depends(get_db)):
    return await get_project(db, project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project_route(project_id: int, data: ProjectUpdate, db: AsyncSession = Depends(get_db)):
    return await update_project(db, project_id, data)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project_route(project_id: int, db: AsyncSession = Depends(get_db)):
    return await delete_project(db, project_id)
