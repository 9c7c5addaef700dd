import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import NotFoundError, ReferentialConflictError, StoreUnavailableError
from app.models.project_models import Project
from app.schemas.project_schemas import ProjectCreate, ProjectUpdate, ProjectOut
from app.utils.activity_helpers import log_activity
from app.utils.db_errors import is_foreign_key_violation

logger = logging.getLogger(__name__)


async def _get_or_404(db: AsyncSession, project_id: int) -> Project:
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalars().first()
    if not project:
        raise NotFoundError("Project not found")
    return project


# ---------------------------
# CREATE PROJECT
# ---------------------------
async def create_project(db: AsyncSession, data: ProjectCreate) -> dict:
    try:
        project = Project(**data.model_dump())
        db.add(project)
        await db.flush()

        await log_activity(db, f"Created {project.type.value} '{project.name}' (ID: {project.id})")

        await db.commit()
        await db.refresh(project)
        return {"message": "Project created successfully", "data": ProjectOut.model_validate(project)}

    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error creating project")
        raise StoreUnavailableError(f"Error creating project: {e}") from e


# ---------------------------
# GET ALL PROJECTS
# ---------------------------
async def get_all_projects(db: AsyncSession) -> dict:
    result = await db.execute(select(Project).order_by(Project.name))
    projects = result.scalars().all()
    return {
        "message": "Projects fetched successfully",
        "data": [ProjectOut.model_validate(p) for p in projects],
    }


# ---------------------------
# GET SINGLE PROJECT
# ---------------------------
async def get_project(db: AsyncSession, project_id: int) -> dict:
    project = await _get_or_404(db, project_id)
    return {"message": "Project fetched successfully", "data": ProjectOut.model_validate(project)}


# ---------------------------
# UPDATE PROJECT
# ---------------------------
async def update_project(db: AsyncSession, project_id: int, data: ProjectUpdate) -> dict:
    try:
        project = await _get_or_404(db, project_id)

        changes = []
        for key, value in data.model_dump(exclude_unset=True).items():
            old_val = getattr(project, key)
            if old_val != value:
                changes.append(f"{key}: {old_val} → {value}")
                setattr(project, key, value)

        if changes:
            await log_activity(
                db,
                f"Updated project '{project.name}' (ID: {project.id}) — {', '.join(changes)}",
            )
            await db.commit()
            await db.refresh(project)

        return {"message": "Project updated successfully", "data": ProjectOut.model_validate(project)}

    except NotFoundError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error updating project %s", project_id)
        raise StoreUnavailableError(f"Error updating project: {e}") from e


# ---------------------------
# DELETE PROJECT
# ---------------------------
async def delete_project(db: AsyncSession, project_id: int) -> dict:
    """
    Hard delete, rejected by the stock_movements.project_id foreign key while
    the ledger references the project.
    """
    try:
        project = await _get_or_404(db, project_id)
        name = project.name

        await db.delete(project)
        await db.flush()

        await log_activity(db, f"Deleted project '{name}' (ID: {project_id})")
        await db.commit()
        return {"message": "Project deleted successfully"}

    except NotFoundError:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        if is_foreign_key_violation(e):
            raise ReferentialConflictError(
                "Project cannot be deleted while stock movements reference it"
            ) from e
        logger.exception("Integrity error deleting project %s", project_id)
        raise StoreUnavailableError(f"Error deleting project: {e.orig}") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error deleting project %s", project_id)
        raise StoreUnavailableError(f"Error deleting project: {e}") from e
