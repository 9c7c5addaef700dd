import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import NotFoundError, ReferentialConflictError, StoreUnavailableError
from app.models.warehouse_models import Warehouse
from app.schemas.warehouse_schemas import WarehouseCreate, WarehouseUpdate, WarehouseOut
from app.utils.activity_helpers import log_activity
from app.utils.db_errors import is_foreign_key_violation

logger = logging.getLogger(__name__)


async def _get_or_404(db: AsyncSession, warehouse_id: int) -> Warehouse:
    result = await db.execute(select(Warehouse).where(Warehouse.id == warehouse_id))
    warehouse = result.scalars().first()
    if not warehouse:
        raise NotFoundError("Warehouse not found")
    return warehouse


# ---------------------------
# CREATE WAREHOUSE
# ---------------------------
async def create_warehouse(db: AsyncSession, data: WarehouseCreate) -> dict:
    try:
        warehouse = Warehouse(**data.model_dump())
        db.add(warehouse)
        await db.flush()  # ensures warehouse.id is available

        await log_activity(db, f"Created warehouse '{warehouse.name}' (ID: {warehouse.id})")

        await db.commit()
        await db.refresh(warehouse)
        return {"message": "Warehouse created successfully", "data": WarehouseOut.model_validate(warehouse)}

    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error creating warehouse")
        raise StoreUnavailableError(f"Error creating warehouse: {e}") from e


# ---------------------------
# GET ALL WAREHOUSES
# ---------------------------
async def get_all_warehouses(db: AsyncSession) -> dict:
    result = await db.execute(select(Warehouse).order_by(Warehouse.name))
    warehouses = result.scalars().all()
    return {
        "message": "Warehouses fetched successfully",
        "data": [WarehouseOut.model_validate(w) for w in warehouses],
    }


# ---------------------------
# GET SINGLE WAREHOUSE
# ---------------------------
async def get_warehouse(db: AsyncSession, warehouse_id: int) -> dict:
    warehouse = await _get_or_404(db, warehouse_id)
    return {"message": "Warehouse fetched successfully", "data": WarehouseOut.model_validate(warehouse)}


# ---------------------------
# UPDATE WAREHOUSE
# ---------------------------
async def update_warehouse(db: AsyncSession, warehouse_id: int, data: WarehouseUpdate) -> dict:
    try:
        warehouse = await _get_or_404(db, warehouse_id)

        changes = []
        for key, value in data.model_dump(exclude_unset=True).items():
            old_val = getattr(warehouse, key)
            if old_val != value:
                changes.append(f"{key}: {old_val} → {value}")
                setattr(warehouse, key, value)

        if changes:
            await log_activity(
                db,
                f"Updated warehouse '{warehouse.name}' (ID: {warehouse.id}) — {', '.join(changes)}",
            )
            await db.commit()
            await db.refresh(warehouse)

        return {"message": "Warehouse updated successfully", "data": WarehouseOut.model_validate(warehouse)}

    except NotFoundError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error updating warehouse %s", warehouse_id)
        raise StoreUnavailableError(f"Error updating warehouse: {e}") from e


# ---------------------------
# DELETE WAREHOUSE
# ---------------------------
async def delete_warehouse(db: AsyncSession, warehouse_id: int) -> dict:
    """
    Hard delete. The products.warehouse_id foreign key rejects the delete while
    any product still points at the warehouse.
    """
    try:
        warehouse = await _get_or_404(db, warehouse_id)
        name = warehouse.name

        await db.delete(warehouse)
        await db.flush()

        await log_activity(db, f"Deleted warehouse '{name}' (ID: {warehouse_id})")
        await db.commit()
        return {"message": "Warehouse deleted successfully"}

    except NotFoundError:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        if is_foreign_key_violation(e):
            raise ReferentialConflictError(
                "Warehouse cannot be deleted while products are assigned to it"
            ) from e
        logger.exception("Integrity error deleting warehouse %s", warehouse_id)
        raise StoreUnavailableError(f"Error deleting warehouse: {e.orig}") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error deleting warehouse %s", warehouse_id)
        raise StoreUnavailableError(f"Error deleting warehouse: {e}") from e
