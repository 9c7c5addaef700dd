# app/services/stock_movement_service.py
import logging
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    NotFoundError,
    ValidationError,
    InsufficientStockError,
    StoreUnavailableError,
)
from app.models.product_models import Product
from app.models.project_models import Project
from app.models.stock_movement_models import StockMovement, MovementType
from app.schemas.stock_movement_schemas import StockMovementCreate, StockMovementOut
from app.utils.activity_helpers import log_activity
from app.utils.locks import product_lock

logger = logging.getLogger(__name__)


async def _load_movement(db: AsyncSession, movement_id: int) -> StockMovement:
    result = await db.execute(
        select(StockMovement)
        .where(StockMovement.id == movement_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


# --------------------------
# RECORD STOCK MOVEMENT
# --------------------------
async def record_movement(db: AsyncSession, data: StockMovementCreate) -> dict:
    """
    Append a movement to the ledger and apply its signed quantity to the product
    in the same transaction.

    The check and the write for one product are serialized three ways: a per-product
    asyncio lock in this process, a FOR UPDATE row lock where the database supports
    it, and an UPDATE guarded on the resulting quantity staying non-negative. The
    row count of that UPDATE is what admits or rejects an exit.
    """
    if data.quantity <= 0:
        raise ValidationError("Quantity must be positive")

    delta = data.quantity if data.type == MovementType.entry else -data.quantity

    async with product_lock(data.product_id):
        try:
            result = await db.execute(
                select(Product)
                .where(Product.id == data.product_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            product = result.scalars().first()
            if not product:
                raise NotFoundError("Product not found")

            if data.project_id is not None:
                project = await db.get(Project, data.project_id)
                if not project:
                    raise NotFoundError("Project not found")

            if product.quantity + delta < 0:
                raise InsufficientStockError(product.quantity, data.quantity)

            guarded = await db.execute(
                update(Product)
                .where(Product.id == data.product_id, Product.quantity + delta >= 0)
                .values(quantity=Product.quantity + delta)
                .execution_options(synchronize_session=False)
            )
            if guarded.rowcount != 1:
                # Another writer got there first; report against the committed value
                current = await db.scalar(select(Product.quantity).where(Product.id == data.product_id))
                raise InsufficientStockError(current or 0, data.quantity)

            movement = StockMovement(**data.model_dump(exclude_none=True))
            db.add(movement)
            await db.flush()

            await log_activity(
                db,
                f"Recorded {data.type.value} of {data.quantity} for product '{product.stock_code}' "
                f"(ID: {product.id}), movement ID {movement.id}",
            )

            await db.commit()
            await db.refresh(product)

        except (NotFoundError, InsufficientStockError):
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception("Error recording stock movement for product %s", data.product_id)
            raise StoreUnavailableError(f"Error recording stock movement: {e}") from e

    logger.info(
        "Stock %s of %s recorded for product %s (movement %s)",
        data.type.value, data.quantity, data.product_id, movement.id,
    )
    movement = await _load_movement(db, movement.id)
    return {"message": "Stock movement recorded successfully", "data": StockMovementOut.model_validate(movement)}


# --------------------------
# GET ALL STOCK MOVEMENTS
# --------------------------
async def get_all_movements(db: AsyncSession) -> dict:
    result = await db.execute(
        select(StockMovement).order_by(StockMovement.date.desc(), StockMovement.id.desc())
    )
    movements = result.scalars().all()
    return {
        "message": "Stock movements fetched successfully",
        "data": [StockMovementOut.model_validate(m) for m in movements],
    }


# --------------------------
# GET STOCK MOVEMENTS FOR PRODUCT
# --------------------------
async def get_product_movements(db: AsyncSession, product_id: int) -> dict:
    result = await db.execute(
        select(StockMovement)
        .where(StockMovement.product_id == product_id)
        .order_by(StockMovement.date.desc(), StockMovement.id.desc())
    )
    movements = result.scalars().all()
    return {
        "message": "Stock movements fetched successfully",
        "data": [StockMovementOut.model_validate(m) for m in movements],
    }
