# app/services/product_service.py
import logging
from sqlalchemy import update, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.config import MAX_PHOTOS_PER_PRODUCT, MAX_PHOTO_SIZE_BYTES, ALLOWED_PHOTO_TYPES
from app.core.exceptions import (
    NotFoundError,
    ValidationError,
    DuplicateStockCodeError,
    TooManyPhotosError,
    InvalidFileTypeError,
    StoreUnavailableError,
)
from app.models.product_models import Product, ProductPhoto
from app.models.warehouse_models import Warehouse
from app.schemas.product_schemas import ProductCreate, ProductUpdate, ProductOut, ProductPhotoOut
from app.utils.activity_helpers import log_activity
from app.utils.db_errors import is_unique_violation
from app.utils.file_storage import LocalFileStorage
from app.utils.locks import product_lock

logger = logging.getLogger(__name__)


# ---------------------------------------------------
# HELPERS
# ---------------------------------------------------
async def _load_product(db: AsyncSession, product_id: int) -> Product | None:
    """Fetch a product with warehouse and photos, bypassing stale identity-map state."""
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def _get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    product = await _load_product(db, product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


async def _ensure_warehouse(db: AsyncSession, warehouse_id: int) -> None:
    if await db.get(Warehouse, warehouse_id) is None:
        raise ValidationError(f"Warehouse {warehouse_id} does not exist")


async def _ensure_unique_stock_code(db: AsyncSession, stock_code: str, exclude_id: int | None = None) -> None:
    stmt = select(Product.id).where(Product.stock_code == stock_code)
    if exclude_id is not None:
        stmt = stmt.where(Product.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise DuplicateStockCodeError(stock_code)


async def _apply_main_photo(db: AsyncSession, product_id: int, photo_id: int | None) -> None:
    """
    Clear every main flag on the product's photos, flag the target and mirror it
    on the product. Runs inside the caller's transaction; the three writes commit
    or roll back together.
    """
    await db.execute(
        update(ProductPhoto)
        .where(ProductPhoto.product_id == product_id)
        .values(is_main=False)
    )
    if photo_id is not None:
        await db.execute(
            update(ProductPhoto)
            .where(ProductPhoto.id == photo_id)
            .values(is_main=True)
        )
    await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(main_photo_id=photo_id)
    )


def _remove_files(storage: LocalFileStorage, filenames: list[str]) -> None:
    orphaned = [f for f in filenames if not storage.delete(f)]
    if orphaned:
        logger.warning("Rows deleted but %d photo file(s) remain on disk: %s", len(orphaned), orphaned)


# ---------------------------------------------------
# CREATE PRODUCT
# ---------------------------------------------------
async def create_product(db: AsyncSession, data: ProductCreate) -> dict:
    """
    Create a product. The supplied quantity is the opening stock baseline;
    no ledger movement is written for it.
    """
    try:
        await _ensure_warehouse(db, data.warehouse_id)
        await _ensure_unique_stock_code(db, data.stock_code)

        product = Product(**data.model_dump(exclude_none=True))
        db.add(product)
        await db.flush()  # ensures product.id is available

        await log_activity(
            db,
            f"Created product '{product.name}' [{product.stock_code}] (ID: {product.id}) "
            f"with opening stock {product.quantity}",
        )

        await db.commit()

    except (ValidationError, DuplicateStockCodeError):
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e, "stock_code"):
            raise DuplicateStockCodeError(data.stock_code) from e
        logger.exception("Integrity error creating product")
        raise StoreUnavailableError(f"Error creating product: {e.orig}") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error creating product")
        raise StoreUnavailableError(f"Error creating product: {e}") from e

    product = await _load_product(db, product.id)
    return {"message": "Product created successfully", "data": ProductOut.model_validate(product)}


# ---------------------------------------------------
# GET ALL PRODUCTS
# ---------------------------------------------------
async def get_all_products(db: AsyncSession) -> dict:
    """
    Fetch all products with their warehouse and photos, newest entries first.
    """
    result = await db.execute(select(Product).order_by(Product.entry_date.desc(), Product.id.desc()))
    products = result.scalars().all()
    return {
        "message": "Products fetched successfully",
        "data": [ProductOut.model_validate(p) for p in products],
    }


# ---------------------------------------------------
# GET SINGLE PRODUCT
# ---------------------------------------------------
async def get_product(db: AsyncSession, product_id: int) -> dict:
    product = await _get_product_or_404(db, product_id)
    return {"message": "Product fetched successfully", "data": ProductOut.model_validate(product)}


async def get_product_by_barcode(db: AsyncSession, barcode: str) -> dict:
    result = await db.execute(select(Product).where(Product.barcode == barcode).order_by(Product.id))
    product = result.scalars().first()
    if not product:
        raise NotFoundError("Product not found")
    return {"message": "Product fetched successfully", "data": ProductOut.model_validate(product)}


# ---------------------------------------------------
# UPDATE PRODUCT
# ---------------------------------------------------
async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> dict:
    """
    Partial update of catalog fields. Quantity is not part of ProductUpdate;
    stock changes go through record_movement.
    """
    try:
        product = await _get_product_or_404(db, product_id)
        fields = data.model_dump(exclude_unset=True)

        if fields.get("stock_code") and fields["stock_code"] != product.stock_code:
            await _ensure_unique_stock_code(db, fields["stock_code"], exclude_id=product_id)
        if fields.get("warehouse_id") is not None:
            await _ensure_warehouse(db, fields["warehouse_id"])

        changes = []
        for key, value in fields.items():
            old_val = getattr(product, key)
            if old_val != value:
                changes.append(f"{key}: {old_val} → {value}")
                setattr(product, key, value)

        if changes:
            await db.flush()
            await log_activity(
                db,
                f"Updated product '{product.name}' (ID: {product.id}) — {', '.join(changes)}",
            )
            await db.commit()

    except (NotFoundError, ValidationError, DuplicateStockCodeError):
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e, "stock_code"):
            raise DuplicateStockCodeError(data.stock_code) from e
        logger.exception("Integrity error updating product %s", product_id)
        raise StoreUnavailableError(f"Error updating product: {e.orig}") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error updating product %s", product_id)
        raise StoreUnavailableError(f"Error updating product: {e}") from e

    product = await _load_product(db, product_id)
    return {"message": "Product updated successfully", "data": ProductOut.model_validate(product)}


# ---------------------------------------------------
# DELETE PRODUCT
# ---------------------------------------------------
async def delete_product(db: AsyncSession, storage: LocalFileStorage, product_id: int) -> dict:
    """
    Delete the product; photos and stock movements go with it through the
    ON DELETE CASCADE foreign keys. Photo files are removed only after the
    rows are committed, so a failed commit never leaves rows without files.
    """
    try:
        product = await _get_product_or_404(db, product_id)
        filenames = [p.filename for p in product.photos]
        label = f"'{product.name}' [{product.stock_code}]"

        await db.delete(product)
        await db.flush()

        await log_activity(db, f"Deleted product {label} (ID: {product_id}) and {len(filenames)} photo(s)")
        await db.commit()

    except NotFoundError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Error deleting product %s", product_id)
        raise StoreUnavailableError(f"Error deleting product: {e}") from e

    _remove_files(storage, filenames)
    logger.info("Deleted product %s with %d photo(s)", product_id, len(filenames))
    return {"message": "Product deleted successfully"}


# ---------------------------------------------------
# PHOTOS
# ---------------------------------------------------
async def get_product_photos(db: AsyncSession, product_id: int) -> dict:
    result = await db.execute(
        select(ProductPhoto)
        .where(ProductPhoto.product_id == product_id)
        .order_by(ProductPhoto.id)
        .execution_options(populate_existing=True)
    )
    photos = result.scalars().all()
    return {
        "message": "Photos fetched successfully",
        "data": [ProductPhotoOut.model_validate(p) for p in photos],
    }


async def get_photo(db: AsyncSession, photo_id: int) -> ProductPhoto:
    photo = await db.get(ProductPhoto, photo_id, populate_existing=True)
    if not photo:
        raise NotFoundError("Photo not found")
    return photo


async def get_photo_by_filename(db: AsyncSession, filename: str) -> ProductPhoto:
    result = await db.execute(select(ProductPhoto).where(ProductPhoto.filename == filename))
    photo = result.scalars().first()
    if not photo:
        raise NotFoundError("Photo not found")
    return photo


async def add_photo(
    db: AsyncSession,
    storage: LocalFileStorage,
    product_id: int,
    original_name: str | None,
    content_type: str | None,
    content: bytes,
    make_main: bool = False,
) -> dict:
    """
    Store the file, then insert the row. Every rejection happens before the
    file is written; if the insert fails afterwards the file is removed again.
    The first photo of a product always becomes the main photo.
    """
    if content_type not in ALLOWED_PHOTO_TYPES:
        raise InvalidFileTypeError(content_type)
    if not content:
        raise ValidationError("No file uploaded")
    if len(content) > MAX_PHOTO_SIZE_BYTES:
        raise ValidationError(f"File exceeds the {MAX_PHOTO_SIZE_BYTES // (1024 * 1024)}MB limit")

    async with product_lock(product_id):
        filename = None
        try:
            result = await db.execute(select(Product.id).where(Product.id == product_id).with_for_update())
            if result.first() is None:
                raise NotFoundError("Product not found")

            existing = await db.scalar(
                select(func.count(ProductPhoto.id)).where(ProductPhoto.product_id == product_id)
            )
            if existing >= MAX_PHOTOS_PER_PRODUCT:
                raise TooManyPhotosError(MAX_PHOTOS_PER_PRODUCT)

            filename = storage.save(content, original_name)

            photo = ProductPhoto(
                product_id=product_id,
                url=storage.url_for(filename),
                filename=filename,
                is_main=False,
            )
            db.add(photo)
            await db.flush()

            if make_main or existing == 0:
                await _apply_main_photo(db, product_id, photo.id)

            await log_activity(db, f"Added photo {photo.id} to product ID {product_id}")
            await db.commit()

        except (NotFoundError, TooManyPhotosError):
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            if filename:
                storage.delete(filename)
            logger.exception("Error saving photo for product %s", product_id)
            raise StoreUnavailableError(f"Error uploading photo: {e}") from e
        except OSError as e:
            await db.rollback()
            logger.exception("Error writing photo file for product %s", product_id)
            raise StoreUnavailableError(f"File save error: {e}") from e

    photo = await get_photo(db, photo.id)
    return {"message": "Photo uploaded successfully", "data": ProductPhotoOut.model_validate(photo)}


async def delete_photo(db: AsyncSession, storage: LocalFileStorage, photo_id: int) -> dict:
    """
    Delete the photo row and, when it was the main photo, promote the oldest
    remaining photo or clear the product's main photo. The file goes last.
    """
    photo = await get_photo(db, photo_id)
    product_id = photo.product_id

    async with product_lock(product_id):
        try:
            photo = await get_photo(db, photo_id)
            was_main = photo.is_main
            filename = photo.filename

            await db.delete(photo)
            await db.flush()

            if was_main:
                next_id = await db.scalar(
                    select(ProductPhoto.id)
                    .where(ProductPhoto.product_id == product_id)
                    .order_by(ProductPhoto.id)
                    .limit(1)
                )
                await _apply_main_photo(db, product_id, next_id)

            await log_activity(db, f"Deleted photo {photo_id} of product ID {product_id}")
            await db.commit()

        except NotFoundError:
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception("Error deleting photo %s", photo_id)
            raise StoreUnavailableError(f"Error deleting photo: {e}") from e

    _remove_files(storage, [filename])
    return {"message": "Photo deleted successfully"}


async def set_main_photo(db: AsyncSession, product_id: int, photo_id: int) -> dict:
    async with product_lock(product_id):
        try:
            photo = await get_photo(db, photo_id)
            if photo.product_id != product_id:
                raise NotFoundError("Photo not found for this product")

            await _apply_main_photo(db, product_id, photo_id)
            await log_activity(db, f"Set photo {photo_id} as main photo of product ID {product_id}")
            await db.commit()

        except NotFoundError:
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception("Error setting main photo %s for product %s", photo_id, product_id)
            raise StoreUnavailableError(f"Error setting main photo: {e}") from e

    return {"message": "Main photo updated successfully"}
