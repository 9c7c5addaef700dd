# app/routers/inventory/products.py

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import MAX_PHOTO_SIZE_BYTES
from app.core.db import get_db
from app.services.product_service import (
    create_product,
    get_all_products,
    get_product,
    get_product_by_barcode,
    update_product,
    delete_product,
    get_product_photos,
    add_photo,
)
from app.services.stock_movement_service import get_product_movements
from app.schemas.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    ProductPhotoResponse,
    ProductPhotoListResponse,
    MessageResponse,
)
from app.schemas.stock_movement_schemas import StockMovementListResponse
from app.utils.file_storage import LocalFileStorage, get_file_storage

router = APIRouter(prefix="/products", tags=["Products"])


# -----------------------------------------------------------
# LIST ALL PRODUCTS
# -----------------------------------------------------------
@router.get("", response_model=ProductListResponse)
async def list_products(db: AsyncSession = Depends(get_db)):
    """
    List all products with their warehouse and photos.
    """
    return await get_all_products(db)


@router.get("/barcode/{barcode}", response_model=ProductResponse)
async def get_product_by_barcode_route(barcode: str, db: AsyncSession = Depends(get_db)):
    """
    Look up a product by its barcode (used by the scanner screen).
    """
    return await get_product_by_barcode(db, barcode)


# -----------------------------------------------------------
# GET PRODUCT BY ID
# -----------------------------------------------------------
@router.get("/{product_id}", response_model=ProductResponse)
async def get_product_by_id(product_id: int, db: AsyncSession = Depends(get_db)):
    return await get_product(db, product_id)


# -----------------------------------------------------------
# CREATE PRODUCT
# -----------------------------------------------------------
@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_route(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await create_product(db, data)


# -----------------------------------------------------------
# UPDATE PRODUCT
# -----------------------------------------------------------
@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product_route(product_id: int, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    """
    Partial update. Stock quantity cannot be changed here; record a stock movement instead.
    """
    return await update_product(db, product_id, data)


# -----------------------------------------------------------
# DELETE PRODUCT
# -----------------------------------------------------------
@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product_route(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return await delete_product(db, storage, product_id)


# -----------------------------------------------------------
# PRODUCT PHOTOS
# -----------------------------------------------------------
@router.get("/{product_id}/photos", response_model=ProductPhotoListResponse)
async def list_product_photos(product_id: int, db: AsyncSession = Depends(get_db)):
    return await get_product_photos(db, product_id)


@router.post("/{product_id}/photos", response_model=ProductPhotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_product_photo(
    product_id: int,
    photo: UploadFile = File(...),
    is_main: bool = Form(False),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """
    Upload a JPEG, PNG, WebP or GIF photo (max 5MB, max 5 per product).
    """
    try:
        # Read one byte past the limit; add_photo rejects the overflow
        content = await photo.read(MAX_PHOTO_SIZE_BYTES + 1)
    finally:
        await photo.close()
    return await add_photo(
        db,
        storage,
        product_id,
        original_name=photo.filename,
        content_type=photo.content_type,
        content=content,
        make_main=is_main,
    )


# -----------------------------------------------------------
# PRODUCT STOCK MOVEMENTS
# -----------------------------------------------------------
@router.get("/{product_id}/movements", response_model=StockMovementListResponse)
async def list_product_movements(product_id: int, db: AsyncSession = Depends(get_db)):
    return await get_product_movements(db, product_id)
