# app/routers/inventory/photos.py
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.exceptions import NotFoundError
from app.services.product_service import (
    get_photo,
    get_photo_by_filename,
    delete_photo,
    set_main_photo,
)
from app.schemas.product_schemas import MessageResponse
from app.utils.file_storage import LocalFileStorage, get_file_storage

router = APIRouter(prefix="/photos", tags=["Product Photos"])


@router.get("/{filename}", response_class=FileResponse)
async def serve_photo(
    filename: str,
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    photo = await get_photo_by_filename(db, filename)
    if not storage.exists(photo.filename):
        raise NotFoundError("Photo file not found")
    return FileResponse(storage.path_for(photo.filename))


@router.delete("/{photo_id}", response_model=MessageResponse)
async def delete_photo_route(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    return await delete_photo(db, storage, photo_id)


@router.patch("/{photo_id}/main", response_model=MessageResponse)
async def set_main_photo_route(photo_id: int, db: AsyncSession = Depends(get_db)):
    photo = await get_photo(db, photo_id)
    return await set_main_photo(db, photo.product_id, photo_id)
