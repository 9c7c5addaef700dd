import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.core.exceptions import (
    InvalidFileTypeError,
    NotFoundError,
    StoreUnavailableError,
    TooManyPhotosError,
    ValidationError,
)
from app.core.config import MAX_PHOTO_SIZE_BYTES
from app.models.product_models import ProductPhoto
from app.services import product_service
from app.services.product_service import add_photo, delete_photo, set_main_photo

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def upload(db, storage, product_id, make_main=False, content_type="image/png"):
    result = await add_photo(
        db, storage, product_id, "front.png", content_type, PNG_BYTES, make_main=make_main
    )
    return result["data"]


def stored_files(storage):
    return sorted(p.name for p in storage.root.iterdir())


async def assert_single_main(db, product_id, expected_photo_id):
    product = (await product_service.get_product(db, product_id))["data"]
    mains = [p.id for p in product.photos if p.is_main]
    assert product.main_photo_id == expected_photo_id
    assert mains == ([expected_photo_id] if expected_photo_id else [])


async def test_first_photo_becomes_main(db, storage, make_product):
    product = await make_product()

    photo = await upload(db, storage, product.id)

    assert photo.is_main is True
    assert photo.url == f"/api/photos/{photo.filename}"
    assert storage.exists(photo.filename)
    await assert_single_main(db, product.id, photo.id)


async def test_later_photos_do_not_steal_main(db, storage, make_product):
    product = await make_product()
    first = await upload(db, storage, product.id)

    second = await upload(db, storage, product.id)

    assert second.is_main is False
    await assert_single_main(db, product.id, first.id)


async def test_upload_with_main_flag_demotes_previous(db, storage, make_product):
    product = await make_product()
    await upload(db, storage, product.id)

    chosen = await upload(db, storage, product.id, make_main=True)

    await assert_single_main(db, product.id, chosen.id)


async def test_set_main_photo_keeps_exactly_one_main(db, storage, make_product):
    product = await make_product()
    photos = [await upload(db, storage, product.id) for _ in range(3)]

    await set_main_photo(db, product.id, photos[2].id)
    await assert_single_main(db, product.id, photos[2].id)

    await set_main_photo(db, product.id, photos[1].id)
    await assert_single_main(db, product.id, photos[1].id)


async def test_set_main_photo_of_another_product_is_not_found(db, storage, make_product):
    product = await make_product()
    other = await make_product()
    own = await upload(db, storage, product.id)
    foreign = await upload(db, storage, other.id)

    with pytest.raises(NotFoundError):
        await set_main_photo(db, product.id, foreign.id)

    await assert_single_main(db, product.id, own.id)
    await assert_single_main(db, other.id, foreign.id)


async def test_sixth_photo_is_rejected_before_any_file_is_written(db, storage, make_product):
    product = await make_product()
    for _ in range(5):
        await upload(db, storage, product.id)
    files_before = stored_files(storage)

    with pytest.raises(TooManyPhotosError) as exc:
        await upload(db, storage, product.id)

    assert exc.value.status_code == 400
    assert stored_files(storage) == files_before
    assert len(files_before) == 5
    count = await db.scalar(select(func.count(ProductPhoto.id)).where(ProductPhoto.product_id == product.id))
    assert count == 5


async def test_invalid_file_type_is_rejected(db, storage, make_product):
    product = await make_product()

    with pytest.raises(InvalidFileTypeError):
        await upload(db, storage, product.id, content_type="application/pdf")

    assert stored_files(storage) == []


async def test_empty_upload_is_rejected(db, storage, make_product):
    product = await make_product()

    with pytest.raises(ValidationError):
        await add_photo(db, storage, product.id, "empty.png", "image/png", b"")

    assert stored_files(storage) == []


async def test_oversized_upload_is_rejected_before_writing(db, storage, make_product):
    product = await make_product()
    oversized = PNG_BYTES + b"\x00" * (MAX_PHOTO_SIZE_BYTES - len(PNG_BYTES) + 1)

    with pytest.raises(ValidationError):
        await add_photo(db, storage, product.id, "huge.png", "image/png", oversized)

    assert stored_files(storage) == []
    assert (await product_service.get_product_photos(db, product.id))["data"] == []


async def test_upload_at_size_limit_is_accepted(db, storage, make_product):
    product = await make_product()
    exact = PNG_BYTES + b"\x00" * (MAX_PHOTO_SIZE_BYTES - len(PNG_BYTES))

    photo = (await add_photo(db, storage, product.id, "big.png", "image/png", exact))["data"]

    assert storage.path_for(photo.filename).stat().st_size == MAX_PHOTO_SIZE_BYTES


async def test_upload_for_missing_product_writes_nothing(db, storage):
    with pytest.raises(NotFoundError):
        await upload(db, storage, 4242)

    assert stored_files(storage) == []


async def test_failed_insert_removes_the_stored_file(db, storage, make_product, monkeypatch):
    product = await make_product()

    async def broken_log(*args, **kwargs):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(product_service, "log_activity", broken_log)

    with pytest.raises(StoreUnavailableError):
        await upload(db, storage, product.id)

    assert stored_files(storage) == []
    monkeypatch.undo()
    assert (await product_service.get_product_photos(db, product.id))["data"] == []


async def test_deleting_main_photo_promotes_oldest_remaining(db, storage, make_product):
    product = await make_product()
    first = await upload(db, storage, product.id)
    second = await upload(db, storage, product.id)
    third = await upload(db, storage, product.id)

    await delete_photo(db, storage, first.id)

    assert not storage.exists(first.filename)
    await assert_single_main(db, product.id, second.id)
    remaining = (await product_service.get_product_photos(db, product.id))["data"]
    assert [p.id for p in remaining] == [second.id, third.id]


async def test_deleting_last_photo_clears_main(db, storage, make_product):
    product = await make_product()
    only = await upload(db, storage, product.id)

    await delete_photo(db, storage, only.id)

    await assert_single_main(db, product.id, None)


async def test_deleting_non_main_photo_keeps_main(db, storage, make_product):
    product = await make_product()
    main = await upload(db, storage, product.id)
    extra = await upload(db, storage, product.id)

    await delete_photo(db, storage, extra.id)

    await assert_single_main(db, product.id, main.id)


async def test_delete_missing_photo_is_not_found(db, storage):
    with pytest.raises(NotFoundError):
        await delete_photo(db, storage, 777)


# --------------------------
# HTTP boundary
# --------------------------
async def test_upload_and_serve_photo_over_http(client, make_product):
    product = await make_product()

    resp = await client.post(
        f"/api/products/{product.id}/photos",
        files={"photo": ("front.png", PNG_BYTES, "image/png")},
    )

    assert resp.status_code == 201, resp.text
    photo = resp.json()["data"]
    assert photo["is_main"] is True

    served = await client.get(photo["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


async def test_upload_wrong_type_over_http_returns_400(client, make_product):
    product = await make_product()

    resp = await client.post(
        f"/api/products/{product.id}/photos",
        files={"photo": ("manual.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert resp.status_code == 400


async def test_oversized_upload_over_http_returns_400(client, storage, make_product):
    product = await make_product()
    oversized = PNG_BYTES + b"\x00" * MAX_PHOTO_SIZE_BYTES

    resp = await client.post(
        f"/api/products/{product.id}/photos",
        files={"photo": ("huge.png", oversized, "image/png")},
    )

    assert resp.status_code == 400
    assert stored_files(storage) == []
    listed = await client.get(f"/api/products/{product.id}/photos")
    assert listed.json()["data"] == []


async def test_upload_route_reads_at_most_one_byte_past_limit(client, make_product, monkeypatch):
    product = await make_product()
    requested = []
    original_read = StarletteUploadFile.read

    async def recording_read(self, size=-1):
        requested.append(size)
        return await original_read(self, size)

    monkeypatch.setattr(StarletteUploadFile, "read", recording_read)

    resp = await client.post(
        f"/api/products/{product.id}/photos",
        files={"photo": ("front.png", PNG_BYTES, "image/png")},
    )

    assert resp.status_code == 201
    assert MAX_PHOTO_SIZE_BYTES + 1 in requested
    assert -1 not in requested


async def test_set_main_and_delete_over_http(client, make_product):
    product = await make_product()
    ids = []
    for _ in range(2):
        resp = await client.post(
            f"/api/products/{product.id}/photos",
            files={"photo": ("side.png", PNG_BYTES, "image/png")},
        )
        ids.append(resp.json()["data"]["id"])

    assert (await client.patch(f"/api/photos/{ids[1]}/main")).status_code == 200
    fetched = (await client.get(f"/api/products/{product.id}")).json()["data"]
    assert fetched["main_photo_id"] == ids[1]

    assert (await client.delete(f"/api/photos/{ids[1]}")).status_code == 200
    fetched = (await client.get(f"/api/products/{product.id}")).json()["data"]
    assert fetched["main_photo_id"] == ids[0]
    assert [p["id"] for p in fetched["photos"]] == [ids[0]]


async def test_unknown_photo_file_returns_404(client):
    resp = await client.get("/api/photos/does-not-exist.png")
    assert resp.status_code == 404
