import pytest

from app.core.exceptions import InsufficientStockError
from app.schemas.stock_movement_schemas import StockMovementCreate
from app.services.activity_service import get_activities
from app.services.stock_movement_service import record_movement


async def test_changes_are_written_to_the_activity_log(db, make_product):
    product = await make_product(quantity=0, stock_code="ACT-1")
    await record_movement(db, StockMovementCreate(product_id=product.id, type="entry", quantity=4))

    total, entries = await get_activities(db, search="ACT-1")

    assert total == 2
    assert entries[0].message.startswith("Recorded entry of 4")
    assert entries[1].message.startswith("Created product")


async def test_rejected_movement_leaves_no_activity(db, make_product):
    product = await make_product(quantity=0, stock_code="ACT-2")
    before, _ = await get_activities(db)

    with pytest.raises(InsufficientStockError):
        await record_movement(db, StockMovementCreate(product_id=product.id, type="exit", quantity=1))

    after, _ = await get_activities(db)
    assert after == before


async def test_activity_endpoint_paginates(client, warehouse):
    for i in range(3):
        await client.post("/api/warehouses", json={"name": f"Bay {i}"})

    resp = await client.get("/api/activity", params={"page": 1, "page_size": 2, "search": "Bay"})

    body = resp.json()
    assert resp.status_code == 200
    assert body["total"] == 3
    assert len(body["data"]) == 2
    assert "Bay 2" in body["data"][0]["message"]
