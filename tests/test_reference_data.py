import pytest

from app.core.exceptions import NotFoundError, ReferentialConflictError
from app.schemas.project_schemas import ProjectCreate, ProjectUpdate
from app.schemas.stock_movement_schemas import StockMovementCreate
from app.schemas.warehouse_schemas import WarehouseCreate, WarehouseUpdate
from app.services import project_service, warehouse_service
from app.services.stock_movement_service import record_movement


# --------------------------
# Warehouses
# --------------------------
async def test_warehouse_update_and_listing(db, warehouse):
    await warehouse_service.create_warehouse(db, WarehouseCreate(name="Annex"))

    updated = await warehouse_service.update_warehouse(
        db, warehouse.id, WarehouseUpdate(description="Ground floor")
    )

    assert updated["data"].description == "Ground floor"
    names = [w.name for w in (await warehouse_service.get_all_warehouses(db))["data"]]
    assert names == ["Annex", "Main Warehouse"]


async def test_warehouse_with_products_cannot_be_deleted(db, warehouse, make_product):
    product = await make_product()

    with pytest.raises(ReferentialConflictError) as exc:
        await warehouse_service.delete_warehouse(db, warehouse.id)

    assert exc.value.status_code == 409
    still_there = (await warehouse_service.get_warehouse(db, warehouse.id))["data"]
    assert still_there.id == warehouse.id
    assert product.warehouse_id == warehouse.id


async def test_empty_warehouse_can_be_deleted(db):
    created = (await warehouse_service.create_warehouse(db, WarehouseCreate(name="Temporary")))["data"]

    await warehouse_service.delete_warehouse(db, created.id)

    with pytest.raises(NotFoundError):
        await warehouse_service.get_warehouse(db, created.id)


async def test_missing_warehouse_is_not_found(db):
    with pytest.raises(NotFoundError):
        await warehouse_service.update_warehouse(db, 404, WarehouseUpdate(name="Ghost"))
    with pytest.raises(NotFoundError):
        await warehouse_service.delete_warehouse(db, 404)


# --------------------------
# Projects and companies
# --------------------------
async def test_company_and_project_types(db, project):
    company = (await project_service.create_project(db, ProjectCreate(name="Acme Ltd", type="company")))["data"]

    assert project.type.value == "project"
    assert company.type.value == "company"

    renamed = await project_service.update_project(db, company.id, ProjectUpdate(contact_person="J. Doe"))
    assert renamed["data"].contact_person == "J. Doe"


async def test_project_referenced_by_movement_cannot_be_deleted(db, project, make_product):
    product = await make_product(quantity=5)
    await record_movement(
        db, StockMovementCreate(product_id=product.id, type="exit", quantity=2, project_id=project.id)
    )

    with pytest.raises(ReferentialConflictError):
        await project_service.delete_project(db, project.id)

    assert (await project_service.get_project(db, project.id))["data"].name == "Mall Renovation"


async def test_unreferenced_project_can_be_deleted(db, project):
    await project_service.delete_project(db, project.id)

    assert (await project_service.get_all_projects(db))["data"] == []


# --------------------------
# HTTP boundary
# --------------------------
async def test_warehouse_routes(client):
    created = await client.post("/api/warehouses", json={"name": "Depot", "address": "Dock 4"})
    assert created.status_code == 201
    warehouse_id = created.json()["data"]["id"]

    patched = await client.patch(f"/api/warehouses/{warehouse_id}", json={"name": "Depot North"})
    assert patched.json()["data"]["name"] == "Depot North"

    assert (await client.delete(f"/api/warehouses/{warehouse_id}")).status_code == 200
    assert (await client.get(f"/api/warehouses/{warehouse_id}")).status_code == 404


async def test_warehouse_delete_conflict_returns_409(client, warehouse, make_product):
    await make_product()

    resp = await client.delete(f"/api/warehouses/{warehouse.id}")

    assert resp.status_code == 409


async def test_project_delete_conflict_returns_409(client, project, make_product):
    product = await make_product(quantity=3)
    await client.post(
        "/api/stock-movements",
        json={"product_id": product.id, "type": "exit", "quantity": 1, "project_id": project.id},
    )

    resp = await client.delete(f"/api/projects/{project.id}")

    assert resp.status_code == 409


@pytest.mark.parametrize(
    "payload",
    [
        {"name": ""},
        {"name": "Site", "type": "customer"},
        {"name": "Site", "email": "not-an-email"},
    ],
)
async def test_invalid_project_payload_returns_400(client, payload):
    resp = await client.post("/api/projects", json=payload)
    assert resp.status_code == 400


async def test_blank_warehouse_name_returns_400(client):
    resp = await client.post("/api/warehouses", json={"name": "   "})
    assert resp.status_code == 400


@pytest.mark.parametrize("payload", [{"name": None}, {"name": "  "}])
async def test_patch_warehouse_with_null_or_blank_name_returns_400(client, warehouse, payload):
    resp = await client.patch(f"/api/warehouses/{warehouse.id}", json=payload)

    assert resp.status_code == 400
    fetched = await client.get(f"/api/warehouses/{warehouse.id}")
    assert fetched.json()["data"]["name"] == "Main Warehouse"


@pytest.mark.parametrize("payload", [{"name": None}, {"name": "   "}, {"type": None}])
async def test_patch_project_with_null_or_blank_required_field_returns_400(client, project, payload):
    resp = await client.patch(f"/api/projects/{project.id}", json=payload)

    assert resp.status_code == 400
    fetched = (await client.get(f"/api/projects/{project.id}")).json()["data"]
    assert fetched["name"] == "Mall Renovation"
    assert fetched["type"] == "project"


async def test_patch_project_trims_name(client, project):
    resp = await client.patch(f"/api/projects/{project.id}", json={"name": "  Mall Renovation II  "})

    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Mall Renovation II"
