"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file database (foreign keys on) and its own
upload directory, both under tmp_path.
"""
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base, get_db, enable_sqlite_foreign_keys
from app.schemas.product_schemas import ProductCreate
from app.schemas.project_schemas import ProjectCreate
from app.schemas.warehouse_schemas import WarehouseCreate
from app.services import product_service, project_service, warehouse_service
from app.utils.file_storage import LocalFileStorage, get_file_storage
from main import app as fastapi_app


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads")


@pytest.fixture
async def client(session_factory, storage):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_file_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def warehouse(db):
    result = await warehouse_service.create_warehouse(
        db, WarehouseCreate(name="Main Warehouse", address="12 Harbour Road")
    )
    return result["data"]


@pytest.fixture
async def project(db):
    result = await project_service.create_project(
        db, ProjectCreate(name="Mall Renovation", type="project", email="ops@mall.example")
    )
    return result["data"]


@pytest.fixture
def make_product(db, warehouse):
    """Factory creating products in the default warehouse."""
    counter = {"n": 0}

    async def _make(quantity=0, stock_code=None, **fields):
        counter["n"] += 1
        data = ProductCreate(
            stock_code=stock_code or f"SKU-{counter['n']:03d}",
            product_type=fields.pop("product_type", "Cable"),
            name=fields.pop("name", f"Product {counter['n']}"),
            quantity=quantity,
            warehouse_id=fields.pop("warehouse_id", warehouse.id),
            entry_price=fields.pop("entry_price", Decimal("10.00")),
            exit_price=fields.pop("exit_price", Decimal("15.00")),
            **fields,
        )
        result = await product_service.create_product(db, data)
        return result["data"]

    return _make
