# Run with: python -m app.scripts.seed_demo
from decimal import Decimal
import asyncio

from sqlalchemy.future import select

from app.core.db import AsyncSessionLocal, init_models
from app.models.warehouse_models import Warehouse
from app.models.project_models import Project, ProjectType
from app.models.product_models import Product


async def seed_demo():
    await init_models()
    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(Warehouse.id).limit(1))
        if existing.first():
            print("Database already seeded, skipping...")
            return

        main_wh = Warehouse(name="Main Warehouse", address="12 Harbour Road", description="Central receiving point")
        east_wh = Warehouse(name="East Depot", address="Industrial Zone, 5th Street", description="Regional distribution")
        session.add_all([main_wh, east_wh])
        await session.flush()

        session.add_all([
            Project(name="Mall Renovation", type=ProjectType.project, contact_person="Alex Morgan",
                    phone="555-0101", email="alex@mall-reno.example", address="400 Market St"),
            Project(name="ACME Electronics Ltd.", type=ProjectType.company, contact_person="Sam Lee",
                    phone="555-0199", email="sam@acme.example", address="Tech Park"),
        ])

        session.add_all([
            Product(stock_code="CBL-001", product_type="Cable", name="NYM 3x2.5 cable (100m)",
                    quantity=40, barcode="8690000000011", warehouse_id=main_wh.id,
                    entry_price=Decimal("54.90"), exit_price=Decimal("72.00")),
            Product(stock_code="LMP-010", product_type="Lighting", name="LED panel 60x60",
                    quantity=120, barcode="8690000000028", warehouse_id=main_wh.id,
                    entry_price=Decimal("18.50"), exit_price=Decimal("26.00")),
            Product(stock_code="SWT-200", product_type="Switchgear", name="Circuit breaker 16A",
                    quantity=300, barcode="8690000000035", warehouse_id=east_wh.id,
                    entry_price=Decimal("3.20"), exit_price=Decimal("5.10")),
        ])

        await session.commit()
        print("Demo data created!")


if __name__ == "__main__":
    asyncio.run(seed_demo())
