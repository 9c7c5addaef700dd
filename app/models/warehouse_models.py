# app/models/warehouse_models.py
from sqlalchemy import Column, Integer, String, Text
from app.core.db import Base


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    address = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Warehouse(id={self.id}, name='{self.name}')>"
