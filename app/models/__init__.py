# app/models/__init__.py
from app.models.activity_models import ActivityLog
from app.models.warehouse_models import Warehouse
from app.models.project_models import Project, ProjectType
from app.models.product_models import Product, ProductPhoto
from app.models.stock_movement_models import StockMovement, MovementType
