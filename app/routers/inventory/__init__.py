from fastapi import APIRouter

from .products import router as products_router
from .photos import router as photos_router
from .warehouses import router as warehouses_router
from .projects import router as projects_router
from .stock_movements import router as stock_movements_router
from .activity import router as activity_router

router = APIRouter(prefix="/api")

router.include_router(products_router)
router.include_router(photos_router)
router.include_router(warehouses_router)
router.include_router(projects_router)
router.include_router(stock_movements_router)
router.include_router(activity_router)
