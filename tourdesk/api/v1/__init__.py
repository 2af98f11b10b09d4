from fastapi import APIRouter

from .activity_routes import router as activity_router
from .modification_routes import router as modification_router
from .reservation_routes import router as reservation_router
from .schedule_routes import router as schedule_router
from .slot_routes import router as slot_router
from .tariff_routes import router as tariff_router

router = APIRouter()
router.include_router(activity_router)
router.include_router(schedule_router)
router.include_router(slot_router)
router.include_router(tariff_router)
router.include_router(reservation_router)
router.include_router(modification_router)

__all__ = [
    "router",
    "activity_router",
    "modification_router",
    "reservation_router",
    "schedule_router",
    "slot_router",
    "tariff_router",
]
