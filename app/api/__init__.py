# API routes
from fastapi import APIRouter
from app.api.patients import router as patients_router
from app.api.appointments import router as appointments_router
from app.api.checkups import router as checkups_router
from app.api.dashboard import router as dashboard_router

# Combine all routers
router = APIRouter()
router.include_router(patients_router)
router.include_router(appointments_router)
router.include_router(checkups_router)
router.include_router(dashboard_router)

__all__ = ["router"]
