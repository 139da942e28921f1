"""
Dashboard endpoints
"""
from typing import List

from fastapi import APIRouter, Depends

from app.database.schemas import DashboardStats, AppointmentsPerDay
from app.database.storage import ClinicStore
from app.api.utils import get_store

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(store: ClinicStore = Depends(get_store)):
    """
    Totals plus the number of appointments scheduled for today
    """
    return store.dashboard_stats()


@router.get("/dashboard/appointments-chart", response_model=List[AppointmentsPerDay])
async def get_appointments_chart(store: ClinicStore = Depends(get_store)):
    """
    Appointments per day for the dashboard chart, oldest first
    """
    return store.appointments_per_day()
