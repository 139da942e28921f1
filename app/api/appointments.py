"""
Appointment endpoints
"""
from typing import List

from fastapi import APIRouter, Depends

from app.database.schemas import (
    Appointment,
    AppointmentWithPatient,
    AppointmentInput,
    AppointmentUpdate,
    Message,
)
from app.database.storage import ClinicStore
from app.api.utils import get_store

router = APIRouter()


@router.get("/appointments", response_model=List[AppointmentWithPatient])
async def list_appointments(store: ClinicStore = Depends(get_store)):
    """
    Get all appointments joined with patient names
    """
    return store.list_appointments()


@router.get("/appointments/{appointment_id}", response_model=AppointmentWithPatient)
async def get_appointment(appointment_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_appointment(appointment_id)


@router.post("/appointments", response_model=Appointment, status_code=201)
async def create_appointment(appointment: AppointmentInput, store: ClinicStore = Depends(get_store)):
    """
    Book an appointment; status defaults to pending
    """
    return store.create_appointment(appointment)


@router.put("/appointments/{appointment_id}", response_model=Appointment)
async def update_appointment(appointment_id: int, appointment: AppointmentUpdate, store: ClinicStore = Depends(get_store)):
    """
    Update an appointment

    Only non-empty fields in the body are applied; e.g. {"status": "completed"}
    marks the appointment done and leaves everything else as is.
    """
    return store.update_appointment(appointment_id, appointment)


@router.delete("/appointments/{appointment_id}", response_model=Message)
async def delete_appointment(appointment_id: int, store: ClinicStore = Depends(get_store)):
    return store.delete_appointment(appointment_id)
