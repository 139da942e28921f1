"""
Checkup record endpoints
"""
from typing import List

from fastapi import APIRouter, Depends

from app.database.schemas import (
    Checkup,
    CheckupWithPatient,
    CheckupInput,
    CheckupUpdate,
    Message,
)
from app.database.storage import ClinicStore
from app.api.utils import get_store

router = APIRouter()


@router.get("/checkups", response_model=List[CheckupWithPatient])
async def list_checkups(store: ClinicStore = Depends(get_store)):
    """
    Get all checkups joined with patient names
    """
    return store.list_checkups()


@router.get("/checkups/patient/{patient_id}", response_model=List[CheckupWithPatient])
async def list_checkups_by_patient(patient_id: int, store: ClinicStore = Depends(get_store)):
    """
    Get a patient's checkup history

    Returns an empty list when nothing matches; the patient itself is not looked up.
    """
    return store.list_checkups_by_patient(patient_id)


@router.get("/checkups/{checkup_id}", response_model=CheckupWithPatient)
async def get_checkup(checkup_id: int, store: ClinicStore = Depends(get_store)):
    return store.get_checkup(checkup_id)


@router.post("/checkups", response_model=Checkup, status_code=201)
async def create_checkup(checkup: CheckupInput, store: ClinicStore = Depends(get_store)):
    """
    Record a checkup

    patientId, date, symptoms and diagnosis are required; prescription and
    followUpDate default to empty strings.
    """
    return store.create_checkup(checkup)


@router.put("/checkups/{checkup_id}", response_model=Checkup)
async def update_checkup(checkup_id: int, checkup: CheckupUpdate, store: ClinicStore = Depends(get_store)):
    """
    Update a checkup

    Empty date/symptoms/diagnosis keep their stored values. prescription and
    followUpDate are replaced whenever sent, so "" clears them.
    """
    return store.update_checkup(checkup_id, checkup)


@router.delete("/checkups/{checkup_id}", response_model=Message)
async def delete_checkup(checkup_id: int, store: ClinicStore = Depends(get_store)):
    return store.delete_checkup(checkup_id)
