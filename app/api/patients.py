"""
Patient management endpoints
"""
from typing import List

from fastapi import APIRouter, Depends

from app.database.schemas import Patient, PatientInput, Message
from app.database.storage import ClinicStore
from app.api.utils import get_store

router = APIRouter()


@router.get("/patients", response_model=List[Patient])
async def list_patients(store: ClinicStore = Depends(get_store)):
    """
    Get all patients
    """
    return store.list_patients()


@router.get("/patients/{patient_id}", response_model=Patient)
async def get_patient(patient_id: int, store: ClinicStore = Depends(get_store)):
    """
    Get patient by ID (404 if absent)
    """
    return store.get_patient(patient_id)


@router.post("/patients", response_model=Patient, status_code=201)
async def create_patient(patient: PatientInput, store: ClinicStore = Depends(get_store)):
    """
    Create a patient

    name, age, gender, phone and address are all required (400 otherwise).
    """
    return store.create_patient(patient)


@router.put("/patients/{patient_id}", response_model=Patient)
async def update_patient(patient_id: int, patient: PatientInput, store: ClinicStore = Depends(get_store)):
    """
    Replace a patient's details

    Every field is overwritten with the request body; omitted fields are cleared.
    """
    return store.update_patient(patient_id, patient)


@router.delete("/patients/{patient_id}", response_model=Message)
async def delete_patient(patient_id: int, store: ClinicStore = Depends(get_store)):
    """
    Delete patient along with their appointments and checkups
    """
    return store.delete_patient(patient_id)
