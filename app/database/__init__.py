"""
Database module

Contains the data models (schemas), error types and the JSON file store.
"""

# Export schemas
from app.database.schemas import (
    Patient,
    PatientInput,
    Appointment,
    AppointmentWithPatient,
    AppointmentInput,
    AppointmentUpdate,
    Checkup,
    CheckupWithPatient,
    CheckupInput,
    CheckupUpdate,
    DashboardStats,
    AppointmentsPerDay,
)

# Export errors
from app.database.errors import (
    StoreError,
    RecordNotFoundError,
    RecordValidationError,
    StorageError,
)

# Export storage
from app.database.storage import (
    ClinicStore,
    empty_snapshot,
    read_json,
    write_json,
)

__all__ = [
    # Schemas
    "Patient",
    "PatientInput",
    "Appointment",
    "AppointmentWithPatient",
    "AppointmentInput",
    "AppointmentUpdate",
    "Checkup",
    "CheckupWithPatient",
    "CheckupInput",
    "CheckupUpdate",
    "DashboardStats",
    "AppointmentsPerDay",
    # Errors
    "StoreError",
    "RecordNotFoundError",
    "RecordValidationError",
    "StorageError",
    # Storage
    "ClinicStore",
    "empty_snapshot",
    "read_json",
    "write_json",
]
