"""
Clinic data models

- Record models mirror the camelCase keys persisted to disk
- Input models keep every field optional so the store, not the request
  parser, decides what is required (create) or what gets merged (update)
- Update models rely on pydantic's fields-set tracking to tell
  "key absent" apart from "key present but empty"
"""
from typing import Optional, Union
from pydantic import BaseModel, Field, ConfigDict


APPOINTMENT_STATUSES = ("pending", "completed")


class Patient(BaseModel):
    """
    Patient record as stored in the snapshot
    """
    model_config = ConfigDict(populate_by_name=True)
    id: int                 = Field(...,  description="Patient identifier (allocated as max + 1)")
    name: Optional[str]     = Field(None, description="Patient full name")
    age: Optional[int]      = Field(None, description="Age in years")
    gender: Optional[str]   = Field(None, description="Gender")
    phone: Optional[str]    = Field(None, description="Phone number")
    address: Optional[str]  = Field(None, description="Postal address")
    created_at: str         = Field(...,  alias="createdAt", description="Creation timestamp (ISO-8601, UTC)")


class PatientInput(BaseModel):
    """
    Patient create/update payload

    Create requires every field; update overwrites every field with whatever
    was sent, so a missing key clears the stored value.
    """
    name: Optional[str]                      = Field(None, description="Patient full name")
    age: Optional[Union[int, float, str]]    = Field(None, description="Age in years (numeric strings accepted, fractions truncated)")
    gender: Optional[str]                    = Field(None, description="Gender")
    phone: Optional[str]                     = Field(None, description="Phone number")
    address: Optional[str]                   = Field(None, description="Postal address")


class Appointment(BaseModel):
    """
    Appointment record as stored in the snapshot
    """
    model_config = ConfigDict(populate_by_name=True)
    id: int                     = Field(...,  description="Appointment identifier")
    patient_id: Optional[int]   = Field(None, alias="patientId", description="Soft reference to a patient id")
    date: Optional[str]         = Field(None, description="Calendar date (YYYY-MM-DD)")
    time: Optional[str]         = Field(None, description="Clock time, free-form")
    reason: Optional[str]       = Field(None, description="Reason for visit")
    status: Optional[str]       = Field(None, description="pending or completed")
    created_at: str             = Field(...,  alias="createdAt", description="Creation timestamp (ISO-8601, UTC)")


class AppointmentWithPatient(Appointment):
    """
    Appointment read shape with the owning patient's name attached
    """
    patient_name: str = Field(..., alias="patientName", description="Patient name, or 'Unknown' if unresolved")


class AppointmentInput(BaseModel):
    """
    Appointment create payload
    """
    model_config = ConfigDict(populate_by_name=True)
    patient_id: Optional[Union[int, str]]   = Field(None, alias="patientId", description="Patient id (numeric strings accepted)")
    date: Optional[str]                     = Field(None, description="Calendar date (YYYY-MM-DD)")
    time: Optional[str]                     = Field(None, description="Clock time")
    reason: Optional[str]                   = Field(None, description="Reason for visit")
    status: Optional[str]                   = Field(None, description="pending or completed; defaults to pending on create")


class AppointmentUpdate(AppointmentInput):
    """
    Appointment update payload

    Each field replaces the stored value only when truthy.
    """
    pass


class Checkup(BaseModel):
    """
    Checkup record as stored in the snapshot
    """
    model_config = ConfigDict(populate_by_name=True)
    id: int                         = Field(...,  description="Checkup identifier")
    patient_id: Optional[int]       = Field(None, alias="patientId", description="Soft reference to a patient id")
    date: Optional[str]             = Field(None, description="Checkup date (YYYY-MM-DD)")
    symptoms: Optional[str]         = Field(None, description="Reported symptoms")
    diagnosis: Optional[str]        = Field(None, description="Diagnosis")
    prescription: Optional[str]     = Field("",   description="Prescription, empty when none")
    follow_up_date: Optional[str]   = Field("",   alias="followUpDate", description="Follow-up date, empty when none")
    created_at: str                 = Field(...,  alias="createdAt", description="Creation timestamp (ISO-8601, UTC)")


class CheckupWithPatient(Checkup):
    """
    Checkup read shape with the owning patient's name attached
    """
    patient_name: str = Field(..., alias="patientName", description="Patient name, or 'Unknown' if unresolved")


class CheckupInput(BaseModel):
    """
    Checkup create payload
    """
    model_config = ConfigDict(populate_by_name=True)
    patient_id: Optional[Union[int, str]]   = Field(None, alias="patientId", description="Patient id (numeric strings accepted)")
    date: Optional[str]                     = Field(None, description="Checkup date (YYYY-MM-DD)")
    symptoms: Optional[str]                 = Field(None, description="Reported symptoms")
    diagnosis: Optional[str]                = Field(None, description="Diagnosis")
    prescription: Optional[str]             = Field(None, description="Prescription")
    follow_up_date: Optional[str]           = Field(None, alias="followUpDate", description="Follow-up date")


class CheckupUpdate(BaseModel):
    """
    Checkup update payload

    date, symptoms and diagnosis replace the stored value only when truthy.
    prescription and followUpDate replace it whenever the key is present,
    so sending an empty string clears them.
    """
    model_config = ConfigDict(populate_by_name=True)
    date: Optional[str]             = Field(None, description="Checkup date (YYYY-MM-DD)")
    symptoms: Optional[str]         = Field(None, description="Reported symptoms")
    diagnosis: Optional[str]        = Field(None, description="Diagnosis")
    prescription: Optional[str]     = Field(None, description="Prescription; present key always replaces")
    follow_up_date: Optional[str]   = Field(None, alias="followUpDate", description="Follow-up date; present key always replaces")


class DashboardStats(BaseModel):
    """
    Headline counts for the dashboard
    """
    model_config = ConfigDict(populate_by_name=True)
    total_patients: int         = Field(..., alias="totalPatients")
    total_appointments: int     = Field(..., alias="totalAppointments")
    today_appointments: int     = Field(..., alias="todayAppointments")
    total_checkups: int         = Field(..., alias="totalCheckups")


class AppointmentsPerDay(BaseModel):
    """
    One point of the appointments-per-day chart
    """
    date: str
    count: int


class Message(BaseModel):
    message: str
