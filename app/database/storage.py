"""
Simple JSON file storage

- The whole clinic lives in one JSON file: patients, appointments, checkups
- Every call re-reads the file; nothing is cached between requests
- Mutations run load -> change -> save under one in-process lock so two
  concurrent writers cannot overwrite each other's changes
- Saves go through a temp file and os.replace so a failed write never
  leaves a half-written snapshot behind
"""
import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from app.core.config import READ_POLICY_EMPTY, READ_POLICY_RAISE
from app.database.errors import RecordNotFoundError, RecordValidationError, StorageError
from app.database.schemas import (
    APPOINTMENT_STATUSES,
    PatientInput,
    AppointmentInput,
    AppointmentUpdate,
    CheckupInput,
    CheckupUpdate,
)
from app.services.ids import next_id
from app.services.integrity import attach_patient_names, with_patient_name, cascade_delete_patient
from app.services.dashboard import dashboard_stats, appointments_per_day
from app.services.utils import utc_timestamp, parse_int

logger = logging.getLogger(__name__)

COLLECTIONS = ('patients', 'appointments', 'checkups')

Snapshot = Dict[str, List[Dict[str, Any]]]
ModelT = TypeVar('ModelT', bound=BaseModel)


def empty_snapshot() -> Snapshot:
    return {name: [] for name in COLLECTIONS}


def read_json(filepath: Union[str, Path]) -> Any:
    """
    Read and parse a JSON file

    Raises FileNotFoundError when the file is missing, other OSErrors on I/O
    failure and ValueError when the content is not valid JSON.
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json(filepath: Union[str, Path], data: Any):
    """
    Write data to a JSON file, replacing it in one step
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def _parse_payload(model: Type[ModelT], fields: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    if isinstance(fields, model):
        return fields
    try:
        return model.model_validate(fields)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise RecordValidationError(f"Invalid payload: {details}") from exc


def _coerce_int(value: Any, field: str) -> int:
    try:
        return parse_int(value)
    except ValueError:
        raise RecordValidationError(f"{field} must be an integer")


def _check_status(status: Optional[str]):
    if status and status not in APPOINTMENT_STATUSES:
        raise RecordValidationError(f"status must be one of: {', '.join(APPOINTMENT_STATUSES)}")


def _valid_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _find_index(records: List[Dict[str, Any]], record_id: int) -> Optional[int]:
    for index, record in enumerate(records):
        if record.get('id') == record_id:
            return index
    return None


class ClinicStore:
    """
    Owner of the clinic snapshot file

    One instance per process, created at startup with the configured path
    and handed to whatever needs it.
    """

    def __init__(self, filepath: Union[str, Path], corrupt_policy: str = READ_POLICY_EMPTY):
        if corrupt_policy not in (READ_POLICY_EMPTY, READ_POLICY_RAISE):
            raise ValueError(f"Unknown corrupt snapshot policy: {corrupt_policy!r}")
        self.filepath = Path(filepath)
        self.corrupt_policy = corrupt_policy
        self._lock = threading.RLock()

    # ==================== SNAPSHOT ====================

    def load(self) -> Snapshot:
        """
        Current snapshot from disk

        A missing file is created empty. An unreadable file either yields an
        empty snapshot or raises StorageError, depending on corrupt_policy.
        """
        try:
            data = read_json(self.filepath)
        except FileNotFoundError:
            snapshot = empty_snapshot()
            with self._lock:
                if not self.filepath.exists():
                    self.save(snapshot)
                    logger.info(f"Initialized empty clinic snapshot at {self.filepath}")
            return snapshot
        except (OSError, ValueError) as exc:
            return self._unreadable(str(exc))

        if not isinstance(data, dict):
            return self._unreadable("top-level JSON value is not an object")
        for name in COLLECTIONS:
            data.setdefault(name, [])
            if not isinstance(data[name], list):
                return self._unreadable(f"'{name}' is not a list")
            for record in data[name]:
                if not isinstance(record, dict) or not _valid_id(record.get('id')):
                    return self._unreadable(f"'{name}' holds a record without an integer id")
        return data

    def _unreadable(self, reason: str) -> Snapshot:
        if self.corrupt_policy == READ_POLICY_RAISE:
            logger.error(f"Clinic snapshot {self.filepath} is unreadable: {reason}")
            raise StorageError(f"Could not read clinic data: {reason}")
        logger.warning(f"Clinic snapshot {self.filepath} is unreadable ({reason}); serving an empty snapshot")
        return empty_snapshot()

    def save(self, snapshot: Snapshot):
        """
        Overwrite the snapshot file in full
        """
        try:
            write_json(self.filepath, snapshot)
        except OSError as exc:
            logger.error(f"Failed to write clinic snapshot {self.filepath}: {exc}")
            raise StorageError(f"Could not write clinic data: {exc}") from exc

    @contextmanager
    def _transaction(self) -> Iterator[Snapshot]:
        """
        Serialized load -> mutate -> save; nothing is written if the body raises
        """
        with self._lock:
            snapshot = self.load()
            yield snapshot
            self.save(snapshot)

    # ==================== PATIENTS ====================

    def list_patients(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self.load()['patients']]

    def get_patient(self, patient_id: int) -> Dict[str, Any]:
        patients = self.load()['patients']
        index = _find_index(patients, patient_id)
        if index is None:
            raise RecordNotFoundError("Patient not found")
        return dict(patients[index])

    def create_patient(self, fields: Union[PatientInput, Mapping[str, Any]]) -> Dict[str, Any]:
        payload = _parse_payload(PatientInput, fields)
        if not all([payload.name, payload.age, payload.gender, payload.phone, payload.address]):
            raise RecordValidationError("All fields are required")
        age = _coerce_int(payload.age, 'age')

        with self._transaction() as snapshot:
            patient = {
                'id': next_id(snapshot['patients']),
                'name': payload.name,
                'age': age,
                'gender': payload.gender,
                'phone': payload.phone,
                'address': payload.address,
                'createdAt': utc_timestamp(),
            }
            snapshot['patients'].append(patient)

        logger.info(f"Created patient id={patient['id']}")
        return dict(patient)

    def update_patient(self, patient_id: int, fields: Union[PatientInput, Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Overwrite every mutable field; keys missing from the payload become null
        """
        payload = _parse_payload(PatientInput, fields)

        with self._transaction() as snapshot:
            patients = snapshot['patients']
            index = _find_index(patients, patient_id)
            if index is None:
                raise RecordNotFoundError("Patient not found")
            age = None if payload.age in (None, "") else _coerce_int(payload.age, 'age')
            patients[index].update(
                name=payload.name,
                age=age,
                gender=payload.gender,
                phone=payload.phone,
                address=payload.address,
            )
            patient = dict(patients[index])

        logger.info(f"Updated patient id={patient_id}")
        return patient

    def delete_patient(self, patient_id: int) -> Dict[str, str]:
        """
        Delete a patient together with its appointments and checkups
        """
        with self._transaction() as snapshot:
            if _find_index(snapshot['patients'], patient_id) is None:
                raise RecordNotFoundError("Patient not found")
            removed = cascade_delete_patient(snapshot, patient_id)

        logger.info(
            f"Deleted patient id={patient_id} with {removed['appointments']} appointment(s) "
            f"and {removed['checkups']} checkup(s)"
        )
        return {'message': 'Patient deleted successfully'}

    # ==================== APPOINTMENTS ====================

    def list_appointments(self) -> List[Dict[str, Any]]:
        snapshot = self.load()
        return attach_patient_names(snapshot['appointments'], snapshot['patients'])

    def get_appointment(self, appointment_id: int) -> Dict[str, Any]:
        snapshot = self.load()
        index = _find_index(snapshot['appointments'], appointment_id)
        if index is None:
            raise RecordNotFoundError("Appointment not found")
        return with_patient_name(snapshot['appointments'][index], snapshot['patients'])

    def create_appointment(self, fields: Union[AppointmentInput, Mapping[str, Any]]) -> Dict[str, Any]:
        payload = _parse_payload(AppointmentInput, fields)
        if not all([payload.patient_id, payload.date, payload.time, payload.reason]):
            raise RecordValidationError("All fields are required")
        _check_status(payload.status)
        patient_id = _coerce_int(payload.patient_id, 'patientId')

        with self._transaction() as snapshot:
            appointment = {
                'id': next_id(snapshot['appointments']),
                'patientId': patient_id,
                'date': payload.date,
                'time': payload.time,
                'reason': payload.reason,
                'status': payload.status or 'pending',
                'createdAt': utc_timestamp(),
            }
            snapshot['appointments'].append(appointment)

        logger.info(f"Created appointment id={appointment['id']} for patient id={patient_id}")
        return dict(appointment)

    def update_appointment(self, appointment_id: int, fields: Union[AppointmentUpdate, Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Partial merge: each field replaces the stored value only when truthy
        """
        payload = _parse_payload(AppointmentUpdate, fields)

        with self._transaction() as snapshot:
            appointments = snapshot['appointments']
            index = _find_index(appointments, appointment_id)
            if index is None:
                raise RecordNotFoundError("Appointment not found")
            patient_id = _coerce_int(payload.patient_id, 'patientId') if payload.patient_id else None
            _check_status(payload.status)
            current = appointments[index]
            current.update(
                patientId=patient_id if payload.patient_id else current.get('patientId'),
                date=payload.date or current.get('date'),
                time=payload.time or current.get('time'),
                reason=payload.reason or current.get('reason'),
                status=payload.status or current.get('status'),
            )
            appointment = dict(current)

        logger.info(f"Updated appointment id={appointment_id}")
        return appointment

    def delete_appointment(self, appointment_id: int) -> Dict[str, str]:
        with self._transaction() as snapshot:
            index = _find_index(snapshot['appointments'], appointment_id)
            if index is None:
                raise RecordNotFoundError("Appointment not found")
            del snapshot['appointments'][index]

        logger.info(f"Deleted appointment id={appointment_id}")
        return {'message': 'Appointment deleted successfully'}

    # ==================== CHECKUPS ====================

    def list_checkups(self) -> List[Dict[str, Any]]:
        snapshot = self.load()
        return attach_patient_names(snapshot['checkups'], snapshot['patients'])

    def list_checkups_by_patient(self, patient_id: int) -> List[Dict[str, Any]]:
        """
        Checkups referencing patient_id; empty when none match, even if the
        patient does not exist
        """
        snapshot = self.load()
        checkups = [c for c in snapshot['checkups'] if c.get('patientId') == patient_id]
        return attach_patient_names(checkups, snapshot['patients'])

    def get_checkup(self, checkup_id: int) -> Dict[str, Any]:
        snapshot = self.load()
        index = _find_index(snapshot['checkups'], checkup_id)
        if index is None:
            raise RecordNotFoundError("Checkup not found")
        return with_patient_name(snapshot['checkups'][index], snapshot['patients'])

    def create_checkup(self, fields: Union[CheckupInput, Mapping[str, Any]]) -> Dict[str, Any]:
        payload = _parse_payload(CheckupInput, fields)
        if not all([payload.patient_id, payload.date, payload.symptoms, payload.diagnosis]):
            raise RecordValidationError("Patient ID, date, symptoms, and diagnosis are required")
        patient_id = _coerce_int(payload.patient_id, 'patientId')

        with self._transaction() as snapshot:
            checkup = {
                'id': next_id(snapshot['checkups']),
                'patientId': patient_id,
                'date': payload.date,
                'symptoms': payload.symptoms,
                'diagnosis': payload.diagnosis,
                'prescription': payload.prescription or '',
                'followUpDate': payload.follow_up_date or '',
                'createdAt': utc_timestamp(),
            }
            snapshot['checkups'].append(checkup)

        logger.info(f"Created checkup id={checkup['id']} for patient id={patient_id}")
        return dict(checkup)

    def update_checkup(self, checkup_id: int, fields: Union[CheckupUpdate, Mapping[str, Any]]) -> Dict[str, Any]:
        """
        date, symptoms and diagnosis merge when truthy; prescription and
        followUpDate are replaced whenever the payload carries the key
        """
        payload = _parse_payload(CheckupUpdate, fields)
        provided = payload.model_fields_set

        with self._transaction() as snapshot:
            checkups = snapshot['checkups']
            index = _find_index(checkups, checkup_id)
            if index is None:
                raise RecordNotFoundError("Checkup not found")
            current = checkups[index]
            current.update(
                date=payload.date or current.get('date'),
                symptoms=payload.symptoms or current.get('symptoms'),
                diagnosis=payload.diagnosis or current.get('diagnosis'),
                prescription=payload.prescription if 'prescription' in provided else current.get('prescription'),
                followUpDate=payload.follow_up_date if 'follow_up_date' in provided else current.get('followUpDate'),
            )
            checkup = dict(current)

        logger.info(f"Updated checkup id={checkup_id}")
        return checkup

    def delete_checkup(self, checkup_id: int) -> Dict[str, str]:
        with self._transaction() as snapshot:
            index = _find_index(snapshot['checkups'], checkup_id)
            if index is None:
                raise RecordNotFoundError("Checkup not found")
            del snapshot['checkups'][index]

        logger.info(f"Deleted checkup id={checkup_id}")
        return {'message': 'Checkup deleted successfully'}

    # ==================== DASHBOARD ====================

    def dashboard_stats(self, today: Optional[str] = None) -> Dict[str, int]:
        return dashboard_stats(self.load(), today=today)

    def appointments_per_day(self) -> List[Dict[str, Any]]:
        return appointments_per_day(self.load())
