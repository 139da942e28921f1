"""
Store tests - snapshot handling, CRUD contracts and cascade rules
"""
import json
import re
import threading

import pytest

from app.database.errors import RecordNotFoundError, RecordValidationError, StorageError
from app.database.schemas import CheckupUpdate, PatientInput
from app.database.storage import ClinicStore


def _read(data_file):
    with open(data_file, 'r') as f:
        return json.load(f)


def _appointment(patient_id, **overrides):
    fields = {"patientId": patient_id, "date": "2024-01-01", "time": "09:00", "reason": "Fever"}
    fields.update(overrides)
    return fields


def _checkup(patient_id, **overrides):
    fields = {"patientId": patient_id, "date": "2024-01-01", "symptoms": "Cough", "diagnosis": "Cold"}
    fields.update(overrides)
    return fields


# ==================== SNAPSHOT ====================

def test_load_creates_missing_file(store, data_file):
    assert not data_file.exists()

    snapshot = store.load()

    assert snapshot == {"patients": [], "appointments": [], "checkups": []}
    assert data_file.exists()
    assert _read(data_file) == snapshot


def test_load_corrupt_file_returns_empty_snapshot(store, data_file):
    data_file.write_text("{not json")

    assert store.load() == {"patients": [], "appointments": [], "checkups": []}
    # The corrupt file is left alone until the next write
    assert data_file.read_text() == "{not json"


def test_load_non_object_json_returns_empty_snapshot(store, data_file):
    data_file.write_text("[1, 2, 3]")
    assert store.load() == {"patients": [], "appointments": [], "checkups": []}


def test_load_corrupt_file_raises_with_raise_policy(data_file):
    data_file.write_text("{not json")
    store = ClinicStore(data_file, corrupt_policy="raise")

    with pytest.raises(StorageError):
        store.load()


def test_unknown_policy_rejected(data_file):
    with pytest.raises(ValueError):
        ClinicStore(data_file, corrupt_policy="ignore")


@pytest.mark.parametrize("patients", [
    [{"name": "No id"}],
    [{"id": "1", "name": "String id"}],
    ["not a record"],
])
def test_load_malformed_records_return_empty_snapshot(store, data_file, patients):
    data_file.write_text(json.dumps({"patients": patients, "appointments": [], "checkups": []}))

    assert store.load() == {"patients": [], "appointments": [], "checkups": []}


def test_load_malformed_records_raise_with_raise_policy(data_file):
    data_file.write_text(json.dumps({"patients": [], "appointments": [{"date": "2024-01-01"}], "checkups": []}))
    store = ClinicStore(data_file, corrupt_policy="raise")

    with pytest.raises(StorageError, match="appointments"):
        store.load()


def test_load_fills_missing_collections(store, data_file):
    data_file.write_text(json.dumps({"patients": [{"id": 1, "name": "A"}]}))

    snapshot = store.load()

    assert snapshot["patients"] == [{"id": 1, "name": "A"}]
    assert snapshot["appointments"] == []
    assert snapshot["checkups"] == []


def test_save_load_round_trip_is_byte_identical(store, data_file, patient_fields):
    store.create_patient(patient_fields)
    store.create_appointment(_appointment(1))
    store.create_checkup(_checkup(1, prescription="Rest"))
    before = data_file.read_bytes()

    store.save(store.load())

    assert data_file.read_bytes() == before


def test_save_failure_raises_storage_error(tmp_path):
    # Parent "directory" is a regular file, so the write cannot succeed
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = ClinicStore(blocker / "clinic.json")

    with pytest.raises(StorageError):
        store.save({"patients": [], "appointments": [], "checkups": []})


# ==================== PATIENTS ====================

def test_create_patient_assigns_sequential_ids(store, data_file, patient_fields):
    first = store.create_patient(patient_fields)
    second = store.create_patient({**patient_fields, "name": "Bob"})

    assert first["id"] == 1
    assert second["id"] == 2
    assert [p["name"] for p in _read(data_file)["patients"]] == ["Alice Moyo", "Bob"]


def test_create_patient_record_shape(store, patient_fields):
    patient = store.create_patient({**patient_fields, "age": "42"})

    assert list(patient) == ["id", "name", "age", "gender", "phone", "address", "createdAt"]
    assert patient["age"] == 42
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", patient["createdAt"])


def test_create_patient_accepts_model(store, patient_fields):
    patient = store.create_patient(PatientInput(**patient_fields))
    assert patient["name"] == "Alice Moyo"


@pytest.mark.parametrize("field", ["name", "age", "gender", "phone", "address"])
def test_create_patient_requires_every_field(store, data_file, patient_fields, field):
    store.load()
    before = data_file.read_bytes()
    fields = dict(patient_fields)
    del fields[field]

    with pytest.raises(RecordValidationError, match="All fields are required"):
        store.create_patient(fields)

    # No state change
    assert data_file.read_bytes() == before


def test_create_patient_rejects_zero_and_empty(store, patient_fields):
    with pytest.raises(RecordValidationError):
        store.create_patient({**patient_fields, "age": 0})
    with pytest.raises(RecordValidationError):
        store.create_patient({**patient_fields, "name": ""})


def test_create_patient_truncates_fractional_age(store, patient_fields):
    patient = store.create_patient({**patient_fields, "age": 30.5})
    assert patient["age"] == 30


def test_create_patient_rejects_non_numeric_age(store, patient_fields):
    with pytest.raises(RecordValidationError, match="age"):
        store.create_patient({**patient_fields, "age": "thirty"})
    assert store.list_patients() == []


def test_get_patient_not_found(store):
    with pytest.raises(RecordNotFoundError, match="Patient not found"):
        store.get_patient(1)


def test_get_patient_returns_copy(store, patient_fields):
    store.create_patient(patient_fields)

    patient = store.get_patient(1)
    patient["name"] = "Changed"

    assert store.get_patient(1)["name"] == "Alice Moyo"


def test_update_patient_is_full_overwrite(store, patient_fields):
    created = store.create_patient(patient_fields)

    updated = store.update_patient(1, {"name": "Alice M.", "age": "31", "gender": "F", "address": "New St"})

    assert updated["name"] == "Alice M."
    assert updated["age"] == 31
    # phone was not sent, so it is cleared
    assert updated["phone"] is None
    assert updated["id"] == 1
    assert updated["createdAt"] == created["createdAt"]
    assert store.get_patient(1) == updated


def test_update_patient_not_found(store, patient_fields):
    with pytest.raises(RecordNotFoundError):
        store.update_patient(5, patient_fields)


def test_update_patient_unknown_id_reported_before_bad_age(store, data_file):
    store.load()
    before = data_file.read_bytes()

    with pytest.raises(RecordNotFoundError, match="Patient not found"):
        store.update_patient(99, {"age": "abc"})

    assert data_file.read_bytes() == before


def test_update_patient_bad_age_leaves_record_unchanged(store, patient_fields):
    created = store.create_patient(patient_fields)

    with pytest.raises(RecordValidationError, match="age"):
        store.update_patient(1, {**patient_fields, "age": "abc"})

    assert store.get_patient(1) == created


def test_delete_patient_cascades(store, patient_fields):
    store.create_patient(patient_fields)                      # P = 1
    store.create_patient({**patient_fields, "name": "Other"})  # 2
    store.create_appointment(_appointment(1))                  # A1
    store.create_appointment(_appointment(1, date="2024-01-02"))  # A2
    store.create_appointment(_appointment(2))
    store.create_checkup(_checkup(1))                          # C1
    store.create_checkup(_checkup(2))

    result = store.delete_patient(1)

    assert result == {"message": "Patient deleted successfully"}
    snapshot = store.load()
    assert [p["id"] for p in snapshot["patients"]] == [2]
    assert [(a["id"], a["patientId"]) for a in snapshot["appointments"]] == [(3, 2)]
    assert [(c["id"], c["patientId"]) for c in snapshot["checkups"]] == [(2, 2)]


def test_delete_patient_not_found(store):
    with pytest.raises(RecordNotFoundError):
        store.delete_patient(1)


def test_ids_not_reused_after_delete(store, patient_fields):
    assert store.create_patient(patient_fields)["id"] == 1
    assert store.create_patient(patient_fields)["id"] == 2

    store.delete_patient(1)

    assert store.create_patient(patient_fields)["id"] == 3


# ==================== APPOINTMENTS ====================

def test_create_appointment_defaults(store):
    appointment = store.create_appointment(_appointment("4"))

    assert appointment["id"] == 1
    assert appointment["patientId"] == 4
    assert appointment["status"] == "pending"
    assert list(appointment) == ["id", "patientId", "date", "time", "reason", "status", "createdAt"]


@pytest.mark.parametrize("field", ["patientId", "date", "time", "reason"])
def test_create_appointment_requires_fields(store, field):
    fields = _appointment(1)
    fields[field] = ""

    with pytest.raises(RecordValidationError):
        store.create_appointment(fields)


def test_create_appointment_rejects_unknown_status(store):
    with pytest.raises(RecordValidationError, match="status"):
        store.create_appointment(_appointment(1, status="cancelled"))


def test_appointment_reads_attach_patient_name(store, patient_fields):
    store.create_patient(patient_fields)
    store.create_appointment(_appointment(1))
    store.create_appointment(_appointment(42))

    listed = store.list_appointments()

    assert [a["patientName"] for a in listed] == ["Alice Moyo", "Unknown"]
    assert store.get_appointment(2)["patientName"] == "Unknown"
    # The join is not persisted
    assert "patientName" not in store.load()["appointments"][0]


def test_get_appointment_not_found(store):
    with pytest.raises(RecordNotFoundError, match="Appointment not found"):
        store.get_appointment(3)


def test_update_appointment_partial_merge(store):
    store.create_appointment(_appointment(1, status="completed"))

    updated = store.update_appointment(1, {"date": "2024-02-01", "reason": "", "patientId": None})

    assert updated["date"] == "2024-02-01"
    assert updated["reason"] == "Fever"
    assert updated["patientId"] == 1
    # status missing from the payload, previous value kept
    assert updated["status"] == "completed"


def test_update_appointment_status_only(store):
    store.create_appointment(_appointment(1))

    updated = store.update_appointment(1, {"status": "completed"})

    assert updated["status"] == "completed"
    assert updated["time"] == "09:00"


def test_update_appointment_not_found(store):
    with pytest.raises(RecordNotFoundError):
        store.update_appointment(1, {"status": "completed"})


def test_update_appointment_unknown_id_reported_before_bad_status(store):
    with pytest.raises(RecordNotFoundError, match="Appointment not found"):
        store.update_appointment(99, {"status": "bogus", "patientId": "x"})


def test_update_appointment_bad_status_leaves_record_unchanged(store):
    created = store.create_appointment(_appointment(1))

    with pytest.raises(RecordValidationError, match="status"):
        store.update_appointment(1, {"status": "bogus", "date": "2024-09-09"})

    stored = store.load()["appointments"][0]
    assert stored == created


def test_delete_appointment(store):
    store.create_appointment(_appointment(1))
    store.create_appointment(_appointment(1))

    assert store.delete_appointment(1) == {"message": "Appointment deleted successfully"}
    assert [a["id"] for a in store.load()["appointments"]] == [2]
    with pytest.raises(RecordNotFoundError):
        store.delete_appointment(1)


# ==================== CHECKUPS ====================

def test_create_checkup_defaults_optional_fields(store):
    checkup = store.create_checkup(_checkup(1, prescription=None))

    assert checkup["prescription"] == ""
    assert checkup["followUpDate"] == ""
    assert list(checkup) == [
        "id", "patientId", "date", "symptoms", "diagnosis", "prescription", "followUpDate", "createdAt",
    ]


def test_create_checkup_requires_fields(store):
    with pytest.raises(RecordValidationError, match="Patient ID, date, symptoms, and diagnosis are required"):
        store.create_checkup({"patientId": 1, "date": "2024-01-01", "symptoms": "Cough"})


def test_update_checkup_explicit_presence(store):
    store.create_checkup(_checkup(1, prescription="Paracetamol", followUpDate="2024-01-10"))

    # Omitted keys keep their values
    kept = store.update_checkup(1, {"diagnosis": "Flu"})
    assert kept["diagnosis"] == "Flu"
    assert kept["prescription"] == "Paracetamol"
    assert kept["followUpDate"] == "2024-01-10"

    # Present-but-empty keys clear them, empty truthy-merge fields keep theirs
    cleared = store.update_checkup(1, {"prescription": "", "symptoms": ""})
    assert cleared["prescription"] == ""
    assert cleared["symptoms"] == "Cough"
    assert cleared["followUpDate"] == "2024-01-10"


def test_update_checkup_accepts_model(store):
    store.create_checkup(_checkup(1, followUpDate="2024-01-10"))

    updated = store.update_checkup(1, CheckupUpdate(followUpDate=""))

    assert updated["followUpDate"] == ""


def test_update_checkup_not_found(store):
    with pytest.raises(RecordNotFoundError, match="Checkup not found"):
        store.update_checkup(1, {"diagnosis": "Flu"})


def test_list_checkups_by_patient(store, patient_fields):
    store.create_patient(patient_fields)
    store.create_checkup(_checkup(1))
    store.create_checkup(_checkup(2))
    store.create_checkup(_checkup(1, date="2024-03-01"))

    checkups = store.list_checkups_by_patient(1)

    assert [c["id"] for c in checkups] == [1, 3]
    assert all(c["patientName"] == "Alice Moyo" for c in checkups)
    assert store.list_checkups_by_patient(99) == []


def test_checkup_reads_attach_patient_name(store):
    store.create_checkup(_checkup(7))

    assert store.list_checkups()[0]["patientName"] == "Unknown"
    assert store.get_checkup(1)["patientName"] == "Unknown"


def test_delete_checkup(store):
    store.create_checkup(_checkup(1))

    assert store.delete_checkup(1) == {"message": "Checkup deleted successfully"}
    assert store.list_checkups() == []
    with pytest.raises(RecordNotFoundError):
        store.delete_checkup(1)


# ==================== DASHBOARD / CONCURRENCY ====================

def test_store_dashboard(store, patient_fields):
    store.create_patient(patient_fields)
    store.create_appointment(_appointment(1, date="2024-01-03"))
    store.create_appointment(_appointment(1, date="2024-01-01"))
    store.create_checkup(_checkup(1))

    assert store.dashboard_stats(today="2024-01-01") == {
        "totalPatients": 1,
        "totalAppointments": 2,
        "todayAppointments": 1,
        "totalCheckups": 1,
    }
    assert store.appointments_per_day() == [
        {"date": "2024-01-01", "count": 1},
        {"date": "2024-01-03", "count": 1},
    ]


def test_concurrent_creates_do_not_lose_updates(store, patient_fields):
    threads = [threading.Thread(target=store.create_patient, args=(patient_fields,)) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(p["id"] for p in store.list_patients()) == list(range(1, 11))
