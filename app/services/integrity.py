"""
Cross-collection rules

- Reads attach the owning patient's name to appointments and checkups
- Deleting a patient removes every appointment and checkup that references it
"""
from typing import Any, Dict, List

UNKNOWN_PATIENT_NAME = "Unknown"


def _patient_names(patients: List[Dict[str, Any]]) -> Dict[int, Any]:
    return {p.get('id'): p.get('name') for p in patients}


def with_patient_name(record: Dict[str, Any], patients: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Copy of record with patientName resolved; dangling references resolve
    to "Unknown"
    """
    names = _patient_names(patients)
    return _attach(record, names)


def attach_patient_names(records: List[Dict[str, Any]], patients: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    with_patient_name over a whole collection, building the lookup once
    """
    names = _patient_names(patients)
    return [_attach(record, names) for record in records]


def _attach(record: Dict[str, Any], names: Dict[int, Any]) -> Dict[str, Any]:
    result = record.copy()
    patient_id = record.get('patientId')
    result['patientName'] = names[patient_id] if patient_id in names else UNKNOWN_PATIENT_NAME
    return result


def cascade_delete_patient(snapshot: Dict[str, Any], patient_id: int) -> Dict[str, int]:
    """
    Remove a patient and its dependent records from the snapshot in place

    Returns how many records were removed from each collection.
    """
    before = {name: len(snapshot[name]) for name in ('patients', 'appointments', 'checkups')}

    snapshot['patients'] = [p for p in snapshot['patients'] if p.get('id') != patient_id]
    snapshot['appointments'] = [a for a in snapshot['appointments'] if a.get('patientId') != patient_id]
    snapshot['checkups'] = [c for c in snapshot['checkups'] if c.get('patientId') != patient_id]

    return {name: count - len(snapshot[name]) for name, count in before.items()}
