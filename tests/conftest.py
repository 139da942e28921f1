"""
Shared fixtures: a store backed by a temporary snapshot file
"""
import pytest

from app.database.storage import ClinicStore


@pytest.fixture
def data_file(tmp_path):
    """Path of the snapshot file used by the store under test"""
    return tmp_path / "clinic.json"


@pytest.fixture
def store(data_file):
    """Store with the default (empty snapshot) read policy"""
    return ClinicStore(data_file)


@pytest.fixture
def patient_fields():
    return {
        "name": "Alice Moyo",
        "age": 30,
        "gender": "F",
        "phone": "555-0100",
        "address": "12 Main St",
    }
