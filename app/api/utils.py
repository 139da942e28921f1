"""
Utility functions for API endpoints
"""
from fastapi import Request

from app.database.storage import ClinicStore


def get_store(request: Request) -> ClinicStore:
    """
    Process-wide store created in app.main at startup
    """
    return request.app.state.store
