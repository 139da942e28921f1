"""
Basic configuration

- Snapshot file location and corrupt-file read policy
- CORS origins for development and production
- Supports environment variables for deployment overrides
"""
import os

# Where the clinic snapshot lives (relative paths resolve against the working directory)
DATA_FILE = os.getenv("CLINIC_DATA_FILE", "data/clinic.json")

# What load() does when the snapshot exists but cannot be parsed:
#   "empty" - log a warning and serve an empty snapshot
#   "raise" - fail the request with a StorageError
READ_POLICY_EMPTY = "empty"
READ_POLICY_RAISE = "raise"
CORRUPT_SNAPSHOT_POLICY = os.getenv("CLINIC_CORRUPT_SNAPSHOT_POLICY", READ_POLICY_EMPTY).strip().lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Default localhost origins for development
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# Get additional CORS origins from environment variable
ADDITIONAL_CORS_ORIGINS = os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []

# Filter out empty strings from split
ADDITIONAL_CORS_ORIGINS = [origin.strip() for origin in ADDITIONAL_CORS_ORIGINS if origin.strip()]

# Combine default and additional origins
CORS_ORIGINS = DEFAULT_CORS_ORIGINS + ADDITIONAL_CORS_ORIGINS
