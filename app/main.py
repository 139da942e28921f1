"""
FastAPI app

- One ClinicStore per process, created here and injected into routes
- CORS configured for the front-end dev server
- Store errors mapped onto HTTP status codes
- Basic health check
"""
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file early (before config is read)
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / '.env')

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import router
from app.api.middleware import TimingMiddleware
from app.core.config import CORS_ORIGINS, DATA_FILE, CORRUPT_SNAPSHOT_POLICY, LOG_LEVEL
from app.core.logging import setup_logging
from app.database.errors import RecordNotFoundError, RecordValidationError, StorageError
from app.database.storage import ClinicStore

setup_logging(LOG_LEVEL)

app = FastAPI(title="Clinic Admin API", version="1.0.0")
app.state.store = ClinicStore(DATA_FILE, corrupt_policy=CORRUPT_SNAPSHOT_POLICY)

# Logs request duration for all requests
app.add_middleware(TimingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.on_event("startup")
async def on_startup() -> None:
    # Creates the snapshot file on first run
    app.state.store.load()


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse(status_code=404, content={"error": exc.message})


@app.exception_handler(RecordValidationError)
async def validation_error_handler(request: Request, exc: RecordValidationError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.get("/")
async def root():
    """
    Basic health check
    """
    return {"status": "ok"}
