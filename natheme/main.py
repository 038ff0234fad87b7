# natheme/main.py

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlmodel import Session
from starlette.exceptions import HTTPException

from natheme import settings
from natheme.auth_service import ensure_owner_account
from natheme.db import create_db_and_tables, engine
from natheme.routers import admin, auth, catalogs, contact, projects, users
from natheme.settings import get_auth_config
from natheme.storage import ensure_upload_dirs

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler to manage application startup tasks.

    Validates the auth configuration, creates the tables and upload
    directories, and bootstraps the owner account.
    """
    config = get_auth_config()

    create_db_and_tables()
    logger.info("Database created and tables ensured.")

    ensure_upload_dirs()

    with Session(engine) as session:
        owner = ensure_owner_account(
            session, config, name=settings.OWNER_NAME, password=str(settings.OWNER_PASSWORD) or None
        )
        if owner is not None:
            logger.info(f"Owner account is user ID {owner.id}.")

    yield


app = FastAPI(title="Natheme API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.CORS_ORIGINS),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(projects.router)
app.include_router(catalogs.router)
app.include_router(users.router)
app.include_router(contact.router)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Natheme backend is running"


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    # an explicit null counts as a missing field
    missing = any(
        error.get("type") == "missing" or ("input" in error and error["input"] is None) for error in errors
    )
    message = "Please fill in all required fields" if missing else "Invalid request body"
    return JSONResponse(status_code=400, content={"message": message})

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Catches all unhandled exceptions and returns a 500 Internal Server Error.
    """
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"message": "Server error"},
    )
