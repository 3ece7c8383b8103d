import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import (
    AvatarRejectedError,
    AvatarUploadError,
    FormValidationError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownFieldError,
    WizardError,
)
from core.logging_config import logger
from core.wizard_sessions import get_session_store

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers import health_router, wizards_router


# Status for each wizard error; checked in order, first match wins
WIZARD_ERROR_STATUS = [
    (FormValidationError, 422),
    (SubmissionInProgressError, 409),
    (UnknownFieldError, 400),
    (AvatarRejectedError, 400),
    (AvatarUploadError, 502),
]


def wizard_error_status(exc: WizardError) -> int:
    if isinstance(exc, SubmissionError):
        return exc.status_code
    for error_type, status in WIZARD_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 400


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Property Onboarding API: team member and tenant onboarding wizards",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info("🚀 Starting Property Onboarding API")
        validate_config_on_startup()
        dropped = get_session_store().cleanup_expired()
        if dropped:
            logger.info(f"Dropped {dropped} expired wizard sessions")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(WizardError)
    async def handle_wizard_error(request: Request, exc: WizardError):
        status_code = wizard_error_status(exc)
        content = {"detail": str(exc)}
        if isinstance(exc, FormValidationError):
            content["errors"] = [e.to_dict() for e in exc.errors]
        if status_code >= 500:
            logger.warning(f"HTTP {status_code} at {request.url} - {exc}")
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 409, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url} - {exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(wizards_router)
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
