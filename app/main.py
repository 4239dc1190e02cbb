# app/main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.endpoints import auth, health, id_requests, notifications, users
from app.core.config import settings
from app.core.exceptions import (
    FieldValidationError,
    InvalidStatusTransition,
    UniquenessViolation,
    UserHasRequests,
)
from app.core.logging_config import setup_logging
from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.services.user_service import ensure_default_admin

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    init_db()
    db = SessionLocal()
    try:
        ensure_default_admin(db)
    finally:
        db.close()
    logger.info(f"{settings.PROJECT_NAME} started")


def _error(status_code: int, detail: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, **extra})


@app.exception_handler(UniquenessViolation)
async def handle_uniqueness_violation(request: Request, exc: UniquenessViolation):
    return _error(status.HTTP_409_CONFLICT, exc.message, field=exc.field)


@app.exception_handler(FieldValidationError)
async def handle_field_validation_error(request: Request, exc: FieldValidationError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.message, field=exc.field)


@app.exception_handler(InvalidStatusTransition)
async def handle_invalid_transition(request: Request, exc: InvalidStatusTransition):
    return _error(status.HTTP_409_CONFLICT, str(exc))


@app.exception_handler(UserHasRequests)
async def handle_user_has_requests(request: Request, exc: UserHasRequests):
    return _error(status.HTTP_409_CONFLICT, str(exc))


api_prefix = settings.API_V1_PREFIX
app.include_router(auth.router, prefix=f"{api_prefix}/auth", tags=["auth"])
app.include_router(users.router, prefix=api_prefix)
app.include_router(id_requests.router, prefix=api_prefix)
app.include_router(notifications.router, prefix=api_prefix)
app.include_router(health.router, prefix=f"{api_prefix}/health")
