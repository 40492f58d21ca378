from __future__ import annotations

# Standard library
import os
import logging as _logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

# Third-party
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Local application imports
from api.users import invalid_input_body, router as users_router
from application.user.account_controller import AccountController
from infrastructure.config import (
    get_session_cleanup_interval_seconds,
    get_session_ttl_seconds,
)
from infrastructure.scheduler import SchedulerManager
from infrastructure.session.in_memory_session_store import InMemorySessionStore
from infrastructure.user.hmac_password_hasher import HmacPasswordHasher
from infrastructure.user.mongo_user_repository import MongoUserRepository
from infrastructure.user.repository_factory import get_user_repository

_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

# --- Basic logging configuration (minimal) ---
_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_logging.basicConfig(
    level=getattr(_logging, _LOG_LEVEL, _logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

APP_VERSION = os.getenv("APP_VERSION", "0.0.0-dev")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in ("1", "true", "yes")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the account controller and prepare storage.

    STARTUP:
    - repository selected by USER_REPOSITORY (unique index ensured on MongoDB)
    - session store with SESSION_TTL_SECONDS lifetime, swept for expired
      entries every SESSION_CLEANUP_INTERVAL_SECONDS
    - password hasher keyed by PASSWORD_SECRET_KEY

    SHUTDOWN:
    - stops the scheduler
    - drops the controller reference
    """
    logger = _logging.getLogger("startup")

    repository = get_user_repository()
    if isinstance(repository, MongoUserRepository):
        await repository.ensure_indexes()

    sessions = InMemorySessionStore(ttl_seconds=get_session_ttl_seconds())
    scheduler = SchedulerManager()
    scheduler.initialize(sessions, get_session_cleanup_interval_seconds())
    scheduler.start()

    app.state.account_controller = AccountController(
        repository=repository,
        hasher=HmacPasswordHasher(),
        sessions=sessions,
        logout_on_password_change=_env_flag("LOGOUT_ON_PASSWORD_CHANGE"),
    )
    logger.info(
        "lifespan.startup",
        extra={"repository": type(repository).__name__, "version": APP_VERSION},
    )

    yield

    scheduler.shutdown()
    app.state.account_controller = None
    logger.info("lifespan.shutdown")


app = FastAPI(title="Account Service", version=APP_VERSION, lifespan=lifespan)
app.include_router(users_router)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Any:
    _logging.getLogger("api").info("request.invalid", extra={"path": request.url.path})
    return JSONResponse(status_code=200, content=invalid_input_body())


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok", "version": APP_VERSION}
