from __future__ import annotations

import logging
import os
from typing import Callable

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pollbox.config import AppConfig, load_config
from pollbox.db.base import get_engine
from pollbox.db.migrations_runner import apply_migrations
from pollbox.http.problem import (
    handle_domain_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from pollbox.http.request_id import RequestIdMiddleware
from pollbox.logging_setup import configure_logging
from pollbox.logic.document_store import DocumentStore
from pollbox.logic.errors import PollboxError
from pollbox.logic.repository_questions import QuestionRepository
from pollbox.middleware.cors import apply_cors
from pollbox.routes import api_router

logger = logging.getLogger(__name__)


def _health_check(engine: Engine) -> Callable[[], dict]:
    def check() -> dict:
        try:
            with engine.connect() as conn:
                conn.execute(sql_text("SELECT 1")).fetchone()
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def _auto_migrations_enabled() -> bool:
    return os.getenv("AUTO_APPLY_MIGRATIONS", "1").strip().lower() in {"1", "true", "yes", "on"}


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    Migrations are applied here rather than in a startup hook so a bare
    `TestClient(create_app())` already sees the schema. Set
    AUTO_APPLY_MIGRATIONS=0 where the platform runs migrations itself.
    """
    configure_logging()
    cfg = config or load_config()
    engine = get_engine(cfg.database.dsn)
    if _auto_migrations_enabled():
        try:
            apply_migrations(engine)
        except SQLAlchemyError:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
    else:
        logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")

    app = FastAPI(title="Pollbox", version="1.0.0")
    app.state.config = cfg
    app.state.question_repository = QuestionRepository(
        DocumentStore(engine), append_max_attempts=cfg.database.append_max_attempts
    )

    app.add_exception_handler(PollboxError, handle_domain_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=cfg.http.cors_origins)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router, prefix="/api")

    health_check = _health_check(engine)

    @app.get("/health")
    def health():
        return health_check()

    if cfg.admin.password is None:
        logger.warning("admin_password_unset admin login will report a server misconfiguration")
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
