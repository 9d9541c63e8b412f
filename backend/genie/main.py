from contextlib import asynccontextmanager
from functools import lru_cache
import logging
import time

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from genie.api.routers import system
from genie.api.routers.assistance import build_assistance_router
from genie.api.routers.forms import build_forms_router
from genie.api.routers.notifications import build_notifications_router
from genie.assistant import BedrockFormAssistant
from genie.auth import require_authenticated_user
from genie.config import settings
from genie.db import init_db
from genie.notifications.email import ResendEmailClient
from genie.notifications.teams import TeamsWebhookClient
from genie.observability import (
    configure_logging,
    normalize_request_id,
    reset_request_id,
    sanitize_for_logging,
    set_request_id,
)
from genie.version import APP_VERSION

logger = logging.getLogger("genie.api")


@lru_cache(maxsize=1)
def _cached_form_assistant() -> BedrockFormAssistant:
    return BedrockFormAssistant(settings=settings)


def get_form_assistant() -> BedrockFormAssistant:
    return _cached_form_assistant()


def get_email_client() -> ResendEmailClient:
    return ResendEmailClient(settings=settings)


def get_webhook_client() -> TeamsWebhookClient:
    return TeamsWebhookClient(settings=settings)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.log_level)
    logger.info("application_startup", extra={"event": "application_startup", "environment": settings.app_env})
    init_db()
    yield
    logger.info("application_shutdown", extra={"event": "application_shutdown"})


def create_app() -> FastAPI:
    cors_origins = settings.cors_origins_list
    if settings.cors_allow_credentials and any(origin == "*" for origin in cors_origins):
        raise RuntimeError("Invalid CORS_ORIGINS: wildcard '*' is not allowed when credentials are enabled.")

    app = FastAPI(title=settings.app_name, version=APP_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", settings.request_id_header],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = normalize_request_id(request.headers.get(settings.request_id_header))
        request.state.request_id = request_id
        token = set_request_id(request_id)
        started = time.perf_counter()

        logger.info(
            "request_started",
            extra={
                "event": "request_started",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query": sanitize_for_logging(dict(request.query_params)),
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            response.headers[settings.request_id_header] = request_id
            logger.info(
                "request_completed",
                extra={
                    "event": "request_completed",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                },
            )
            return response
        except Exception:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.exception(
                "request_failed",
                extra={
                    "event": "request_failed",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": elapsed_ms,
                },
            )
            raise
        finally:
            reset_request_id(token)

    # Getters resolve through module globals at call time so tests can swap them.
    forms_router = build_forms_router(
        get_assistant=lambda: get_form_assistant(),
        get_email_client=lambda: get_email_client(),
        get_webhook_client=lambda: get_webhook_client(),
    )
    assistance_router = build_assistance_router(get_assistant=lambda: get_form_assistant())
    notifications_router = build_notifications_router(
        get_assistant=lambda: get_form_assistant(),
        get_email_client=lambda: get_email_client(),
        get_webhook_client=lambda: get_webhook_client(),
    )

    protected = [Depends(require_authenticated_user)]
    for prefix in ("", "/api"):
        app.include_router(system.router, prefix=prefix)
        app.include_router(forms_router, prefix=prefix, dependencies=protected)
        app.include_router(assistance_router, prefix=prefix, dependencies=protected)
        app.include_router(notifications_router, prefix=prefix, dependencies=protected)

    return app


app = create_app()
