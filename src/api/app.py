import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapter.services.notification_dispatcher import (
    OutboxNotificationDispatcher,
    ResendNotificationDispatcher,
)
from src.app.services.credential_hasher import CredentialHasher
from src.depends import build_engine, build_session_factory

logger = logging.getLogger(__name__)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Something went wrong."},
    )


def build_notification_dispatcher(ApplicationConfig, http_client: httpx.AsyncClient):
    if not ApplicationConfig.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY not set, reset emails stay in the in-memory outbox")
        return OutboxNotificationDispatcher()
    return ResendNotificationDispatcher(
        http_client,
        api_key=ApplicationConfig.RESEND_API_KEY,
        sender=ApplicationConfig.MAIL_FROM,
        api_url=ApplicationConfig.RESEND_API_URL,
        timeout_seconds=ApplicationConfig.DISPATCH_TIMEOUT_SECONDS,
        max_attempts=ApplicationConfig.DISPATCH_MAX_ATTEMPTS,
        backoff_seconds=ApplicationConfig.DISPATCH_BACKOFF_SECONDS,
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL)

    engine = build_engine(ApplicationConfig.DB_URI)
    http_client = httpx.AsyncClient()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await http_client.aclose()
        await engine.dispose()

    app = FastAPI(title="API", version="0.1.0", lifespan=lifespan)

    # Process-wide resources, built once and injected per request
    app.state.config = ApplicationConfig
    app.state.session_factory = build_session_factory(engine)
    app.state.credential_hasher = CredentialHasher(ApplicationConfig.BCRYPT_ROUNDS)
    app.state.notification_dispatcher = build_notification_dispatcher(
        ApplicationConfig, http_client
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])

    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
