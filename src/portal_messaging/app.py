from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal_messaging.api.middleware.correlation_id import CorrelationIdMiddleware
from portal_messaging.api.middleware.metrics import RequestStats, RequestTimingMiddleware
from portal_messaging.api.v1.routers import conversations, health, messages, notifications
from portal_messaging.application.context import MessagingContext
from portal_messaging.application.exceptions import (
    AttachmentStoreError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RejectedError,
    ValidationError,
)
from portal_messaging.application.ports.bus import EventPublisher
from portal_messaging.application.ports.clock import SystemClock
from portal_messaging.application.ports.ids import UuidGenerator
from portal_messaging.application.uow import UnitOfWorkFactory
from portal_messaging.config import Settings, settings
from portal_messaging.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from portal_messaging.infrastructure.db.session import (
    create_engine,
    create_sessionmaker,
    create_tables,
)
from portal_messaging.infrastructure.db.uow import sqlalchemy_uow_factory
from portal_messaging.infrastructure.directory.static import StaticUserDirectory
from portal_messaging.infrastructure.memory.repositories import InMemoryStore
from portal_messaging.infrastructure.memory.uow import in_memory_uow_factory
from portal_messaging.infrastructure.storage.local import LocalBlobStore
from portal_messaging.logging_config import configure_logging
from portal_messaging.scripts.seed_dev_data import DEMO_USERS, seed
from portal_messaging.services.attachment_handler import AttachmentHandler
from portal_messaging.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


def build_context(
    cfg: Settings,
    uow_factory: UnitOfWorkFactory,
    *,
    publisher: EventPublisher | None = None,
) -> MessagingContext:
    """Wire the process-wide collaborators from settings."""
    if cfg.USERS_FILE:
        users = StaticUserDirectory.from_json(cfg.USERS_FILE)
    else:
        users = StaticUserDirectory(DEMO_USERS)

    clock = SystemClock()
    ids = UuidGenerator()
    dispatcher = NotificationDispatcher(
        uow_factory,
        clock,
        ids,
        publisher=publisher,
        channel=cfg.REDIS_NOTIFICATION_CHANNEL,
    )
    attachments = AttachmentHandler(
        LocalBlobStore(cfg.BLOB_STORE_DIR),
        timeout=cfg.BLOB_STORE_TIMEOUT_SECONDS,
    )
    return MessagingContext(
        users=users,
        dispatcher=dispatcher,
        attachments=attachments,
        clock=clock,
        ids=ids,
    )


def create_app(
    app_settings: Settings | None = None,
    *,
    uow_factory: UnitOfWorkFactory | None = None,
    ctx: MessagingContext | None = None,
) -> FastAPI:
    cfg = app_settings or settings

    engine = None
    if uow_factory is None:
        if cfg.STORAGE_BACKEND == "sql":
            engine = create_engine(cfg)
            uow_factory = sqlalchemy_uow_factory(create_sessionmaker(engine))
        else:
            uow_factory = in_memory_uow_factory(InMemoryStore())

    publisher: RedisPubSubPublisher | None = None
    if ctx is None:
        if cfg.REDIS_URL:
            publisher = RedisPubSubPublisher.from_url(cfg.REDIS_URL)
        ctx = build_context(cfg, uow_factory, publisher=publisher)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup / shutdown lifecycle."""
        configure_logging(cfg.LOG_LEVEL)
        if engine is not None:
            await create_tables(engine)
            logger.info("Database schema ready")
        if cfg.SEED_DEMO_DATA:
            await seed(app.state.uow_factory, app.state.ctx)

        yield

        await app.state.ctx.dispatcher.drain()
        if publisher is not None:
            await publisher.close()
            logger.info("Redis connection pool closed")
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title="Portal Messaging Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.uow_factory = uow_factory
    app.state.ctx = ctx
    app.state.request_stats = RequestStats()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)
    app.include_router(notifications.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(RejectedError)
    async def _rejected(_req: Request, exc: RejectedError) -> JSONResponse:
        return JSONResponse(
            status_code=413,
            content={"detail": exc.detail, "reason": exc.reason.value},
        )

    @app.exception_handler(AttachmentStoreError)
    async def _store_failed(_req: Request, exc: AttachmentStoreError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": exc.detail})
