"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from handcricket.api.admin import router as admin_router
from handcricket.api.events import router as events_router
from handcricket.api.games import router as games_router
from handcricket.config import Settings
from handcricket.core.auth import GrantAuthorizer
from handcricket.core.engine import GameEngine
from handcricket.core.event_bus import EventBus, HubOutbox
from handcricket.core.hub import EventBusHub
from handcricket.db.engine import create_engine, create_tables, get_session
from handcricket.db.repository import Repository, SqlGameStore
from handcricket.models.errors import ErrorCode, GameError, NotAuthorizedError

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.GAME_NOT_FOUND: 404,
    ErrorCode.NOT_PLAYER: 403,
    ErrorCode.NOT_TOSS_WINNER: 403,
    ErrorCode.PROOF_INVALID: 422,
}


async def init_storage(engine: AsyncEngine, settings: Settings, bus: EventBus) -> None:
    """Create tables and record the configured admin/hub on first boot."""
    await create_tables(engine)
    async with HubOutbox(bus).transaction() as outbox, get_session(engine) as session:
        game_engine = GameEngine(
            SqlGameStore(Repository(session)),
            GrantAuthorizer(),
            lambda hub_id: EventBusHub(hub_id, outbox),
            contract_id=settings.handcricket_contract_id,
            ttl_seconds=settings.handcricket_game_ttl_seconds,
        )
        await game_engine.initialize(settings.handcricket_admin_id, settings.handcricket_hub_id)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create engine/tables, start the expiry purge scheduler."""
    settings: Settings = app.state.settings
    engine = create_engine(settings.database_url)
    await init_storage(engine, settings, app.state.event_bus)
    app.state.engine = engine

    scheduler = None
    if settings.handcricket_purge_enabled:
        from apscheduler.schedulers.asyncio import AsyncIOScheduler
        from apscheduler.triggers.cron import CronTrigger

        from handcricket.core.maintenance import purge_expired_sessions

        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            purge_expired_sessions,
            trigger=CronTrigger.from_crontab(settings.handcricket_purge_cron),
            kwargs={"engine": engine},
            id="purge_expired_sessions",
            name="Purge expired game sessions",
            replace_existing=True,
        )
        scheduler.start()
        logger.info("scheduler_started cron=%s", settings.handcricket_purge_cron)
    else:
        logger.info("scheduler_disabled")
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")

    await engine.dispose()


async def _game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    return JSONResponse(
        status_code=_ERROR_STATUS.get(exc.code, 409),
        content={"error": exc.code.label, "code": int(exc.code), "detail": exc.detail},
    )


async def _not_authorized_handler(request: Request, exc: NotAuthorizedError) -> JSONResponse:
    logger.info("unauthorized identity=%s path=%s", exc.identity, request.url.path)
    return JSONResponse(
        status_code=401,
        content={"error": "NotAuthorized", "detail": str(exc)},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the hand cricket FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.handcricket_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Hand Cricket",
        version="0.1.0",
        description="Two-player commit-reveal hand cricket engine",
        docs_url="/docs" if settings.handcricket_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.event_bus = EventBus()

    app.add_exception_handler(GameError, _game_error_handler)
    app.add_exception_handler(NotAuthorizedError, _not_authorized_handler)

    app.include_router(games_router)
    app.include_router(admin_router)
    app.include_router(events_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.handcricket_env}

    return app


app = create_app()
