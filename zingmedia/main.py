import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy import text

from zingmedia.config import settings
from zingmedia.db.base import SessionLocal, engine, init_db
from zingmedia.errors import ZingMediaError
from zingmedia.routers import (
    accounts,
    approval,
    assets,
    auth,
    briefings,
    campaigns,
    content,
    creatives,
    workflows,
)
from zingmedia.seed import seed_demo_data
from zingmedia.services import assets as assets_service
from zingmedia.services import generation as generation_service
from zingmedia.services.tasks import DeferredTaskRunner

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.getLogger("zingmedia").setLevel(settings.LOG_LEVEL.upper())
    logging.getLogger("auth").setLevel(settings.LOG_LEVEL.upper())


def build_task_runner() -> DeferredTaskRunner:
    runner = DeferredTaskRunner(SessionLocal, use_timers=settings.DEFERRED_TASKS_USE_TIMERS)
    generation_service.register_task_handlers(runner)
    assets_service.register_task_handlers(runner)
    return runner


def create_app(task_runner: DeferredTaskRunner | None = None) -> FastAPI:
    runner = task_runner or build_task_runner()

    @asynccontextmanager
    async def _app_lifespan(_app: FastAPI) -> AsyncIterator[None]:
        _configure_logging()
        if settings.uses_default_jwt_secret:
            logger.warning(
                "JWT_SECRET is the development default; set it before deploying",
                extra={"env": settings.ENV},
            )
        init_db()
        if settings.SEED_DEMO_DATA:
            with SessionLocal() as session:
                seed_demo_data(session)
        runner.start()
        runner.resume_pending()
        try:
            yield
        finally:
            runner.shutdown()

    app = FastAPI(
        title="ZingMedia API",
        default_response_class=ORJSONResponse,
        lifespan=_app_lifespan,
    )
    app.state.task_runner = runner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ZingMediaError)
    async def domain_error_handler(_request: Request, exc: ZingMediaError) -> ORJSONResponse:
        return ORJSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled server exception", exc_info=exc)
        return ORJSONResponse(status_code=500, content={"detail": "Internal server error."})

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/health/db")
    def health_db() -> dict[str, str]:
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return {"db": "ok"}
        except Exception as exc:  # pragma: no cover - simple runtime check
            return {"db": f"error: {exc}"}

    app.include_router(auth.router)
    app.include_router(accounts.router)
    app.include_router(briefings.router)
    app.include_router(content.router)
    app.include_router(content.sessions_router)
    app.include_router(workflows.router)
    app.include_router(approval.router)
    app.include_router(creatives.router)
    app.include_router(assets.router)
    app.include_router(campaigns.router)

    return app


app = create_app()
