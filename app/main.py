"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.agents.messaging.drafter import MessageDrafter
from app.api.router import api_router
from app.config import get_settings
from app.db.engine import async_session_factory, create_tables, engine
from app.db.store import SqlStore
from app.errors import InvalidTransition, NotFound, PersistenceFailure, ValidationError
from app.services.job_service import JobService
from app.services.notifications import Notifier
from app.services.postcodes import PostcodeLookup
from app.services.weather import ForecastService, OpenMeteoProvider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    await create_tables()

    notifier = Notifier(settings)
    service = JobService(SqlStore(async_session_factory), settings.organization_id, notifier=notifier)
    await service.load()

    app.state.job_service = service
    app.state.forecast = ForecastService(OpenMeteoProvider(settings.weather), settings.weather.city)
    app.state.postcodes = PostcodeLookup(settings.postcodes)
    app.state.drafter = MessageDrafter()
    logger.info("JobMow ready for organization %s", settings.organization_id)
    yield
    await notifier.drain()
    await engine.dispose()


app = FastAPI(
    title="JobMow",
    description="Route scheduling and job lifecycle for lawn care businesses.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(NotFound)
async def not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidTransition)
async def invalid_transition(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={
        "detail": str(exc),
        "current": exc.current,
        "requested": exc.requested,
    })


@app.exception_handler(ValidationError)
async def validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(PersistenceFailure)
async def persistence_failure(request: Request, exc: PersistenceFailure):
    return JSONResponse(status_code=503, content={"detail": "Could not save changes, please retry"})


app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
