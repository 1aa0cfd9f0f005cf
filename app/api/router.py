"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.customers import router as customers_router
from app.api.dashboard import router as dashboard_router
from app.api.expenses import router as expenses_router
from app.api.jobs import router as jobs_router
from app.api.quotes import router as quotes_router
from app.api.schedule import router as schedule_router
from app.api.settings import router as settings_router
from app.api.weather import router as weather_router

api_router = APIRouter()
api_router.include_router(jobs_router)
api_router.include_router(customers_router)
api_router.include_router(schedule_router)
api_router.include_router(quotes_router)
api_router.include_router(settings_router)
api_router.include_router(weather_router)
api_router.include_router(expenses_router)
api_router.include_router(dashboard_router)
