from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_forecast, get_job_service
from app.schemas import Outlook
from app.services.job_service import JobService
from app.services.mowability import MowabilityThresholds
from app.services.weather import ForecastService

router = APIRouter(prefix="/api/weather", tags=["weather"])


@router.get("", response_model=Outlook)
async def outlook(
    city: str | None = None,
    service: JobService = Depends(get_job_service),
    forecast: ForecastService = Depends(get_forecast),
):
    """Daily forecast with a mowability score per day; `available` is False when offline."""
    thresholds = MowabilityThresholds.from_settings(service.settings)
    return await forecast.outlook(thresholds, city)
