from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_job_service
from app.schemas import BusinessSettings, BusinessSettingsUpdate
from app.services.job_service import JobService

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=BusinessSettings)
async def get_business_settings(service: JobService = Depends(get_job_service)):
    return service.settings


@router.patch("", response_model=BusinessSettings)
async def update_business_settings(
    body: BusinessSettingsUpdate,
    service: JobService = Depends(get_job_service),
):
    return await service.update_settings(body)
