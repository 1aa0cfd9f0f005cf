from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_job_service
from app.schemas import CustomerUpdate, Job
from app.services.job_service import JobService

router = APIRouter(prefix="/api/customers", tags=["customers"])


# Customer keys are "{name}-{address}" and addresses may contain slashes
@router.patch("/{customer_id:path}", response_model=list[Job])
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    service: JobService = Depends(get_job_service),
):
    """Rename or re-address a customer on all of their jobs."""
    return await service.update_customer(customer_id, body)
