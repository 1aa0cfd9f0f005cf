"""Dashboard stats and the communications log."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_job_service
from app.schemas import Communication, CommunicationCreate
from app.services.job_service import JobService

router = APIRouter(tags=["dashboard"])


@router.get("/api/dashboard/stats")
async def stats(service: JobService = Depends(get_job_service)):
    """Job counts per status, paid revenue, unpaid completed work and profit after expenses."""
    s = service.stats()
    return {
        "pending": s.pending,
        "scheduled": s.scheduled,
        "completed": s.completed,
        "cancelled": s.cancelled,
        "revenue": s.revenue,
        "outstanding": s.outstanding,
        "total_expenses": s.total_expenses,
        "net_profit": s.net_profit,
        "currency": service.settings.currency,
    }


@router.get("/api/communications", response_model=list[Communication])
async def communications(
    job_id: str | None = None,
    customer_id: str | None = None,
    service: JobService = Depends(get_job_service),
):
    return service.communications(job_id, customer_id)


@router.post("/api/communications", response_model=Communication, status_code=201)
async def log_communication(body: CommunicationCreate, service: JobService = Depends(get_job_service)):
    """Record a text, email or call with a customer."""
    return await service.add_communication(body)
