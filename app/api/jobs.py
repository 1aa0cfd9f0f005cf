from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.agents.messaging.drafter import MessageDrafter
from app.agents.messaging.prompts import PROMPTS
from app.agents.messaging.tools import job_context
from app.dependencies import get_drafter, get_job_service
from app.schemas import (
    AcceptRequest,
    Communication,
    CompleteResult,
    Job,
    JobCreate,
    JobStatus,
    JobUpdate,
    MessageDraft,
    PaymentResult,
    PaymentStatus,
    PaymentUpdate,
    TimerRead,
)
from app.services.job_service import JobService

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _timer(service: JobService, job: Job) -> TimerRead:
    return TimerRead(
        job_id=job.id,
        is_timer_running=job.is_timer_running,
        timer_start_time=job.timer_start_time,
        actual_duration_minutes=job.actual_duration_minutes,
        elapsed_minutes=service.elapsed_minutes(job.id),
    )


@router.get("", response_model=list[Job])
async def list_jobs(
    status: JobStatus | None = None,
    service: JobService = Depends(get_job_service),
):
    return service.list_jobs(status)


@router.post("", response_model=Job, status_code=201)
async def create_job(body: JobCreate, service: JobService = Depends(get_job_service)):
    return await service.create_job(body)


@router.get("/{job_id}", response_model=Job)
async def get_job(job_id: str, service: JobService = Depends(get_job_service)):
    return service.get_job(job_id)


@router.patch("/{job_id}", response_model=Job)
async def update_job(job_id: str, body: JobUpdate, service: JobService = Depends(get_job_service)):
    return await service.update_job(job_id, body)


@router.get("/{job_id}/communications", response_model=list[Communication])
async def job_communications(job_id: str, service: JobService = Depends(get_job_service)):
    service.get_job(job_id)
    return service.communications(job_id)


# ── Transitions ──────────────────────────────────────────

@router.post("/{job_id}/accept", response_model=Job)
async def accept_job(job_id: str, body: AcceptRequest, service: JobService = Depends(get_job_service)):
    return await service.accept(job_id, body.scheduled_date)


@router.post("/{job_id}/reject", response_model=Job)
async def reject_job(job_id: str, service: JobService = Depends(get_job_service)):
    return await service.reject(job_id)


@router.post("/{job_id}/cancel", response_model=Job)
async def cancel_job(job_id: str, service: JobService = Depends(get_job_service)):
    return await service.cancel(job_id)


@router.post("/{job_id}/complete", response_model=CompleteResult)
async def complete_job(job_id: str, service: JobService = Depends(get_job_service)):
    job, next_job = await service.complete(job_id)
    return CompleteResult(job=job, next_job=next_job)


@router.post("/{job_id}/payment", response_model=PaymentResult)
async def update_payment(
    job_id: str,
    body: PaymentUpdate | None = None,
    service: JobService = Depends(get_job_service),
    drafter: MessageDrafter = Depends(get_drafter),
):
    """Set or toggle payment. Becoming Paid drafts a review request for the customer."""
    before = service.get_job(job_id).payment_status
    job = await service.set_payment_status(job_id, body.status if body else None)

    review = None
    if job.payment_status == PaymentStatus.PAID and before != PaymentStatus.PAID:
        ctx = job_context(job, business_name=service.settings.business_name)
        review = await drafter.draft_text("review_request", ctx)
    return PaymentResult(job=job, review_message=review)


# ── Timer ────────────────────────────────────────────────

@router.get("/{job_id}/timer", response_model=TimerRead)
async def get_timer(job_id: str, service: JobService = Depends(get_job_service)):
    return _timer(service, service.get_job(job_id))


@router.post("/{job_id}/timer/start", response_model=TimerRead)
async def start_timer(job_id: str, service: JobService = Depends(get_job_service)):
    return _timer(service, await service.start_timer(job_id))


@router.post("/{job_id}/timer/stop", response_model=TimerRead)
async def stop_timer(job_id: str, service: JobService = Depends(get_job_service)):
    return _timer(service, await service.stop_timer(job_id))


@router.post("/{job_id}/timer/toggle", response_model=TimerRead)
async def toggle_timer(job_id: str, service: JobService = Depends(get_job_service)):
    return _timer(service, await service.toggle_timer(job_id))


# ── Customer messages ────────────────────────────────────

@router.post("/{job_id}/eta-message", response_model=MessageDraft)
async def eta_message(
    job_id: str,
    service: JobService = Depends(get_job_service),
    drafter: MessageDrafter = Depends(get_drafter),
):
    return await draft_message(job_id, "eta", service, drafter)


@router.post("/{job_id}/messages/{kind}", response_model=MessageDraft)
async def draft_message(
    job_id: str,
    kind: str,
    service: JobService = Depends(get_job_service),
    drafter: MessageDrafter = Depends(get_drafter),
):
    if kind not in PROMPTS:
        raise HTTPException(404, f"Unknown message kind: {kind}")
    job = service.get_job(job_id)
    ctx = job_context(
        job,
        business_name=service.settings.business_name,
        currency=service.settings.currency,
    )
    return MessageDraft(kind=kind, message=await drafter.draft_text(kind, ctx))
