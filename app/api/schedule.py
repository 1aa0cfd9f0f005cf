"""Route planning: day plans, calendar grids, reordering and rain delays."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from app.agents.messaging.drafter import MessageDrafter
from app.dependencies import get_drafter, get_job_service
from app.schemas import (
    DayPlan,
    Job,
    OptimizeResult,
    RainDelayRequest,
    RainDelayResult,
    ReorderRequest,
    ScheduleCell,
    ScheduleView,
)
from app.services.job_service import JobService

router = APIRouter(prefix="/api/schedule", tags=["schedule"])


@router.get("/day", response_model=DayPlan)
async def day_plan(day: date | None = None, service: JobService = Depends(get_job_service)):
    return service.day_plan(day or service.today())


@router.get("/{view}", response_model=list[ScheduleCell])
async def schedule_view(
    view: ScheduleView,
    anchor: date | None = None,
    service: JobService = Depends(get_job_service),
):
    return service.schedule(view, anchor or service.today())


@router.post("/reorder", response_model=list[Job])
async def reorder(body: ReorderRequest, service: JobService = Depends(get_job_service)):
    return await service.reorder(body.ordered_ids)


@router.post("/optimize", response_model=OptimizeResult)
async def optimize(
    day: date | None = None,
    service: JobService = Depends(get_job_service),
    drafter: MessageDrafter = Depends(get_drafter),
):
    """Ask for a suggested visiting order for one day and apply it."""
    day = day or service.today()
    jobs = service.day_plan(day).jobs
    suggestion = await drafter.suggest_route_order(jobs, start_hour=service.settings.schedule_start_hour)
    if suggestion.from_ai:
        await service.reorder(suggestion.ordered_ids)
    return OptimizeResult(
        ordered_ids=suggestion.ordered_ids,
        reasoning=suggestion.reasoning,
        applied=suggestion.from_ai,
        plan=service.day_plan(day),
    )


@router.post("/rain-delay", response_model=RainDelayResult)
async def rain_delay(
    body: RainDelayRequest,
    service: JobService = Depends(get_job_service),
    drafter: MessageDrafter = Depends(get_drafter),
):
    affected = await service.rain_delay(body.new_date, body.today)
    message = await drafter.draft_text("rain_delay", {
        "new_date": body.new_date.isoformat(),
        "business_name": service.settings.business_name,
    })
    return RainDelayResult(new_date=body.new_date, affected=affected, message=message)
