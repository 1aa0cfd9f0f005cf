"""Schedule views over the job list.

The persisted order of the job list is the route order: views filter it
and never sort it. Week-based views start on Monday.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Sequence

from app.schemas.business_settings import BusinessSettings
from app.schemas.enums import JobStatus
from app.schemas.job import Job
from app.schemas.schedule import ScheduleCell, ScheduleView, TimeSlot

TRAVEL_BUFFER_MINUTES = 15
MONTH_GRID_CELLS = 35

_ON_SCHEDULE = (JobStatus.SCHEDULED, JobStatus.COMPLETED)


def jobs_on_date(jobs: Iterable[Job], day: date) -> list[Job]:
    return [j for j in jobs if j.status in _ON_SCHEDULE and j.scheduled_date == day]


def start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def view_dates(view: ScheduleView, anchor: date) -> list[date]:
    if view == ScheduleView.DAY:
        return [anchor]
    if view == ScheduleView.WEEK:
        start, count = start_of_week(anchor), 7
    elif view == ScheduleView.TWO_WEEK:
        start, count = start_of_week(anchor), 14
    elif view == ScheduleView.MONTH:
        start, count = start_of_week(anchor.replace(day=1)), MONTH_GRID_CELLS
    else:
        raise ValueError(f"Unknown schedule view: {view}")
    return [start + timedelta(days=i) for i in range(count)]


def _js_weekday(day: date) -> int:
    # working_days uses 0 = Sunday
    return (day.weekday() + 1) % 7


def build_view(
    jobs: Sequence[Job],
    view: ScheduleView,
    anchor: date,
    *,
    today: date | None = None,
    working_days: Iterable[int] | None = None,
) -> list[ScheduleCell]:
    working = set(working_days) if working_days is not None else None
    cells = []
    for day in view_dates(view, anchor):
        cells.append(ScheduleCell(
            date=day,
            in_month=view != ScheduleView.MONTH or day.month == anchor.month,
            is_today=day == today,
            is_working_day=working is None or _js_weekday(day) in working,
            jobs=jobs_on_date(jobs, day),
        ))
    return cells


def reorder_jobs(jobs: Sequence[Job], ordered_ids: Sequence[str]) -> list[Job]:
    """Move the named jobs to the front in the given order; the rest keep theirs."""
    by_id = {j.id: j for j in jobs}
    front: list[Job] = []
    seen: set[str] = set()
    for job_id in ordered_ids:
        job = by_id.get(job_id)
        if job is not None and job_id not in seen:
            front.append(job)
            seen.add(job_id)
    return front + [j for j in jobs if j.id not in seen]


def _clock_label(minute: int) -> str:
    return f"{minute // 60}:{minute % 60:02d}"


def lay_out_day(jobs: Sequence[Job], settings: BusinessSettings) -> list[TimeSlot]:
    """Sequential time slots from the start of the working day, with travel between jobs."""
    window_end = settings.schedule_end_hour * 60
    current = settings.schedule_start_hour * 60
    slots = []
    for idx, job in enumerate(jobs):
        start = current
        end = start + job.duration_minutes
        travel = TRAVEL_BUFFER_MINUTES if idx < len(jobs) - 1 else 0
        slots.append(TimeSlot(
            job_id=job.id,
            customer_name=job.customer_name,
            start_minute=start,
            end_minute=end,
            start_label=_clock_label(start),
            end_label=_clock_label(end),
            travel_after=travel,
            overruns=end > window_end,
        ))
        current = end + TRAVEL_BUFFER_MINUTES
    return slots
