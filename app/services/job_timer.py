"""On-site timer: accumulates actual minutes worked across start/stop sessions."""

from __future__ import annotations

from datetime import datetime

from app.errors import InvalidTransition, ValidationError
from app.schemas.job import Job


def _minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def start_timer(job: Job, now: datetime) -> Job:
    if job.status.is_terminal:
        raise InvalidTransition(job.status.value, "start_timer")
    if job.is_timer_running:
        raise ValidationError("Timer is already running", field="is_timer_running")
    job.is_timer_running = True
    job.timer_start_time = now
    return job


def stop_timer(job: Job, now: datetime) -> float:
    """Stop the running session and return the minutes it added."""
    if not job.is_timer_running or job.timer_start_time is None:
        raise ValidationError("Timer is not running", field="is_timer_running")
    session = max(0.0, _minutes_between(job.timer_start_time, now))
    job.actual_duration_minutes = (job.actual_duration_minutes or 0.0) + session
    job.timer_start_time = None
    job.is_timer_running = False
    return session


def toggle_timer(job: Job, now: datetime) -> Job:
    if job.is_timer_running:
        stop_timer(job, now)
    else:
        start_timer(job, now)
    return job


def elapsed_minutes(job: Job, now: datetime) -> float:
    """Accumulated minutes plus the current session, for display."""
    total = job.actual_duration_minutes or 0.0
    if job.is_timer_running and job.timer_start_time is not None:
        total += max(0.0, _minutes_between(job.timer_start_time, now))
    return total
