"""Job status state machine.

    Pending --accept--> Scheduled --complete--> Completed
       |                    |
       +--reject/cancel--> Cancelled <--cancel--+

Completed and Cancelled are terminal. Payment toggles, note and zone edits
on a Completed job are not transitions. Every status change produces a
System communication record, which is the audit trail of the job.

Functions here mutate the job they are given and never touch storage; the
job service snapshots, persists and rolls back around them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable

from app.errors import InvalidTransition, ValidationError
from app.schemas.business_settings import BusinessSettings
from app.schemas.communication import Communication
from app.schemas.enums import CommunicationType, Frequency, JobEvent, JobStatus, PaymentStatus
from app.schemas.job import Job, JobCreate, new_id
from app.services.job_timer import stop_timer

TRANSITIONS: dict[tuple[JobStatus, JobEvent], JobStatus] = {
    (JobStatus.PENDING, JobEvent.ACCEPT): JobStatus.SCHEDULED,
    (JobStatus.PENDING, JobEvent.REJECT): JobStatus.CANCELLED,
    (JobStatus.PENDING, JobEvent.CANCEL): JobStatus.CANCELLED,
    (JobStatus.SCHEDULED, JobEvent.COMPLETE): JobStatus.COMPLETED,
    (JobStatus.SCHEDULED, JobEvent.CANCEL): JobStatus.CANCELLED,
}

RAIN_NOTE = "[System] Rescheduled due to rain to {new_date}"


@dataclass
class TransitionResult:
    job: Job
    old_status: JobStatus | None
    new_status: JobStatus
    records: list[Communication] = field(default_factory=list)
    spawned: Job | None = None
    timer_minutes: float = 0.0


def next_status(current: JobStatus, event: JobEvent) -> JobStatus:
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransition(current.value, event.value) from None


def allowed_events(current: JobStatus) -> list[JobEvent]:
    return [event for (status, event) in TRANSITIONS if status == current]


def status_record(job: Job, old: JobStatus, new: JobStatus, now: datetime) -> Communication:
    return Communication(
        organization_id=job.organization_id,
        customer_id=job.customer_id,
        job_id=job.id,
        type=CommunicationType.SYSTEM,
        subject=f"Status Update: {new.value}",
        body=f"Job status changed from {old.value} to {new.value}.",
        old_status=old,
        new_status=new,
        date=now,
    )


def new_job(organization_id: str, data: JobCreate, now: datetime) -> TransitionResult:
    """Create a lead (Pending) or a manually booked Scheduled job."""
    if data.status not in (JobStatus.PENDING, JobStatus.SCHEDULED):
        raise InvalidTransition("new", f"create as {data.status.value}")
    if not data.customer_name.strip():
        raise ValidationError("Customer name is required", field="customer_name")
    if data.status == JobStatus.SCHEDULED and data.scheduled_date is None:
        raise ValidationError("A scheduled job needs a scheduled_date", field="scheduled_date")

    job = Job(organization_id=organization_id, created_at=now, **data.model_dump())
    result = TransitionResult(job=job, old_status=None, new_status=job.status)

    if job.status == JobStatus.PENDING:
        result.records.append(Communication(
            organization_id=organization_id,
            customer_id=job.customer_id,
            job_id=job.id,
            subject="Lead Created",
            body=f"New lead received from {job.lead_source or 'Website'}. Quote: {job.price_quote:.2f}.",
            new_status=JobStatus.PENDING,
            date=now,
        ))
    return result


def _transition(job: Job, event: JobEvent, now: datetime) -> TransitionResult:
    old = job.status
    job.status = next_status(old, event)
    return TransitionResult(
        job=job,
        old_status=old,
        new_status=job.status,
        records=[status_record(job, old, job.status, now)],
    )


def accept(job: Job, scheduled_date: date | None, now: datetime) -> TransitionResult:
    next_status(job.status, JobEvent.ACCEPT)
    if not job.address.strip():
        raise ValidationError("Cannot schedule a lead without an address", field="address")
    if scheduled_date is None:
        raise ValidationError("scheduled_date is required to accept a lead", field="scheduled_date")

    result = _transition(job, JobEvent.ACCEPT, now)
    job.scheduled_date = scheduled_date
    return result


def reject(job: Job, now: datetime) -> TransitionResult:
    return _transition(job, JobEvent.REJECT, now)


def cancel(job: Job, now: datetime) -> TransitionResult:
    return _transition(job, JobEvent.CANCEL, now)


def _add_calendar_month(day: date) -> date:
    # Day-of-month overflow rolls into the following month (Jan 31 -> Mar 3)
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    return date(year, month, 1) + timedelta(days=day.day - 1)


def next_occurrence(day: date, frequency: Frequency) -> date | None:
    if frequency == Frequency.ONE_OFF:
        return None
    if frequency == Frequency.WEEKLY:
        return day + timedelta(days=7)
    if frequency == Frequency.FORTNIGHTLY:
        return day + timedelta(days=14)
    if frequency == Frequency.MONTHLY:
        return _add_calendar_month(day)
    raise ValueError(f"Unknown frequency: {frequency}")


def spawn_recurrence(job: Job, now: datetime) -> Job | None:
    """Next cycle's visit: same customer, address and pricing, fresh id."""
    next_date = next_occurrence(now.date(), job.frequency)
    if next_date is None:
        return None
    return job.model_copy(update={
        "id": new_id(),
        "status": JobStatus.SCHEDULED,
        "scheduled_date": next_date,
        "completed_date": None,
        "payment_status": None,
        "notes": f"Auto-generated recurrence from job on {now.date().isoformat()}",
        "is_timer_running": False,
        "timer_start_time": None,
        "actual_duration_minutes": 0.0,
        "is_rain_delayed": False,
        "created_at": now,
    })


def complete(job: Job, settings: BusinessSettings, now: datetime) -> TransitionResult:
    next_status(job.status, JobEvent.COMPLETE)

    timer_minutes = stop_timer(job, now) if job.is_timer_running else 0.0
    result = _transition(job, JobEvent.COMPLETE, now)
    result.timer_minutes = timer_minutes
    job.completed_date = now
    job.payment_status = PaymentStatus.UNPAID

    if settings.auto_create_recurring and job.frequency != Frequency.ONE_OFF:
        spawned = spawn_recurrence(job, now)
        result.spawned = spawned
        result.records.append(Communication(
            organization_id=job.organization_id,
            customer_id=job.customer_id,
            job_id=spawned.id,
            subject="Recurring Job Scheduled",
            body=f"Automated {job.frequency.value.lower()} visit created for {spawned.scheduled_date.isoformat()}.",
            date=now,
        ))
    return result


def set_payment_status(job: Job, status: PaymentStatus, now: datetime) -> Communication:
    if job.status != JobStatus.COMPLETED:
        raise InvalidTransition(job.status.value, f"mark {status.value.lower()}")
    job.payment_status = status
    return Communication(
        organization_id=job.organization_id,
        customer_id=job.customer_id,
        job_id=job.id,
        subject=f"Payment {status.value}",
        body=f"Job marked as {status.value.lower()}.",
        date=now,
    )


def toggle_payment(job: Job, now: datetime) -> Communication:
    target = PaymentStatus.UNPAID if job.payment_status == PaymentStatus.PAID else PaymentStatus.PAID
    return set_payment_status(job, target, now)


def due_for_rain_delay(jobs: Iterable[Job], today: date) -> list[Job]:
    return [j for j in jobs if j.status == JobStatus.SCHEDULED and j.scheduled_date == today]


def rain_delay(jobs: Iterable[Job], today: date, new_date: date) -> list[Job]:
    """Move every job scheduled today to `new_date`; status is unchanged."""
    affected = due_for_rain_delay(jobs, today)
    for job in affected:
        job.scheduled_date = new_date
        job.is_rain_delayed = True
        job.append_note(RAIN_NOTE.format(new_date=new_date.isoformat()))
    return affected
