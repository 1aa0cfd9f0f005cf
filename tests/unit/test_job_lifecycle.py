from datetime import date, datetime, timedelta, timezone

import pytest

from app.errors import InvalidTransition, ValidationError
from app.schemas import (
    BusinessSettings,
    Frequency,
    Job,
    JobCreate,
    JobEvent,
    JobStatus,
    PaymentStatus,
)
from app.services import job_lifecycle
from app.services.job_lifecycle import next_occurrence

NOW = datetime(2024, 6, 3, 14, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture
def settings():
    return BusinessSettings(organization_id="org")


def _job(status=JobStatus.SCHEDULED, frequency=Frequency.ONE_OFF, **kw):
    kw.setdefault("scheduled_date", TODAY if status != JobStatus.PENDING else None)
    kw.setdefault("address", "1 High St")
    return Job(
        organization_id="org",
        customer_name="Ann",
        status=status,
        frequency=frequency,
        price_quote=35,
        **kw,
    )


def test_new_lead_logs_lead_created():
    result = job_lifecycle.new_job("org", JobCreate(customer_name="Ann", address="1 High St"), NOW)
    assert result.job.status == JobStatus.PENDING
    assert result.job.customer_id == "Ann-1 High St"
    assert [r.subject for r in result.records] == ["Lead Created"]


def test_new_scheduled_job_needs_date():
    with pytest.raises(ValidationError):
        job_lifecycle.new_job("org", JobCreate(customer_name="Ann", status=JobStatus.SCHEDULED), NOW)


def test_new_job_cannot_start_completed():
    with pytest.raises(InvalidTransition):
        job_lifecycle.new_job("org", JobCreate(customer_name="Ann", status=JobStatus.COMPLETED), NOW)


def test_accept_assigns_date_and_logs():
    job = _job(JobStatus.PENDING)
    result = job_lifecycle.accept(job, date(2024, 6, 10), NOW)
    assert job.status == JobStatus.SCHEDULED
    assert job.scheduled_date == date(2024, 6, 10)
    record = result.records[0]
    assert record.old_status == JobStatus.PENDING
    assert record.new_status == JobStatus.SCHEDULED
    assert record.subject == "Status Update: Scheduled"
    assert record.body == "Job status changed from Pending to Scheduled."


def test_accept_without_address_fails():
    job = _job(JobStatus.PENDING, address=" ")
    with pytest.raises(ValidationError) as exc:
        job_lifecycle.accept(job, date(2024, 6, 10), NOW)
    assert exc.value.field == "address"
    assert job.status == JobStatus.PENDING


def test_cancel_pending_does_not_schedule():
    job = _job(JobStatus.PENDING)
    job_lifecycle.cancel(job, NOW)
    assert job.status == JobStatus.CANCELLED
    assert job.scheduled_date is None


def test_reject_only_from_pending():
    with pytest.raises(InvalidTransition):
        job_lifecycle.reject(_job(), NOW)


def test_complete_pending_is_invalid():
    job = _job(JobStatus.PENDING)
    with pytest.raises(InvalidTransition) as exc:
        job_lifecycle.complete(job, BusinessSettings(organization_id="org"), NOW)
    assert exc.value.current == "Pending"
    assert exc.value.requested == "complete"
    assert job.status == JobStatus.PENDING


@pytest.mark.parametrize("status", [JobStatus.COMPLETED, JobStatus.CANCELLED])
def test_terminal_states_allow_nothing(status):
    assert job_lifecycle.allowed_events(status) == []
    for event in JobEvent:
        with pytest.raises(InvalidTransition):
            job_lifecycle.next_status(status, event)


def test_complete_always_sets_unpaid(settings):
    job = _job(payment_status=PaymentStatus.PAID)
    result = job_lifecycle.complete(job, settings, NOW)
    assert job.status == JobStatus.COMPLETED
    assert job.payment_status == PaymentStatus.UNPAID
    assert job.completed_date == NOW
    assert result.spawned is None


def test_complete_stops_running_timer(settings):
    job = _job(is_timer_running=True, timer_start_time=NOW - timedelta(minutes=50))
    result = job_lifecycle.complete(job, settings, NOW)
    assert not job.is_timer_running
    assert result.timer_minutes == pytest.approx(50)
    assert job.actual_duration_minutes == pytest.approx(50)


def test_fortnightly_completion_spawns_one_job(settings):
    job = _job(frequency=Frequency.FORTNIGHTLY, notes="gate code 1234")
    result = job_lifecycle.complete(job, settings, NOW)
    spawned = result.spawned
    assert spawned is not None
    assert spawned.id != job.id
    assert spawned.status == JobStatus.SCHEDULED
    assert spawned.scheduled_date == TODAY + timedelta(days=14)
    assert spawned.customer_id == job.customer_id
    assert spawned.price_quote == job.price_quote
    assert spawned.payment_status is None
    assert "Auto-generated" in spawned.notes
    assert [r.subject for r in result.records] == ["Status Update: Completed", "Recurring Job Scheduled"]


def test_no_recurrence_when_disabled():
    settings = BusinessSettings(organization_id="org", auto_create_recurring=False)
    result = job_lifecycle.complete(_job(frequency=Frequency.WEEKLY), settings, NOW)
    assert result.spawned is None


def test_monthly_keeps_calendar_overflow():
    assert next_occurrence(date(2023, 1, 31), Frequency.MONTHLY) == date(2023, 3, 3)
    assert next_occurrence(date(2024, 1, 31), Frequency.MONTHLY) == date(2024, 3, 2)
    assert next_occurrence(date(2024, 12, 15), Frequency.MONTHLY) == date(2025, 1, 15)
    assert next_occurrence(date(2024, 6, 3), Frequency.WEEKLY) == date(2024, 6, 10)
    assert next_occurrence(date(2024, 6, 3), Frequency.ONE_OFF) is None


def test_payment_toggle_on_completed_job(settings):
    job = _job()
    job_lifecycle.complete(job, settings, NOW)
    job_lifecycle.toggle_payment(job, NOW)
    assert job.payment_status == PaymentStatus.PAID
    job_lifecycle.toggle_payment(job, NOW)
    assert job.payment_status == PaymentStatus.UNPAID


def test_payment_requires_completed_job():
    with pytest.raises(InvalidTransition):
        job_lifecycle.set_payment_status(_job(), PaymentStatus.PAID, NOW)


def test_rain_delay_moves_only_todays_scheduled_jobs():
    new_date = TODAY + timedelta(days=2)
    today_jobs = [_job() for _ in range(3)]
    tomorrow = _job(scheduled_date=TODAY + timedelta(days=1))
    done = _job(JobStatus.COMPLETED)

    affected = job_lifecycle.rain_delay([*today_jobs, tomorrow, done], TODAY, new_date)

    assert affected == today_jobs
    for job in today_jobs:
        assert job.scheduled_date == new_date
        assert job.is_rain_delayed
        assert job.status == JobStatus.SCHEDULED
        assert job.notes.endswith(f"[System] Rescheduled due to rain to {new_date.isoformat()}")
    assert tomorrow.scheduled_date == TODAY + timedelta(days=1)
    assert not tomorrow.is_rain_delayed
    assert done.scheduled_date == TODAY
