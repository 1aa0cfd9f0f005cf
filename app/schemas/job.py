from __future__ import annotations

from datetime import date, datetime, timezone

from pydantic import BaseModel, Field, field_validator, model_validator
from ulid import ULID

from app.schemas.enums import Frequency, JobStatus, LawnSize, PaymentStatus


def new_id() -> str:
    return str(ULID())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Job(BaseModel):
    """A lawn visit: a lead until accepted, then a slot on the route."""

    id: str = Field(default_factory=new_id)
    organization_id: str
    customer_id: str = ""
    customer_name: str
    email: str | None = None
    phone: str | None = None
    address: str = ""
    postcode: str = ""
    zone: str | None = None
    lawn_size: LawnSize = LawnSize.MEDIUM
    frequency: Frequency = Frequency.ONE_OFF
    price_quote: float = Field(0.0, ge=0)
    duration_minutes: int = Field(45, gt=0)
    status: JobStatus = JobStatus.PENDING
    payment_status: PaymentStatus | None = None
    scheduled_date: date | None = None
    completed_date: datetime | None = None
    notes: str | None = None
    lead_source: str | None = None
    is_timer_running: bool = False
    timer_start_time: datetime | None = None
    actual_duration_minutes: float = 0.0
    is_rain_delayed: bool = False
    route_position: int = 0
    created_at: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}

    @field_validator("completed_date", "timer_start_time", "created_at")
    @classmethod
    def _as_utc(cls, v: datetime | None) -> datetime | None:
        # SQLite hands back naive datetimes
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def _default_customer_id(self) -> "Job":
        if not self.customer_id:
            self.customer_id = f"{self.customer_name}-{self.address}"
        return self

    def append_note(self, line: str) -> None:
        self.notes = f"{self.notes}\n{line}" if self.notes else line


class JobCreate(BaseModel):
    customer_name: str
    email: str | None = None
    phone: str | None = None
    address: str = ""
    postcode: str = ""
    zone: str | None = None
    lawn_size: LawnSize = LawnSize.MEDIUM
    frequency: Frequency = Frequency.ONE_OFF
    price_quote: float = Field(0.0, ge=0)
    duration_minutes: int = Field(45, gt=0)
    status: JobStatus = JobStatus.PENDING  # Pending | Scheduled
    scheduled_date: date | None = None
    notes: str | None = None
    lead_source: str | None = None


class JobUpdate(BaseModel):
    """Edits that are not status transitions."""

    customer_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    postcode: str | None = None
    zone: str | None = None
    lawn_size: LawnSize | None = None
    frequency: Frequency | None = None
    price_quote: float | None = Field(None, ge=0)
    duration_minutes: int | None = Field(None, gt=0)
    notes: str | None = None
    lead_source: str | None = None

    # Omit these to leave them alone; they cannot be cleared
    @field_validator(
        "customer_name", "address", "postcode", "lawn_size", "frequency", "price_quote", "duration_minutes"
    )
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class CustomerUpdate(BaseModel):
    """Rename or re-address a customer across all of their jobs."""

    name: str = Field(min_length=1)
    address: str
    email: str | None = None
    phone: str | None = None
    zone: str | None = None


class AcceptRequest(BaseModel):
    scheduled_date: date


class PaymentUpdate(BaseModel):
    status: PaymentStatus | None = None  # None toggles


class TimerRead(BaseModel):
    job_id: str
    is_timer_running: bool
    timer_start_time: datetime | None
    actual_duration_minutes: float
    elapsed_minutes: float


class CompleteResult(BaseModel):
    job: Job
    next_job: Job | None = None  # auto-created recurrence


class PaymentResult(BaseModel):
    job: Job
    review_message: str | None = None  # drafted when the job becomes Paid


class MessageDraft(BaseModel):
    kind: str
    message: str
