from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from app.schemas.enums import CommunicationType, JobStatus
from app.schemas.job import new_id, utcnow


class Communication(BaseModel):
    """One entry in a customer's communications log; System entries are the audit trail."""

    id: str = Field(default_factory=new_id)
    organization_id: str
    customer_id: str
    job_id: str | None = None
    type: CommunicationType = CommunicationType.SYSTEM
    subject: str
    body: str
    old_status: JobStatus | None = None
    new_status: JobStatus | None = None
    date: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}

    @field_validator("date")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class CommunicationCreate(BaseModel):
    """A manual log entry: a text, email or call with the customer.

    Either `job_id` or `customer_id` names who it is about; with a job the
    customer is taken from the job.
    """

    type: CommunicationType
    subject: str = Field(min_length=1)
    body: str = ""
    job_id: str | None = None
    customer_id: str | None = None

    @field_validator("type")
    @classmethod
    def _not_system(cls, v: CommunicationType) -> CommunicationType:
        if v == CommunicationType.SYSTEM:
            raise ValueError("System entries are written by the job service")
        return v
