"""Business expenses, netted against paid revenue on the dashboard."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from app.schemas.enums import ExpenseCategory
from app.schemas.job import new_id, utcnow


class Expense(BaseModel):
    id: str = Field(default_factory=new_id)
    organization_id: str
    title: str
    amount: float = Field(gt=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: dt.date
    notes: str | None = None
    created_at: dt.datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, v: dt.datetime) -> dt.datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=dt.timezone.utc)
        return v


class ExpenseCreate(BaseModel):
    title: str = Field(min_length=1)
    amount: float = Field(gt=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: dt.date | None = None  # defaults to today
    notes: str | None = None
