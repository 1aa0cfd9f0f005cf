from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel

from app.schemas.job import Job


class ScheduleView(str, Enum):
    DAY = "day"
    WEEK = "week"
    TWO_WEEK = "two-week"
    MONTH = "month"


class ScheduleCell(BaseModel):
    date: dt.date
    in_month: bool = True  # False for leading/trailing days of the month grid
    is_today: bool = False
    is_working_day: bool = True
    jobs: list[Job] = []


class TimeSlot(BaseModel):
    job_id: str
    customer_name: str
    start_minute: int  # minutes after midnight
    end_minute: int
    start_label: str  # "8:00"
    end_label: str
    travel_after: int  # minutes of travel buffer before the next job, 0 for the last
    overruns: bool = False  # ends after the schedule window closes


class DayPlan(BaseModel):
    date: dt.date
    jobs: list[Job]
    slots: list[TimeSlot]


class ReorderRequest(BaseModel):
    ordered_ids: list[str]


class RainDelayRequest(BaseModel):
    new_date: dt.date
    today: dt.date | None = None


class RainDelayResult(BaseModel):
    new_date: dt.date
    affected: list[Job]
    message: str


class OptimizeResult(BaseModel):
    ordered_ids: list[str]
    reasoning: str
    applied: bool  # False when no suggestion was available and the order is unchanged
    plan: DayPlan
