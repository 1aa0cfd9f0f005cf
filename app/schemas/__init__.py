"""Pydantic request/response schemas."""

from app.schemas.business_settings import BusinessSettings, BusinessSettingsUpdate
from app.schemas.communication import Communication, CommunicationCreate
from app.schemas.enums import (
    CommunicationType, ExpenseCategory, Frequency, JobEvent, JobStatus, LawnSize, PaymentStatus,
)
from app.schemas.expense import Expense, ExpenseCreate
from app.schemas.job import (
    AcceptRequest, CompleteResult, CustomerUpdate, Job, JobCreate, JobUpdate, MessageDraft, PaymentResult,
    PaymentUpdate, TimerRead,
)
from app.schemas.quote import BookingRequest, BookingResult, PriceBreakdown, QuoteRequest, QuoteResponse
from app.schemas.schedule import (
    DayPlan, OptimizeResult, RainDelayRequest, RainDelayResult, ReorderRequest, ScheduleCell, ScheduleView,
    TimeSlot,
)
from app.schemas.weather import DailyForecast, DayOutlook, Outlook

__all__ = [
    "BusinessSettings", "BusinessSettingsUpdate",
    "Communication", "CommunicationCreate",
    "CommunicationType", "ExpenseCategory", "Frequency", "JobEvent", "JobStatus", "LawnSize", "PaymentStatus",
    "Expense", "ExpenseCreate",
    "AcceptRequest", "CompleteResult", "CustomerUpdate", "Job", "JobCreate", "JobUpdate", "MessageDraft",
    "PaymentResult", "PaymentUpdate", "TimerRead",
    "BookingRequest", "BookingResult", "PriceBreakdown", "QuoteRequest", "QuoteResponse",
    "DayPlan", "OptimizeResult", "RainDelayRequest", "RainDelayResult", "ReorderRequest",
    "ScheduleCell", "ScheduleView", "TimeSlot",
    "DailyForecast", "DayOutlook", "Outlook",
]
