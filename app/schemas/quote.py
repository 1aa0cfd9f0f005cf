from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.enums import Frequency, LawnSize
from app.schemas.job import Job


class QuoteRequest(BaseModel):
    lawn_size: LawnSize | None = None
    lawn_area: float | None = Field(None, gt=0)  # m², from the measurement tool
    frequency: Frequency = Frequency.ONE_OFF
    extras: list[str] = []
    address: str = ""


class PriceBreakdown(BaseModel):
    base: float
    extras: float
    surcharges: float = 0.0
    discount: float


class QuoteResponse(BaseModel):
    estimated_price: float
    estimated_duration_minutes: int
    explanation: str
    surcharges_applied: list[str] = []
    price_breakdown: PriceBreakdown


class BookingRequest(QuoteRequest):
    """Public booking form: a quote request plus contact details."""

    customer_name: str
    email: str | None = None
    phone: str | None = None
    postcode: str = ""
    notes: str | None = None
    lead_source: str = "Website"
    apply_dynamic_rules: bool = False


class BookingResult(BaseModel):
    job: Job
    quote: QuoteResponse
