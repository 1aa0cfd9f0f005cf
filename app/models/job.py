"""Job model — a lead or a visit on the route."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin


class JobModel(Base, ULIDMixin):
    __tablename__ = "jobs"

    organization_id: Mapped[str] = mapped_column(String(64), index=True)
    customer_id: Mapped[str] = mapped_column(String(500), default="")
    customer_name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)
    address: Mapped[str] = mapped_column(String(500), default="")
    postcode: Mapped[str] = mapped_column(String(20), default="")
    zone: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
    lawn_size: Mapped[str] = mapped_column(String(20), default="Medium")  # Small | Medium | Large | Estate
    frequency: Mapped[str] = mapped_column(String(20), default="One-off")  # One-off | Weekly | Fortnightly | Monthly
    price_quote: Mapped[float] = mapped_column(Float, default=0.0)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=45)
    status: Mapped[str] = mapped_column(String(20), default="Pending", index=True)
    payment_status: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True, default=None, index=True)
    completed_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    lead_source: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
    is_timer_running: Mapped[bool] = mapped_column(Boolean, default=False)
    timer_start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    actual_duration_minutes: Mapped[float] = mapped_column(Float, default=0.0)
    is_rain_delayed: Mapped[bool] = mapped_column(Boolean, default=False)
    route_position: Mapped[int] = mapped_column(Integer, default=0)
