"""Business settings — one row per organization."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin


class BusinessSettingsModel(Base, ULIDMixin):
    __tablename__ = "business_settings"

    organization_id: Mapped[str] = mapped_column(String(64), unique=True)
    business_name: Mapped[str] = mapped_column(String(200), default="JobMow Lawn Care")
    email: Mapped[str] = mapped_column(String(255), default="")
    phone: Mapped[str] = mapped_column(String(50), default="")
    currency: Mapped[str] = mapped_column(String(8), default="£")

    small_lawn_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    medium_lawn_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    large_lawn_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    estate_lawn_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    extra_fertilizer_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    extra_edging_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    extra_weeding_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    extra_leaf_cleanup_price: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    weekly_discount: Mapped[float | None] = mapped_column(Float, nullable=True, default=15)
    fortnightly_discount: Mapped[float | None] = mapped_column(Float, nullable=True, default=10)
    monthly_discount: Mapped[float | None] = mapped_column(Float, nullable=True, default=0)
    measurement_pricing_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    price_per_sqm: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)

    overgrown_threshold: Mapped[int] = mapped_column(Integer, default=90)
    overgrown_surcharge: Mapped[float] = mapped_column(Float, default=15)
    fuel_surcharge_radius: Mapped[float] = mapped_column(Float, default=15)
    fuel_surcharge_amount: Mapped[float] = mapped_column(Float, default=5)
    business_base_postcode: Mapped[str] = mapped_column(String(20), default="")

    schedule_start_hour: Mapped[int] = mapped_column(Integer, default=8)
    schedule_end_hour: Mapped[int] = mapped_column(Integer, default=17)
    working_days: Mapped[list] = mapped_column(JSON, default=lambda: [1, 2, 3, 4, 5])
    auto_create_recurring: Mapped[bool] = mapped_column(Boolean, default=True)
    zones: Mapped[list] = mapped_column(JSON, default=list)

    max_rain_chance: Mapped[float] = mapped_column(Float, default=70)
    max_wind_kmh: Mapped[float] = mapped_column(Float, default=30)
    min_temp_c: Mapped[float] = mapped_column(Float, default=5)
    max_temp_c: Mapped[float] = mapped_column(Float, default=30)
