"""Per-organization business settings: pricing table, schedule window, weather thresholds."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class BusinessSettings(BaseModel):
    organization_id: str
    business_name: str = "JobMow Lawn Care"
    email: str = ""
    phone: str = ""
    currency: str = "£"

    # Pricing table. None means "use the calculator default".
    small_lawn_price: float | None = None
    medium_lawn_price: float | None = None
    large_lawn_price: float | None = None
    estate_lawn_price: float | None = None
    extra_fertilizer_price: float | None = None
    extra_edging_price: float | None = None
    extra_weeding_price: float | None = None
    extra_leaf_cleanup_price: float | None = None
    weekly_discount: float | None = 15
    fortnightly_discount: float | None = 10
    monthly_discount: float | None = 0
    measurement_pricing_enabled: bool = False
    price_per_sqm: float | None = None

    # Dynamic rules
    overgrown_threshold: int = 90  # minutes
    overgrown_surcharge: float = 15
    fuel_surcharge_radius: float = 15  # km
    fuel_surcharge_amount: float = 5
    business_base_postcode: str = ""

    # Schedule window
    schedule_start_hour: int = Field(8, ge=0, le=23)
    schedule_end_hour: int = Field(17, ge=1, le=24)
    working_days: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])  # 0 = Sunday
    auto_create_recurring: bool = True
    zones: list[str] = Field(default_factory=list)

    # Mowability thresholds
    max_rain_chance: float = 70
    max_wind_kmh: float = 30
    min_temp_c: float = 5
    max_temp_c: float = 30

    model_config = {"from_attributes": True}

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, v: list[int]) -> list[int]:
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("working_days must be 0 (Sunday) .. 6 (Saturday)")
        return sorted(set(v))


class BusinessSettingsUpdate(BaseModel):
    business_name: str | None = None
    email: str | None = None
    phone: str | None = None
    currency: str | None = None
    small_lawn_price: float | None = None
    medium_lawn_price: float | None = None
    large_lawn_price: float | None = None
    estate_lawn_price: float | None = None
    extra_fertilizer_price: float | None = None
    extra_edging_price: float | None = None
    extra_weeding_price: float | None = None
    extra_leaf_cleanup_price: float | None = None
    weekly_discount: float | None = None
    fortnightly_discount: float | None = None
    monthly_discount: float | None = None
    measurement_pricing_enabled: bool | None = None
    price_per_sqm: float | None = None
    overgrown_threshold: int | None = None
    overgrown_surcharge: float | None = None
    fuel_surcharge_radius: float | None = None
    fuel_surcharge_amount: float | None = None
    business_base_postcode: str | None = None
    schedule_start_hour: int | None = Field(None, ge=0, le=23)
    schedule_end_hour: int | None = Field(None, ge=1, le=24)
    working_days: list[int] | None = None
    auto_create_recurring: bool | None = None
    zones: list[str] | None = None
    max_rain_chance: float | None = None
    max_wind_kmh: float | None = None
    min_temp_c: float | None = None
    max_temp_c: float | None = None

    # Only the pricing table and discounts may be cleared back to the defaults
    @field_validator(
        "business_name", "email", "phone", "currency", "measurement_pricing_enabled",
        "overgrown_threshold", "overgrown_surcharge", "fuel_surcharge_radius", "fuel_surcharge_amount",
        "business_base_postcode", "schedule_start_hour", "schedule_end_hour", "working_days",
        "auto_create_recurring", "zones", "max_rain_chance", "max_wind_kmh", "min_temp_c", "max_temp_c",
    )
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v
