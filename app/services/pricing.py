"""Deterministic quote calculator for the booking form and manual leads.

`compute_quote` is pure: the same request and settings always give the same
price, and missing settings fall back to the defaults below instead of
raising. Surcharges are not part of the base calculation; the opt-in
`apply_dynamic_rules` adds the overgrown and fuel rules explicitly.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from app.schemas.business_settings import BusinessSettings
from app.schemas.enums import Frequency, LawnSize
from app.schemas.quote import PriceBreakdown, QuoteRequest, QuoteResponse

# size -> (settings field, default price, baseline minutes)
SIZE_TABLE: dict[LawnSize, tuple[str, float, int]] = {
    LawnSize.SMALL: ("small_lawn_price", 20.0, 30),
    LawnSize.MEDIUM: ("medium_lawn_price", 35.0, 45),
    LawnSize.LARGE: ("large_lawn_price", 60.0, 90),
    LawnSize.ESTATE: ("estate_lawn_price", 100.0, 180),
}

# keyword matched inside the extra's label -> (settings field, default price)
EXTRAS_TABLE: dict[str, tuple[str, float]] = {
    "Fertilizer": ("extra_fertilizer_price", 15.0),
    "Edging": ("extra_edging_price", 10.0),
    "Weeding": ("extra_weeding_price", 25.0),
    "Leaf": ("extra_leaf_cleanup_price", 20.0),
}

DISCOUNT_FIELDS: dict[Frequency, str | None] = {
    Frequency.ONE_OFF: None,
    Frequency.WEEKLY: "weekly_discount",
    Frequency.FORTNIGHTLY: "fortnightly_discount",
    Frequency.MONTHLY: "monthly_discount",
}

MIN_MEASURED_MINUTES = 15


def round2(value: float) -> float:
    """Round half-up to 2 decimal places on the decimal representation."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _setting(settings: BusinessSettings, field: str, default: float) -> float:
    value = getattr(settings, field, None)
    return default if value is None else float(value)


def _base(request: QuoteRequest, settings: BusinessSettings) -> tuple[float, int, str]:
    if (
        request.lawn_area is not None
        and settings.measurement_pricing_enabled
        and settings.price_per_sqm is not None
    ):
        area = request.lawn_area
        duration = max(MIN_MEASURED_MINUTES, round_half_up(area / 10) + MIN_MEASURED_MINUTES)
        return area * settings.price_per_sqm, duration, f"{area:g}m² lawn"

    size = request.lawn_size or LawnSize.MEDIUM
    field, default, minutes = SIZE_TABLE[size]
    return _setting(settings, field, default), minutes, f"{size.value.lower()} lawn"


def extras_total(extras: list[str], settings: BusinessSettings) -> float:
    total = 0.0
    for extra in extras:
        for keyword, (field, default) in EXTRAS_TABLE.items():
            if keyword in extra:
                total += _setting(settings, field, default)
    return total


def discount_percent(frequency: Frequency, settings: BusinessSettings) -> float:
    field = DISCOUNT_FIELDS[frequency]
    if field is None:
        return 0.0
    return _setting(settings, field, 0.0)


def compute_quote(request: QuoteRequest, settings: BusinessSettings) -> QuoteResponse:
    base, duration, described = _base(request, settings)
    extras = extras_total(request.extras, settings)
    discount = (base + extras) * discount_percent(request.frequency, settings) / 100
    final = base + extras - discount

    return QuoteResponse(
        estimated_price=round2(final),
        estimated_duration_minutes=duration,
        explanation=f"Based on your {described} and {request.frequency.value.lower()} schedule.",
        surcharges_applied=[],
        price_breakdown=PriceBreakdown(
            base=round2(base),
            extras=round2(extras),
            surcharges=0.0,
            discount=round2(discount),
        ),
    )


def apply_dynamic_rules(
    quote: QuoteResponse,
    settings: BusinessSettings,
    *,
    distance_km: float | None = None,
) -> QuoteResponse:
    """Return a copy of `quote` with the overgrown and fuel surcharges applied."""
    applied: list[str] = list(quote.surcharges_applied)
    surcharge = 0.0

    if settings.overgrown_threshold > 0 and quote.estimated_duration_minutes > settings.overgrown_threshold:
        surcharge += settings.overgrown_surcharge
        applied.append(
            f"Overgrown/long job (>{settings.overgrown_threshold} min): "
            f"+{settings.currency}{settings.overgrown_surcharge:.2f}"
        )

    if distance_km is not None and distance_km > settings.fuel_surcharge_radius:
        surcharge += settings.fuel_surcharge_amount
        applied.append(
            f"Travel beyond {settings.fuel_surcharge_radius:g} km ({distance_km:.1f} km): "
            f"+{settings.currency}{settings.fuel_surcharge_amount:.2f}"
        )

    if not surcharge:
        return quote

    breakdown = quote.price_breakdown.model_copy(
        update={"surcharges": round2(quote.price_breakdown.surcharges + surcharge)}
    )
    return quote.model_copy(update={
        "estimated_price": round2(quote.estimated_price + surcharge),
        "surcharges_applied": applied,
        "price_breakdown": breakdown,
    })


def haversine_km(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great-circle distance between two (lat, lon) points."""
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    h = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    return 2 * 6371.0 * math.asin(math.sqrt(h))
