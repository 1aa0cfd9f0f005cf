"""Instant quotes and the public booking form."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_job_service, get_postcodes
from app.schemas import (
    BookingRequest,
    BookingResult,
    JobCreate,
    JobStatus,
    LawnSize,
    QuoteRequest,
    QuoteResponse,
)
from app.services.job_service import JobService
from app.services.postcodes import PostcodeLookup
from app.services.pricing import apply_dynamic_rules

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quotes"])


@router.post("/api/quotes", response_model=QuoteResponse)
async def quote(body: QuoteRequest, service: JobService = Depends(get_job_service)):
    return service.quote(body)


@router.post("/api/bookings", response_model=BookingResult, status_code=201)
async def book(
    body: BookingRequest,
    service: JobService = Depends(get_job_service),
    postcodes: PostcodeLookup = Depends(get_postcodes),
):
    """Price the request and file it as a Pending lead."""
    result = service.quote(body)
    if body.apply_dynamic_rules:
        distance = None
        base = service.settings.business_base_postcode
        if base and body.postcode:
            distance = await postcodes.distance_km(base, body.postcode)
        result = apply_dynamic_rules(result, service.settings, distance_km=distance)

    notes = [body.notes] if body.notes else []
    if body.extras:
        notes.append(f"Extras: {', '.join(body.extras)}")

    job = await service.create_job(JobCreate(
        customer_name=body.customer_name,
        email=body.email,
        phone=body.phone,
        address=body.address,
        postcode=body.postcode,
        lawn_size=body.lawn_size or LawnSize.MEDIUM,
        frequency=body.frequency,
        price_quote=result.estimated_price,
        duration_minutes=result.estimated_duration_minutes,
        status=JobStatus.PENDING,
        notes="\n".join(notes) or None,
        lead_source=body.lead_source,
    ))
    logger.info("Booking %s: %s at %.2f", job.id, job.customer_name, result.estimated_price)
    return BookingResult(job=job, quote=result)
