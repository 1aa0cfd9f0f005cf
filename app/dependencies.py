"""FastAPI dependency providers: app-wide services built in the lifespan."""

from __future__ import annotations

from fastapi import Request

from app.agents.messaging.drafter import MessageDrafter
from app.services.job_service import JobService
from app.services.postcodes import PostcodeLookup
from app.services.weather import ForecastService


def get_job_service(request: Request) -> JobService:
    return request.app.state.job_service


def get_forecast(request: Request) -> ForecastService:
    return request.app.state.forecast


def get_drafter(request: Request) -> MessageDrafter:
    return request.app.state.drafter


def get_postcodes(request: Request) -> PostcodeLookup:
    return request.app.state.postcodes
