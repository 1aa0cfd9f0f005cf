"""Helpers for building prompt context and parsing LLM replies."""

from __future__ import annotations

import json
import logging
from collections import defaultdict

from app.schemas.job import Job

logger = logging.getLogger(__name__)


def job_context(job: Job, **extra) -> dict:
    """Template variables for a job; missing keys render as empty strings."""
    ctx = defaultdict(str, {
        "customer_name": job.customer_name,
        "address": job.address,
        "scheduled_date": job.scheduled_date.isoformat() if job.scheduled_date else "",
        "price_quote": job.price_quote,
    })
    ctx.update(extra)
    return ctx


def _strip_fences(response: str) -> str:
    text = response.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    return text


def parse_route_response(response: str, known_ids: list[str]) -> tuple[list[str], str]:
    """Parse {"orderedJobIds", "reasoning"}; ids not in `known_ids` are dropped."""
    try:
        data = json.loads(_strip_fences(response))
    except (json.JSONDecodeError, IndexError):
        logger.warning("Failed to parse route suggestion as JSON, keeping current order")
        return list(known_ids), "Optimization unavailable."

    if not isinstance(data, dict):
        return list(known_ids), "Optimization unavailable."
    known = set(known_ids)
    ordered = [str(i) for i in data.get("orderedJobIds", []) if str(i) in known]
    return ordered, str(data.get("reasoning", ""))
