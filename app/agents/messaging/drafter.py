"""Customer message drafting and route-order suggestions.

The scheduling core never depends on these: with no LLM configured, or
when a call fails, drafts fall back to canned templates and route
suggestions fall back to the current order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from app.agents.llm_provider import LLMProvider, get_llm_provider
from app.agents.messaging.prompts import PROMPTS, ROUTE_PROMPT, SYSTEM_PROMPT, TEMPLATES
from app.agents.messaging.tools import parse_route_response
from app.errors import ExternalServiceUnavailable
from app.schemas.job import Job

logger = logging.getLogger(__name__)

GENERIC_FALLBACK = "Thanks, we'll be in touch shortly."


@dataclass
class RouteSuggestion:
    ordered_ids: list[str]
    reasoning: str
    from_ai: bool


def _render(template: str, context: dict) -> str:
    try:
        return template.format_map(context)
    except (KeyError, ValueError):
        return GENERIC_FALLBACK


class MessageDrafter:
    def __init__(
        self,
        provider: LLMProvider | None = None,
        provider_factory: Callable[[], LLMProvider] = get_llm_provider,
        tone: str = "friendly",
    ):
        self._provider = provider
        self._provider_factory = provider_factory
        self.tone = tone

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = self._provider_factory()
        return self._provider

    def fallback(self, kind: str, context: dict) -> str:
        return _render(TEMPLATES.get(kind, GENERIC_FALLBACK), context)

    async def draft_text(self, kind: str, context: dict) -> str:
        if kind not in PROMPTS:
            raise ValueError(f"Unknown message kind: {kind}")
        try:
            provider = self._get_provider()
        except ExternalServiceUnavailable:
            logger.warning("No LLM configured, using %s template", kind)
            return self.fallback(kind, context)

        system = _render(SYSTEM_PROMPT, {
            "tone": self.tone,
            "business_name": context.get("business_name") or "our business",
        })
        try:
            text = await provider.chat(_render(PROMPTS[kind], context), system=system)
        except Exception as e:
            logger.warning(f"LLM drafting failed for {kind}, using template: {e}")
            return self.fallback(kind, context)
        return text.strip() or self.fallback(kind, context)

    async def suggest_route_order(self, jobs: Sequence[Job], start_hour: int = 8) -> RouteSuggestion:
        current = [j.id for j in jobs]
        if len(jobs) < 2:
            return RouteSuggestion(current, "Nothing to optimize.", from_ai=False)
        try:
            provider = self._get_provider()
        except ExternalServiceUnavailable:
            logger.warning("No LLM configured, keeping current route order")
            return RouteSuggestion(current, "Optimization unavailable.", from_ai=False)

        listing = "\n".join(f"- {j.id} | {j.address} | {j.postcode} | {j.duration_minutes}" for j in jobs)
        try:
            response = await provider.chat(ROUTE_PROMPT.format(start_hour=start_hour, jobs=listing))
        except Exception as e:
            logger.warning(f"Route suggestion failed, keeping current order: {e}")
            return RouteSuggestion(current, "Optimization unavailable.", from_ai=False)

        ordered, reasoning = parse_route_response(response, current)
        return RouteSuggestion(ordered, reasoning, from_ai=bool(ordered))
