"""Abstract LLM provider with OpenAI and Anthropic adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.config import get_settings
from app.errors import ExternalServiceUnavailable


class LLMProvider(ABC):
    """Abstract interface for text completions."""

    @abstractmethod
    async def chat(self, prompt: str, system: str | None = None) -> str:
        """Text-only chat completion."""
        ...


class OpenAIProvider(LLMProvider):
    """OpenAI chat provider."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def chat(self, prompt: str, system: str | None = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=512,
        )
        return resp.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider."""

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-20250514"):
        from anthropic import AsyncAnthropic
        self.client = AsyncAnthropic(api_key=api_key)
        self.model = model

    async def chat(self, prompt: str, system: str | None = None) -> str:
        kwargs = {"system": system} if system else {}
        resp = await self.client.messages.create(
            model=self.model,
            max_tokens=512,
            messages=[{"role": "user", "content": [{"type": "text", "text": prompt}]}],
            **kwargs,
        )
        return resp.content[0].text


def get_llm_provider() -> LLMProvider:
    """Factory: returns OpenAI provider if key available, else Anthropic."""
    settings = get_settings()
    if settings.openai_api_key:
        return OpenAIProvider(settings.openai_api_key)
    if settings.anthropic_api_key:
        return AnthropicProvider(settings.anthropic_api_key)
    raise ExternalServiceUnavailable("No LLM API key configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY.")
