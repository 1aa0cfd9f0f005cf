"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class WeatherConfig(BaseSettings):
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    city: str = "London"
    forecast_days: int = 5
    timeout_seconds: float = 10.0


class PostcodeConfig(BaseSettings):
    base_url: str = "https://api.postcodes.io"
    timeout_seconds: float = 5.0


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/jobmow.db"
    organization_id: str = "default"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    resend_api_key: str = ""
    notify_email: str = ""
    email_from: str = "JobMow <noreply@jobmow.co.uk>"
    app_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    postcodes: PostcodeConfig = Field(default_factory=PostcodeConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    weather = WeatherConfig(**y.get("weather", {}))
    postcodes = PostcodeConfig(**y.get("postcodes", {}))
    overrides = {
        key: y[key]
        for key in ("organization_id", "notify_email", "email_from", "app_url", "log_level")
        if key in y
    }
    if "url" in y.get("database", {}):
        overrides["database_url"] = y["database"]["url"]
    return Settings(
        weather=weather,
        postcodes=postcodes,
        **overrides,
    )
