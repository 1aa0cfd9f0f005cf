"""Postcode → coordinates lookup via postcodes.io, used for the fuel surcharge distance."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from app.config import PostcodeConfig
from app.services.pricing import haversine_km

logger = logging.getLogger(__name__)


class PostcodeLookup:
    def __init__(self, config: PostcodeConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    async def coordinates(self, postcode: str) -> tuple[float, float] | None:
        """Return (lat, lon), or None when the postcode is unknown or the service is down."""
        postcode = postcode.strip()
        if not postcode:
            return None
        url = f"{self.config.base_url}/postcodes/{quote(postcode)}"
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds, transport=self._transport) as client:
                resp = await client.get(url)
                if resp.status_code == 404:
                    return None
                resp.raise_for_status()
                result = resp.json()["result"]
                return float(result["latitude"]), float(result["longitude"])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning("Postcode lookup unavailable for %s: %s", postcode, e)
            return None

    async def distance_km(self, origin: str, destination: str) -> float | None:
        a = await self.coordinates(origin)
        b = await self.coordinates(destination)
        if a is None or b is None:
            return None
        return haversine_km(a, b)
