"""Géocodage inverse via l'API Google Geocoding."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.errors import ReverseGeocodeError
from app.logger import logger


@dataclass
class ReverseGeocodeResult:
    """Nom lisible et code d'État pour une paire de coordonnées."""
    formatted_address: str
    city: str = ""
    state: str = ""
    state_abbr: str = ""


def parse_geocode_response(data: Dict[str, Any]) -> ReverseGeocodeResult:
    """
    Extrait ville et État du premier résultat.

    Le nom affiché est « Ville, ST » quand les deux sont connus, sinon les
    deux premiers segments de l'adresse formatée.
    """
    if data.get("status") != "OK" or not data.get("results"):
        raise ReverseGeocodeError(
            f"Failed to reverse geocode coordinates (status={data.get('status')})"
        )

    result = data["results"][0]
    city = state = state_abbr = ""
    for component in result.get("address_components", []):
        types = component.get("types", [])
        if "locality" in types:
            city = component.get("long_name", "")
        elif "administrative_area_level_1" in types:
            state = component.get("long_name", "")
            state_abbr = component.get("short_name", "")

    if city and state_abbr:
        formatted = f"{city}, {state_abbr}"
    else:
        parts = result.get("formatted_address", "").split(",")[:2]
        formatted = ",".join(parts).strip()

    return ReverseGeocodeResult(
        formatted_address=formatted,
        city=city,
        state=state,
        state_abbr=state_abbr,
    )


class ReverseGeocoder:
    """Client asynchrone du géocodeur."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.url = settings.GEOCODER_URL
        self.client = client or httpx.AsyncClient(timeout=settings.GEOCODER_TIMEOUT)

    async def reverse(self, lat: float, lng: float) -> ReverseGeocodeResult:
        if not self.api_key:
            raise ReverseGeocodeError("GOOGLE_MAPS_API_KEY is not configured")

        params = {"latlng": f"{lat},{lng}", "key": self.api_key}
        try:
            response = await self.client.get(self.url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ReverseGeocodeError(f"Reverse geocoding request failed: {e}") from e

        result = parse_geocode_response(data)
        logger.debug("Reverse geocoded ({lat}, {lng}) -> {name}", lat=lat, lng=lng,
                     name=result.formatted_address)
        return result

    async def close(self):
        await self.client.aclose()
