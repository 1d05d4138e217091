"""Résolution de la localisation d'une recherche."""
from dataclasses import dataclass
from typing import Optional

from redis.exceptions import RedisError

from app.cache import LocationCache
from app.config import settings
from app.errors import GeolocationError, ReverseGeocodeError
from app.geo.geocoder import ReverseGeocoder
from app.geo.geolocation import GeolocationProvider, parse_coordinates
from app.logger import logger
from app.models import Location, LocationStatus


@dataclass
class ResolvedLocation:
    location: Location
    status: LocationStatus
    state_resolved: bool = False


def default_location(name: str = settings.DEFAULT_LOCATION_NAME) -> Location:
    return Location(
        latitude=settings.DEFAULT_LAT,
        longitude=settings.DEFAULT_LNG,
        display_name=name,
        state_code=settings.DEFAULT_STATE,
    )


class LocationResolver:
    """
    Paramètres d'URL > position de l'appareil > ville par défaut.

    Seule une position d'appareil est géocodée à l'envers ; son nom est
    alors sauvegardé dans le cache de localisation.
    """

    def __init__(
            self,
            geolocation: GeolocationProvider,
            geocoder: ReverseGeocoder,
            location_cache: LocationCache
        ):
        self.geolocation = geolocation
        self.geocoder = geocoder
        self.location_cache = location_cache

    async def resolve(
            self,
            url_lat: Optional[str] = None,
            url_lng: Optional[str] = None,
            device_lat: Optional[str] = None,
            device_lng: Optional[str] = None
        ) -> ResolvedLocation:
        if url_lat is not None and url_lng is not None:
            coords = parse_coordinates(url_lat, url_lng)
            if coords is None:
                logger.info("Invalid URL coordinates ({lat}, {lng}), using default city",
                            lat=url_lat, lng=url_lng)
                return ResolvedLocation(location=default_location(), status="error")
            return ResolvedLocation(
                location=Location(
                    latitude=coords.lat,
                    longitude=coords.lng,
                    display_name=settings.CURRENT_LOCATION_NAME,
                    state_code=settings.DEFAULT_STATE,
                ),
                status="success",
            )

        try:
            coords = await self.geolocation.locate(device_lat, device_lng)
        except GeolocationError as e:
            logger.info("Geolocation unavailable ({error}), using default city", error=e)
            return ResolvedLocation(location=default_location(), status="error")

        try:
            geocoded = await self.geocoder.reverse(coords.lat, coords.lng)
        except ReverseGeocodeError as e:
            logger.error("Error reverse geocoding: {error}", error=e)
            return ResolvedLocation(
                location=Location(
                    latitude=coords.lat,
                    longitude=coords.lng,
                    display_name=await self._cached_name(),
                    state_code=settings.DEFAULT_STATE,
                ),
                status="success",
            )

        name = geocoded.formatted_address or settings.CURRENT_LOCATION_NAME
        if geocoded.formatted_address:
            await self._remember(name)
        return ResolvedLocation(
            location=Location(
                latitude=coords.lat,
                longitude=coords.lng,
                display_name=name,
                state_code=geocoded.state_abbr or settings.DEFAULT_STATE,
            ),
            status="success",
            state_resolved=bool(geocoded.state_abbr),
        )

    async def _cached_name(self) -> str:
        try:
            return await self.location_cache.load()
        except RedisError as e:
            logger.warning("Location cache unavailable: {error}", error=e)
            return self.location_cache.default_name

    async def _remember(self, name: str) -> None:
        try:
            await self.location_cache.save(name)
        except RedisError as e:
            logger.warning("Could not save last location: {error}", error=e)
