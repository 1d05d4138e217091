"""Accès à la position de l'appareil transmise par le client."""
import math
from typing import Optional

from app.errors import GeolocationError
from app.models import Coordinates

DEVICE_LAT_HEADER = "X-Device-Latitude"
DEVICE_LNG_HEADER = "X-Device-Longitude"


def parse_coordinates(lat: Optional[str], lng: Optional[str]) -> Optional[Coordinates]:
    """Convertit une paire de chaînes en coordonnées valides, sinon None."""
    if lat is None or lng is None:
        return None
    try:
        lat_f, lng_f = float(lat), float(lng)
    except (TypeError, ValueError):
        return None
    if math.isnan(lat_f) or math.isnan(lng_f):
        return None
    if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0):
        return None
    return Coordinates(lat=lat_f, lng=lng_f)


class GeolocationProvider:  # pylint: disable=too-few-public-methods
    """Fine couche autour de la géolocalisation du navigateur.

    Le navigateur fait la mesure ; la page nous transmet le résultat dans les
    en-têtes `X-Device-Latitude` / `X-Device-Longitude`.
    """

    async def locate(self, lat: Optional[str], lng: Optional[str]) -> Coordinates:
        if lat is None or lng is None:
            raise GeolocationError("Geolocation is not available for this client")
        coords = parse_coordinates(lat, lng)
        if coords is None:
            raise GeolocationError(f"Invalid device position ({lat}, {lng})")
        return coords
