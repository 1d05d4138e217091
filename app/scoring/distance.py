"""Calcul de distance géographique (formule de haversine, en miles)."""
import math
from functools import lru_cache
from typing import Iterable, List, Optional

from app.models import Coordinates, Listing

EARTH_RADIUS_MILES = 3958.8


@lru_cache(maxsize=4096)
def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calcule la distance orthodromique entre deux points.

    Args:
        lat1, lng1: Premier point (degrés)
        lat2, lng2: Second point (degrés)

    Returns:
        Distance en miles, toujours >= 0
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    # Les erreurs d'arrondi peuvent pousser `a` légèrement hors de [0, 1]
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance(a: Coordinates, b: Coordinates) -> float:
    """Distance en miles entre deux paires de coordonnées."""
    return haversine_miles(a.lat, a.lng, b.lat, b.lng)


def format_distance(miles: float) -> str:
    """Formate une distance pour l'affichage."""
    if miles < 0.1:
        return "less than 0.1 miles"
    return f"{miles:.1f} miles"


def annotate_distances(listings: Iterable[Listing], origin: Optional[Coordinates]) -> List[Listing]:
    """
    Complète la distance des listings qui n'en ont pas.

    La distance fournie par le backend est conservée telle quelle. Sans
    origine ou sans coordonnées, la distance reste inconnue.
    """
    annotated = []
    for listing in listings:
        coords = listing.coordinates
        if listing.distance is None and origin is not None and coords is not None:
            listing = listing.model_copy(update={"distance": distance(origin, coords)})
        annotated.append(listing)
    return annotated
