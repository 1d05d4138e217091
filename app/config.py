"""Configuration du service Laundromat Locator."""
from typing import Dict

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration de l'application."""

    # ➡️ Backend REST (listings, auth, admin, business)
    BACKEND_URL: str = "http://localhost:5000"
    BACKEND_TIMEOUT: float = 10.0

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"
    QUERY_CACHE_TTL: int = 300  # 5 minutes, comme le staleTime des pages

    # Géocodage inverse (Google Geocoding API)
    GOOGLE_MAPS_API_KEY: str = ""
    GEOCODER_URL: str = "https://maps.googleapis.com/maps/api/geocode/json"
    GEOCODER_TIMEOUT: float = 10.0

    # Paiement : clé publique obligatoire, son absence empêche le démarrage
    STRIPE_PUBLIC_KEY: str

    # Ville par défaut (Denver, CO)
    DEFAULT_LAT: float = 39.7392
    DEFAULT_LNG: float = -104.9903
    DEFAULT_STATE: str = "CO"
    DEFAULT_LOCATION_NAME: str = "Denver, CO"
    CURRENT_LOCATION_NAME: str = "Current Location"

    # Rayons de recherche (miles)
    DEFAULT_RADIUS: int = 25
    SEARCH_DEFAULT_RADIUS: int = 5
    NEARBY_DEFAULT_RADIUS: int = 5
    MAX_RADIUS: int = 25
    RADIUS_STEP: int = 10

    # Niveaux de zoom par granularité
    ZOOM_LEVELS: Dict[str, int] = {
        'point': 12,
        'state': 8,
        'city': 12,
    }

    # Pagination / stockage
    DEFAULT_PER_PAGE: int = 20
    RECENT_SEARCHES_LIMIT: int = 5

    # Logs
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @field_validator("STRIPE_PUBLIC_KEY")
    @classmethod
    def _payment_key_present(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Missing required Stripe key: STRIPE_PUBLIC_KEY")
        return value.strip()

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
