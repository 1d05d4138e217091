# tests/conftest.py
import os

# La clé publique de paiement est obligatoire au démarrage
os.environ.setdefault("STRIPE_PUBLIC_KEY", "pk_test_locator")

import pytest
from unittest.mock import MagicMock, AsyncMock

from app.models import Listing


# --- Doubles de bas niveau ---

class FakeCacheManager:
    """Remplace CacheManager : un dict en mémoire, même interface asynchrone."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, expire=300):
        self.store[key] = value

    async def close(self):
        pass


def make_listing(id_, lat=None, lng=None, distance=None, **extra):
    data = {"id": id_, "name": extra.pop("name", f"Laundromat {id_}")}
    if lat is not None:
        data["latitude"] = str(lat)
    if lng is not None:
        data["longitude"] = str(lng)
    if distance is not None:
        data["distance"] = distance
    data.update(extra)
    return Listing.model_validate(data)


@pytest.fixture
def fake_cache():
    return FakeCacheManager()


@pytest.fixture
def location_cache(fake_cache):
    from app.cache import LocationCache
    return LocationCache(fake_cache)


@pytest.fixture
def mock_api():
    """Fixture pour un mock de LaundromatApi : tout est vide par défaut."""
    api = MagicMock()
    for name in (
        "search_by_coordinates", "search_by_state", "default_city_listings",
        "search", "nearby", "city_listings", "business_search",
    ):
        setattr(api, name, AsyncMock(return_value=[]))
    api.states = AsyncMock(return_value=[])
    api.state_cities = AsyncMock(return_value=[])
    api.listing_reviews = AsyncMock(return_value=[])
    api.notifications = AsyncMock(return_value=[])
    api.update_notification = AsyncMock(return_value={"ok": True})
    api.login = AsyncMock(return_value={"id": 1, "username": "owner"})
    api.register = AsyncMock(return_value={"id": 2, "username": "newowner"})
    api.demo_login = AsyncMock(return_value={"id": 1, "username": "demo"})
    api.start_subscription = AsyncMock(return_value={"clientSecret": "pi_123_secret_456"})
    api.claim_listing = AsyncMock(return_value={"id": 10, "status": "pending"})
    api.business_dashboard = AsyncMock(return_value={})
    api.business_reviews = AsyncMock(return_value=[])
    api.business_analytics = AsyncMock(return_value={})
    return api


@pytest.fixture
def mock_geocoder():
    from app.geo.geocoder import ReverseGeocodeResult
    geocoder = MagicMock()
    geocoder.reverse = AsyncMock(return_value=ReverseGeocodeResult(
        formatted_address="Boulder, CO", city="Boulder", state="Colorado", state_abbr="CO"
    ))
    return geocoder


@pytest.fixture
def resolver(mock_geocoder, location_cache):
    from app.geo.geolocation import GeolocationProvider
    from app.search.location import LocationResolver
    return LocationResolver(GeolocationProvider(), mock_geocoder, location_cache)


@pytest.fixture
def search_service(mock_api, resolver, location_cache):
    """Vrai SearchService branché sur un backend mocké."""
    from app.search.orchestrator import SearchOrchestrator
    from app.search.search_service import SearchService
    return SearchService(
        api=mock_api,
        orchestrator=SearchOrchestrator(mock_api),
        resolver=resolver,
        location_cache=location_cache,
    )


@pytest.fixture
def client(search_service, mock_api):
    """TestClient avec les services remplacés par des versions mockées."""
    from fastapi.testclient import TestClient
    from app import dependencies
    from app.admin.notifications import NotificationService
    from app.business.service import BusinessService
    from app.main import app

    app.dependency_overrides[dependencies.get_search_service] = lambda: search_service
    app.dependency_overrides[dependencies.get_api] = lambda: mock_api
    app.dependency_overrides[dependencies.get_business_service] = lambda: BusinessService(
        mock_api, publishable_key="pk_test_locator"
    )
    app.dependency_overrides[dependencies.get_notification_service] = lambda: NotificationService(mock_api)
    yield TestClient(app)
    app.dependency_overrides.clear()
