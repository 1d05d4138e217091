"""Instances partagées et dépendances FastAPI."""
from typing import Dict, Optional

from fastapi import Query, Request

from app.admin.notifications import NotificationService
from app.backend.api import LaundromatApi
from app.backend.connector import BackendConnector
from app.backend.query_cache import QueryCache
from app.business.service import BusinessService
from app.cache import cache_manager, location_cache
from app.config import settings
from app.geo.geocoder import ReverseGeocoder
from app.geo.geolocation import GeolocationProvider
from app.models import Filter
from app.search.location import LocationResolver
from app.search.orchestrator import SearchOrchestrator
from app.search.search_service import SearchService

# --- Initialisation des variables globales ---

# Connecteur du backend REST, avec le cache de requêtes Redis
backend_connector: BackendConnector = BackendConnector(
    settings.BACKEND_URL,
    timeout=settings.BACKEND_TIMEOUT,
    query_cache=QueryCache(cache_manager, ttl=settings.QUERY_CACHE_TTL),
)
laundromat_api: LaundromatApi = LaundromatApi(backend_connector)

reverse_geocoder: ReverseGeocoder = ReverseGeocoder()
location_resolver: LocationResolver = LocationResolver(
    GeolocationProvider(), reverse_geocoder, location_cache
)

search_service: SearchService = SearchService(
    api=laundromat_api,
    orchestrator=SearchOrchestrator(laundromat_api),
    resolver=location_resolver,
    location_cache=location_cache,
)
business_service: BusinessService = BusinessService(laundromat_api)
notification_service: NotificationService = NotificationService(laundromat_api)

FORWARDED_HEADERS = ("authorization", "cookie")


def get_search_service() -> SearchService:
    """Dépendance FastAPI pour obtenir le service des pages de recherche."""
    return search_service


def get_business_service() -> BusinessService:
    return business_service


def get_notification_service() -> NotificationService:
    return notification_service


def get_api() -> LaundromatApi:
    return laundromat_api


def forwarded_headers(request: Request) -> Dict[str, str]:
    """En-têtes d'authentification relayés tels quels au backend."""
    return {name: request.headers[name] for name in FORWARDED_HEADERS if name in request.headers}


def get_filters(
        open_now: Optional[bool] = Query(None, alias="openNow"),
        services: Optional[str] = Query(None, description="Liste séparée par des virgules"),
        rating: Optional[int] = Query(None, ge=1, le=5)
    ) -> Filter:
    """Filtres lus dans l'URL."""
    service_list = [s.strip() for s in services.split(",") if s.strip()] if services else None
    return Filter(open_now=open_now, services=service_list, rating=rating)
