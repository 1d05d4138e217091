"""Typed access to the backend endpoints used by the pages."""
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.backend.connector import BackendConnector
from app.errors import BackendError
from app.models import Filter, Listing, Notification


def parse_listings(data: Any, path: str = "") -> List[Listing]:
    """Convertit une réponse du backend en listings.

    Accepte une liste brute ou un objet `{"laundromats": [...]}`.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("laundromats", data.get("results", []))
    if not isinstance(data, list):
        raise BackendError("Unexpected listings payload", path=path)
    try:
        return [Listing.model_validate(item) for item in data]
    except ValidationError as e:
        raise BackendError(f"Malformed listing in response: {e.error_count()} error(s)",
                           path=path) from e


class LaundromatApi:
    """Façade sur le connecteur : un appel par endpoint consommé."""

    def __init__(self, connector: BackendConnector):
        self.connector = connector

    # --- Recherche de laveries -------------------------------------------

    async def search_by_coordinates(
            self,
            lat: float,
            lng: float,
            radius: int,
            filters: Optional[Filter] = None
        ) -> List[Listing]:
        params = {"lat": str(lat), "lng": str(lng), "radius": str(radius)}
        params.update((filters or Filter()).to_params())
        return parse_listings(await self.connector.get("/api/laundromats", params), "/api/laundromats")

    async def search_by_state(self, state_code: str, filters: Optional[Filter] = None) -> List[Listing]:
        params = {"state": state_code}
        params.update((filters or Filter()).to_params())
        return parse_listings(await self.connector.get("/api/laundromats", params), "/api/laundromats")

    async def default_city_listings(self) -> List[Listing]:
        path = "/api/denver-laundromats"
        return parse_listings(await self.connector.get(path), path)

    async def search(
            self,
            query: Optional[str] = None,
            lat: Optional[float] = None,
            lng: Optional[float] = None,
            radius: Optional[int] = None,
            filters: Optional[Filter] = None
        ) -> List[Listing]:
        params: Dict[str, str] = {}
        if query:
            params["q"] = query
        if lat is not None and lng is not None:
            params["lat"] = str(lat)
            params["lng"] = str(lng)
        if radius is not None:
            params["radius"] = str(radius)
        params.update((filters or Filter()).to_params())
        return parse_listings(await self.connector.get("/api/laundromats", params), "/api/laundromats")

    async def nearby(self, lat: float, lng: float, radius: int) -> List[Listing]:
        path = "/api/nearby-laundromats"
        params = {"lat": str(lat), "lng": str(lng), "radius": str(radius)}
        return parse_listings(await self.connector.get(path, params), path)

    # --- Fiches, villes, États -------------------------------------------

    async def get_listing(self, id_or_slug: str) -> Listing:
        path = f"/api/laundromats/{id_or_slug}"
        data = await self.connector.get(path)
        try:
            return Listing.model_validate(data)
        except ValidationError as e:
            raise BackendError("Malformed listing detail", path=path) from e

    async def listing_reviews(self, listing_id: int) -> List[Dict[str, Any]]:
        return await self.connector.get(f"/api/laundromats/{listing_id}/reviews") or []

    async def get_city(self, slug: str) -> Dict[str, Any]:
        path = f"/api/cities/{slug}"
        city = await self.connector.get(path)
        # l'id sert ensuite à charger les laveries de la ville
        if not isinstance(city, dict) or city.get("id") is None:
            raise BackendError("Malformed city payload", path=path)
        return city

    async def city_listings(self, city_id: int, filters: Optional[Filter] = None) -> List[Listing]:
        path = f"/api/cities/{city_id}/laundromats"
        data = await self.connector.get(path, (filters or Filter()).to_params())
        return parse_listings(data, path)

    async def states(self) -> List[Dict[str, Any]]:
        return await self.connector.get("/api/states") or []

    async def get_state(self, slug: str) -> Dict[str, Any]:
        return await self.connector.get(f"/api/states/{slug}")

    async def state_cities(self, abbr: str) -> List[Dict[str, Any]]:
        return await self.connector.get(f"/api/states/{abbr}/cities") or []

    # --- Administration --------------------------------------------------

    async def notifications(self, headers: Optional[Dict[str, str]] = None) -> List[Notification]:
        path = "/api/admin/notifications"
        data = await self.connector.get(path, headers=headers, cached=False) or []
        try:
            return [Notification.model_validate(item) for item in data]
        except ValidationError as e:
            raise BackendError("Malformed notification in response", path=path) from e

    async def update_notification(self, notification_id: int, status: str,
                                  headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.connector.patch(
            f"/api/admin/notifications/{notification_id}", {"status": status}, headers=headers
        )

    # --- Authentification ------------------------------------------------

    async def login(self, payload: Dict[str, Any]) -> Any:
        return await self.connector.post("/api/auth/login", payload)

    async def register(self, payload: Dict[str, Any]) -> Any:
        return await self.connector.post("/api/auth/register", payload)

    async def demo_login(self, role: str) -> Any:
        return await self.connector.post("/api/auth/demo-login", {"role": role})

    # --- Espace propriétaires --------------------------------------------

    async def business_dashboard(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self.connector.get("/api/business/dashboard", headers=headers, cached=False) or {}

    async def business_reviews(self, headers: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        return await self.connector.get("/api/business/reviews", headers=headers, cached=False) or []

    async def business_analytics(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self.connector.get("/api/business/analytics", headers=headers, cached=False) or {}

    async def business_search(self, query: str) -> List[Listing]:
        path = "/api/business/search"
        return parse_listings(await self.connector.get(path, {"q": query}), path)

    async def claim_listing(self, payload: Dict[str, Any],
                            headers: Optional[Dict[str, str]] = None) -> Any:
        return await self.connector.post("/api/business/claim", payload, headers=headers)

    async def start_subscription(self, laundry_id: int,
                                 headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self.connector.post(
            "/api/business/start-subscription", {"laundryId": laundry_id}, headers=headers
        ) or {}
