"""Module contenant le service des pages de recherche."""
# app/search/search_service.py
from statistics import mean
from typing import List, Optional

from redis.exceptions import RedisError

from app.backend.api import LaundromatApi
from app.cache import LocationCache
from app.config import settings
from app.geo.geolocation import parse_coordinates
from app.geo.zip_fallback import fallback_for_zip, is_zip_code, with_zip_fallback
from app.logger import logger
from app.models import (
    CityPage,
    Coordinates,
    FavoriteState,
    Filter,
    LaundryDetailPage,
    Listing,
    ListingsPage,
    MapView,
    RecentSearch,
    StatePage,
)
from app.scoring.distance import distance, format_distance
from app.search.location import LocationResolver
from app.search.orchestrator import SearchOrchestrator
from app.search.results import (
    apply_filters,
    no_results_panel,
    nearby_no_results_panel,
    paginate,
    sort_listings,
)
from app.search.strategies import SearchQuery, point_view, state_view


def listings_centroid(listings: List[Listing]) -> Optional[Coordinates]:
    """Centre moyen des fiches géolocalisées, pour cadrer la carte d'une ville."""
    points = [l.coordinates for l in listings if l.coordinates is not None]
    if not points:
        return None
    return Coordinates(lat=mean(p.lat for p in points), lng=mean(p.lng for p in points))


class SearchService:
    """Construit les vues des pages de recherche à partir du backend."""

    def __init__(
            self,
            api: LaundromatApi,
            orchestrator: SearchOrchestrator,
            resolver: LocationResolver,
            location_cache: LocationCache
        ):
        self.api = api
        self.orchestrator = orchestrator
        self.resolver = resolver
        self.location_cache = location_cache

    async def home_page(
            self,
            lat: Optional[str] = None,
            lng: Optional[str] = None,
            radius: int = settings.DEFAULT_RADIUS,
            mode: str = "map",
            device_lat: Optional[str] = None,
            device_lng: Optional[str] = None,
            filters: Optional[Filter] = None,
            page: int = 1,
            per_page: int = settings.DEFAULT_PER_PAGE
        ) -> ListingsPage:
        """Accueil : localisation puis chaîne de fallback.

        Raises:
            SearchUnavailableError: aucune étape de la chaîne n'a abouti.
        """
        filters = filters or Filter()
        resolved = await self.resolver.resolve(lat, lng, device_lat, device_lng)
        location = resolved.location

        outcome = await self.orchestrator.run(SearchQuery(
            coordinates=location.coordinates,
            radius=radius,
            state_code=location.state_code,
            filters=filters,
        ))

        items, total = paginate(outcome.listings, page, per_page)
        return ListingsPage(
            location_name=location.display_name,
            location=location,
            location_status=resolved.status,
            radius=radius,
            listings=items,
            total=total,
            page=page,
            per_page=per_page,
            map=outcome.map_view if mode != "list" else None,
            no_results=no_results_panel(None, radius) if total == 0 else None,
            filters=filters,
            query_time_ms=outcome.query_time_ms,
            memory_used_mb=outcome.memory_used_mb,
            recent_searches=await self._recent_searches(),
        )

    async def search_page(
            self,
            q: Optional[str] = None,
            location: Optional[str] = None,
            lat: Optional[str] = None,
            lng: Optional[str] = None,
            radius: Optional[int] = None,
            filters: Optional[Filter] = None,
            use_zip_fallback: bool = False,
            page: int = 1,
            per_page: int = settings.DEFAULT_PER_PAGE
        ) -> ListingsPage:
        """Résultats d'une recherche texte, code postal ou coordonnées.

        Raises:
            BackendError: échec de la requête au backend.
        """
        if not (q or location or lat or lng):
            logger.info("No search parameters provided, redirecting to home page")
            return ListingsPage(redirect="/")

        filters = filters or Filter()
        radius = radius or settings.SEARCH_DEFAULT_RADIUS
        coords = parse_coordinates(lat, lng)
        display_name = await self._display_name(q, location, coords)

        fallback = fallback_for_zip(q)
        if use_zip_fallback and fallback is not None:
            logger.info("Using fallback data for ZIP {zip}", zip=q)
            listings = [fallback]
        else:
            listings = await self.api.search(
                query=q or location,
                lat=coords.lat if coords else None,
                lng=coords.lng if coords else None,
                radius=radius,
                filters=filters,
            )
            if not listings and fallback is not None:
                logger.info("No results from API for ZIP {zip}, using fallback data", zip=q)
            listings = with_zip_fallback(listings, q)

        if fallback is not None and listings == [fallback]:
            display_name = f"{fallback.city}, {fallback.state} {fallback.zip}"

        items, total = paginate(sort_listings(listings, coords), page, per_page)
        return ListingsPage(
            location_name=display_name,
            radius=radius,
            listings=items,
            total=total,
            page=page,
            per_page=per_page,
            map=point_view(coords) if coords and total else None,
            no_results=no_results_panel(q, radius) if total == 0 else None,
            filters=filters,
            recent_searches=await self._recent_searches(),
        )

    async def nearby_page(
            self,
            lat: Optional[str],
            lng: Optional[str],
            radius: int = settings.NEARBY_DEFAULT_RADIUS,
            filters: Optional[Filter] = None,
            page: int = 1,
            per_page: int = settings.DEFAULT_PER_PAGE
        ) -> ListingsPage:
        """Laveries autour d'un point ; sans coordonnées, renvoie vers /search."""
        coords = parse_coordinates(lat, lng)
        if coords is None:
            return ListingsPage(redirect="/search")

        filters = filters or Filter()
        listings = await self.api.nearby(coords.lat, coords.lng, radius)
        filtered = apply_filters(listings, filters)
        items, total = paginate(sort_listings(filtered, coords), page, per_page)
        return ListingsPage(
            location_name="your location",
            radius=radius,
            listings=items,
            total=total,
            page=page,
            per_page=per_page,
            map=point_view(coords) if total else None,
            no_results=nearby_no_results_panel(coords, radius) if total == 0 else None,
            filters=filters,
        )

    async def city_page(
            self,
            slug: str,
            filters: Optional[Filter] = None,
            page: int = 1,
            per_page: int = settings.DEFAULT_PER_PAGE
        ) -> CityPage:
        filters = filters or Filter()
        city = await self.api.get_city(slug)
        listings = await self.api.city_listings(city["id"], filters)
        listings = sort_listings(listings)
        center = listings_centroid(listings)

        items, total = paginate(listings, page, per_page)
        return CityPage(
            city=city,
            location_name=f"{city.get('name', slug)}, {city.get('state', '')}".strip(", "),
            listings=items,
            total=total,
            page=page,
            per_page=per_page,
            map=MapView(center=center, zoom=settings.ZOOM_LEVELS['city'], granularity="city")
            if center else None,
            no_results=no_results_panel(None, settings.SEARCH_DEFAULT_RADIUS) if total == 0 else None,
            filters=filters,
        )

    async def states_page(self) -> List[dict]:
        return await self.api.states()

    async def state_page(
            self,
            slug: str,
            page: int = 1,
            per_page: int = settings.DEFAULT_PER_PAGE
        ) -> StatePage:
        state = await self.api.get_state(slug)
        abbr = state.get("abbr", settings.DEFAULT_STATE)
        cities = await self.api.state_cities(abbr)
        listings = await self.api.search_by_state(abbr)

        items, total = paginate(sort_listings(listings), page, per_page)
        return StatePage(
            state=state,
            cities=cities,
            location_name=state.get("name", abbr),
            listings=items,
            total=total,
            page=page,
            per_page=per_page,
            map=state_view(abbr),
        )

    async def detail_page(
            self,
            slug: str,
            lat: Optional[str] = None,
            lng: Optional[str] = None
        ) -> LaundryDetailPage:
        listing = await self.api.get_listing(slug)
        reviews = await self.api.listing_reviews(listing.id)

        label = None
        origin = parse_coordinates(lat, lng)
        if origin is not None and listing.coordinates is not None:
            miles = listing.distance if listing.distance is not None else distance(
                origin, listing.coordinates
            )
            listing = listing.model_copy(update={"distance": miles})
            label = format_distance(miles)
        return LaundryDetailPage(
            laundromat=listing,
            reviews=reviews,
            distance_label=label,
            is_favorite=await self._is_favorite(listing.id),
        )

    async def toggle_favorite(self, laundry_id: int) -> FavoriteState:
        """Bascule le favori d'une laverie.

        Raises:
            RedisError: le stockage des favoris est indisponible.
        """
        favorite = await self.location_cache.toggle_favorite(laundry_id)
        logger.info("Laundromat {id} favorite: {favorite}", id=laundry_id, favorite=favorite)
        return FavoriteState(laundry_id=laundry_id, favorite=favorite)

    async def favorites(self) -> List[int]:
        return await self.location_cache.favorites()

    async def _recent_searches(self) -> List[RecentSearch]:
        try:
            return await self.location_cache.recent_searches()
        except RedisError as e:
            logger.warning("Could not read recent searches: {error}", error=e)
            return []

    async def _is_favorite(self, laundry_id: int) -> bool:
        try:
            return await self.location_cache.is_favorite(laundry_id)
        except RedisError as e:
            logger.warning("Could not read favorites: {error}", error=e)
            return False

    async def _display_name(
            self,
            q: Optional[str],
            location: Optional[str],
            coords: Optional[Coordinates]
        ) -> str:
        if location:
            name = location
        elif q:
            name = f"ZIP {q.strip()}" if is_zip_code(q) else q
        elif coords is not None:
            return settings.CURRENT_LOCATION_NAME
        else:
            return ""

        try:
            await self.location_cache.save(name)
            await self.location_cache.save_recent_search(
                name,
                lat=coords.lat if coords else None,
                lng=coords.lng if coords else None,
            )
        except RedisError as e:
            logger.warning("Could not record recent search: {error}", error=e)
        return name
