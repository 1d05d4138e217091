"""Endpoints des pages publiques : accueil, recherche, proximité, villes, États, fiches."""
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from redis.exceptions import RedisError

from app.config import settings
from app.dependencies import get_filters, get_search_service
from app.errors import BackendError, SearchUnavailableError
from app.geo.geolocation import DEVICE_LAT_HEADER, DEVICE_LNG_HEADER
from app.logger import logger
from app.models import CityPage, FavoriteState, Filter, LaundryDetailPage, ListingsPage, StatePage
from app.search.results import error_panel
from app.search.search_service import SearchService

router = APIRouter(prefix="/api/pages", tags=["pages"])


def backend_failure(error: BackendError, message: str) -> HTTPException:
    """Panneau d'erreur « Try Again » ; 404 du backend conservé."""
    if error.status_code == status.HTTP_404_NOT_FOUND:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": error_panel(error.message, title="Not Found").model_dump()},
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"error": error_panel(message).model_dump()},
    )


@router.get("/home", response_model=ListingsPage)
async def home(
        request: Request,
        lat: Optional[str] = None,
        lng: Optional[str] = None,
        radius: int = Query(settings.DEFAULT_RADIUS, ge=1, le=100),
        mode: Literal["map", "list"] = "map",
        page: int = Query(1, ge=1),
        per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=100, alias="perPage"),
        filters: Filter = Depends(get_filters),
        svc: SearchService = Depends(get_search_service)
    ):
    """Laveries autour de l'utilisateur, avec la chaîne de fallback."""
    try:
        return await svc.home_page(
            lat=lat,
            lng=lng,
            radius=radius,
            mode=mode,
            device_lat=request.headers.get(DEVICE_LAT_HEADER),
            device_lng=request.headers.get(DEVICE_LNG_HEADER),
            filters=filters,
            page=page,
            per_page=per_page,
        )
    except SearchUnavailableError as e:
        logger.error("Home search failed after {n} attempt(s)", n=len(e.attempts))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": error_panel(
                "We couldn't load laundromats near you. Please try again."
            ).model_dump()},
        ) from e


@router.get("/search", response_model=ListingsPage)
async def search(
        q: Optional[str] = None,
        location: Optional[str] = None,
        lat: Optional[str] = None,
        lng: Optional[str] = None,
        radius: Optional[int] = Query(None, ge=1, le=100),
        use_zip_fallback: bool = Query(False, alias="useZipFallback"),
        page: int = Query(1, ge=1),
        per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=100, alias="perPage"),
        filters: Filter = Depends(get_filters),
        svc: SearchService = Depends(get_search_service)
    ):
    try:
        return await svc.search_page(
            q=q,
            location=location,
            lat=lat,
            lng=lng,
            radius=radius,
            filters=filters,
            use_zip_fallback=use_zip_fallback,
            page=page,
            per_page=per_page,
        )
    except BackendError as e:
        raise backend_failure(
            e,
            "We couldn't find laundromats matching your search. "
            "Please try again or adjust your search criteria.",
        ) from e


@router.get("/nearby", response_model=ListingsPage)
async def nearby(
        lat: Optional[str] = None,
        lng: Optional[str] = None,
        radius: int = Query(settings.NEARBY_DEFAULT_RADIUS, ge=1, le=100),
        page: int = Query(1, ge=1),
        per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=100, alias="perPage"),
        filters: Filter = Depends(get_filters),
        svc: SearchService = Depends(get_search_service)
    ):
    try:
        return await svc.nearby_page(lat, lng, radius, filters=filters, page=page, per_page=per_page)
    except BackendError as e:
        raise backend_failure(
            e,
            "We couldn't find laundromats near your location. "
            "Please try again or use a different search method.",
        ) from e


@router.get("/cities/{slug}", response_model=CityPage)
async def city(
        slug: str,
        page: int = Query(1, ge=1),
        per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=100, alias="perPage"),
        filters: Filter = Depends(get_filters),
        svc: SearchService = Depends(get_search_service)
    ):
    try:
        return await svc.city_page(slug, filters=filters, page=page, per_page=per_page)
    except BackendError as e:
        raise backend_failure(e, "We couldn't load this city. Please try again.") from e


@router.get("/states")
async def states(svc: SearchService = Depends(get_search_service)):
    try:
        return await svc.states_page()
    except BackendError as e:
        raise backend_failure(e, "We couldn't load the state directory. Please try again.") from e


@router.get("/states/{slug}", response_model=StatePage)
async def state(
        slug: str,
        page: int = Query(1, ge=1),
        per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=100, alias="perPage"),
        svc: SearchService = Depends(get_search_service)
    ):
    try:
        return await svc.state_page(slug, page=page, per_page=per_page)
    except BackendError as e:
        raise backend_failure(e, "We couldn't load this state. Please try again.") from e


@router.get("/laundromats/{slug}", response_model=LaundryDetailPage)
async def laundromat_detail(
        slug: str,
        lat: Optional[str] = None,
        lng: Optional[str] = None,
        svc: SearchService = Depends(get_search_service)
    ):
    try:
        return await svc.detail_page(slug, lat=lat, lng=lng)
    except BackendError as e:
        raise backend_failure(e, "We couldn't load this laundromat. Please try again.") from e


@router.get("/favorites", response_model=List[int])
async def favorites(svc: SearchService = Depends(get_search_service)):
    try:
        return await svc.favorites()
    except RedisError as e:
        logger.error("Favorites unavailable: {error}", error=e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": error_panel("We couldn't load your favorites. Please try again.").model_dump()},
        ) from e


@router.post("/laundromats/{laundry_id}/favorite", response_model=FavoriteState)
async def toggle_favorite(laundry_id: int, svc: SearchService = Depends(get_search_service)):
    """Ajoute la laverie aux favoris, ou l'en retire si elle y est déjà."""
    try:
        return await svc.toggle_favorite(laundry_id)
    except RedisError as e:
        logger.error("Could not update favorite {id}: {error}", id=laundry_id, error=e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": error_panel("We couldn't update your favorites. Please try again.").model_dump()},
        ) from e
