"""Présentation des résultats : tri, filtres, pagination, panneaux vides/erreur."""
from typing import List, Optional, Tuple

from app.config import settings
from app.geo.zip_fallback import is_zip_code
from app.models import (
    Coordinates,
    ErrorPanel,
    Filter,
    Listing,
    NoResultsPanel,
    PanelLink,
)
from app.scoring.distance import annotate_distances
from app.scoring.ranking import Ranker

ranker = Ranker()


def apply_filters(listings: List[Listing], filters: Filter) -> List[Listing]:
    """Filtrage côté client pour les pages qui reçoivent des données non filtrées."""
    if filters.is_empty:
        return list(listings)

    kept = []
    for listing in listings:
        if filters.services and not all(s in listing.services for s in filters.services):
            continue
        if filters.rating and listing.rating is not None and int(listing.rating) < filters.rating:
            continue
        # open_now inconnu : on garde la fiche
        if filters.open_now and listing.open_now is False:
            continue
        kept.append(listing)
    return kept


def sort_listings(listings: List[Listing], origin: Optional[Coordinates] = None) -> List[Listing]:
    """Complète les distances manquantes puis trie (distance inconnue en dernier)."""
    return ranker.rank(annotate_distances(listings, origin))


def paginate(listings: List[Listing], page: int, per_page: int) -> Tuple[List[Listing], int]:
    page = max(1, page)
    offset = (page - 1) * per_page
    return listings[offset: offset + per_page], len(listings)


def widened_radius(radius: int) -> int:
    """Rayon élargi proposé quand rien n'est trouvé, plafonné à MAX_RADIUS."""
    return min(settings.MAX_RADIUS, radius + settings.RADIUS_STEP)


def no_results_panel(query: Optional[str], radius: int) -> NoResultsPanel:
    """Panneau « aucun résultat ».

    Pour un code postal, on propose un rayon élargi, le rayon maximal,
    la navigation par État et le retour à l'accueil.
    """
    if is_zip_code(query):
        zip_code = query.strip()
        wider = widened_radius(radius)
        return NoResultsPanel(
            title=f"No Laundromats within {radius} miles of ZIP {zip_code}",
            message=(
                "Don't see what you're looking for? We're continuously adding "
                "to our database of laundromats."
            ),
            links=[
                PanelLink(label=f"Wider Area ({wider} miles)",
                          href=f"/search?q={zip_code}&radius={wider}"),
                PanelLink(label=f"Maximum Range ({settings.MAX_RADIUS} mi)",
                          href=f"/search?q={zip_code}&radius={settings.MAX_RADIUS}"),
                PanelLink(label="Browse By State", href="/states"),
                PanelLink(label="Return Home", href="/"),
            ],
        )
    return NoResultsPanel(
        title="No Laundromats Found",
        message="Try adjusting your search or filters to find laundromats in your area.",
    )


def nearby_no_results_panel(center: Coordinates, radius: int) -> NoResultsPanel:
    wider = widened_radius(radius)
    links = []
    if wider > radius:
        links.append(PanelLink(
            label=f"Search within {wider} miles",
            href=f"/nearby?lat={center.lat}&lng={center.lng}&radius={wider}",
        ))
    return NoResultsPanel(
        title="No Results",
        message=(
            f"We couldn't find any laundromats matching your criteria within {radius} miles. "
            "Try increasing your search radius or adjusting your filters."
        ),
        links=links,
    )


def error_panel(message: str, title: str = "Error") -> ErrorPanel:
    return ErrorPanel(title=title, message=message, retry=True)
