"""
Chaîne de fallback de la recherche de proximité.

Chaque stratégie est une fonction pure `(query, previous) -> étape` :

- un `BackendQuery` à exécuter ensuite,
- un `Accept` qui termine la chaîne avec le résultat précédent,
- ou `None` quand la stratégie ne s'applique pas.

L'orchestrateur se contente d'exécuter les requêtes dans l'ordre.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Union

from app.config import settings
from app.geo.states import get_state_center
from app.models import Coordinates, Filter, Listing, MapView


class QueryKind(str, Enum):
    COORDINATES = "coordinates"
    STATE = "state"
    DEFAULT_CITY = "default_city"


@dataclass
class SearchQuery:
    """Entrée de la chaîne : point optionnel, rayon, État déjà résolu."""
    coordinates: Optional[Coordinates]
    radius: int = settings.DEFAULT_RADIUS
    state_code: Optional[str] = None
    filters: Filter = field(default_factory=Filter)


@dataclass(frozen=True)
class BackendQuery:
    """Requête planifiée, avec la vue carte qui correspond à sa granularité."""
    kind: QueryKind
    map_view: MapView
    radius: Optional[int] = None
    state_code: Optional[str] = None


@dataclass
class StepOutcome:
    """Résultat d'une requête exécutée : succès, vide ou erreur."""
    query: BackendQuery
    listings: List[Listing] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def has_data(self) -> bool:
        return self.ok and bool(self.listings)


@dataclass(frozen=True)
class Accept:
    """Résultat final : la chaîne s'arrête sur cette étape."""
    outcome: StepOutcome


Step = Union[BackendQuery, Accept, None]
Strategy = Callable[[SearchQuery, Optional[StepOutcome]], Step]


def point_view(coords: Coordinates) -> MapView:
    return MapView(center=coords, zoom=settings.ZOOM_LEVELS['point'], granularity="point")


def state_view(state_code: str) -> MapView:
    capital = get_state_center(state_code)
    return MapView(
        center=Coordinates(lat=capital.lat, lng=capital.lng),
        zoom=settings.ZOOM_LEVELS['state'],
        granularity="state",
    )


def default_city_view() -> MapView:
    return MapView(
        center=Coordinates(lat=settings.DEFAULT_LAT, lng=settings.DEFAULT_LNG),
        zoom=settings.ZOOM_LEVELS['city'],
        granularity="city",
    )


def coordinate_strategy(query: SearchQuery, previous: Optional[StepOutcome]) -> Step:
    """1. Recherche bornée par les coordonnées, si on en a."""
    if previous is not None and previous.has_data:
        return Accept(previous)
    if query.coordinates is None:
        return None
    return BackendQuery(
        kind=QueryKind.COORDINATES,
        map_view=point_view(query.coordinates),
        radius=query.radius,
    )


def state_strategy(query: SearchQuery, previous: Optional[StepOutcome]) -> Step:
    """2. Résultat vide ou erreur : recherche au niveau de l'État."""
    if previous is not None and previous.has_data:
        return Accept(previous)
    state_code = (query.state_code or settings.DEFAULT_STATE).upper()
    return BackendQuery(
        kind=QueryKind.STATE,
        map_view=state_view(state_code),
        state_code=state_code,
    )


def default_city_strategy(query: SearchQuery, previous: Optional[StepOutcome]) -> Step:
    """3. Échec des deux : jeu de données fixe de la ville par défaut.

    Une réponse d'État réussie est terminale, même vide.
    """
    if previous is not None and previous.has_data:
        return Accept(previous)
    if previous is not None and previous.ok and previous.query.kind is QueryKind.STATE:
        return Accept(previous)
    return BackendQuery(kind=QueryKind.DEFAULT_CITY, map_view=default_city_view())


def final_strategy(query: SearchQuery, previous: Optional[StepOutcome]) -> Step:
    """Accepte la dernière étape réussie ; sinon la chaîne échoue."""
    if previous is not None and previous.ok:
        return Accept(previous)
    return None


DEFAULT_CHAIN: List[Strategy] = [
    coordinate_strategy,
    state_strategy,
    default_city_strategy,
    final_strategy,
]
