"""Orchestrateur de la recherche de proximité (chaîne de fallback)."""
import time
from dataclasses import dataclass, field
from typing import List, Optional

import psutil

from app.backend.api import LaundromatApi
from app.errors import BackendError, SearchUnavailableError
from app.logger import logger
from app.models import MapView, Listing
from app.scoring.distance import annotate_distances
from app.scoring.ranking import Ranker
from app.search.strategies import (
    DEFAULT_CHAIN,
    Accept,
    BackendQuery,
    QueryKind,
    SearchQuery,
    StepOutcome,
    Strategy,
)


@dataclass
class SearchOutcome:
    """Résultat final affiché : listings triés + vue carte de l'étape retenue."""
    listings: List[Listing]
    map_view: MapView
    attempts: List[StepOutcome] = field(default_factory=list)
    query_time_ms: float = 0.0
    memory_used_mb: Optional[float] = None

    @property
    def granularity(self) -> str:
        return self.map_view.granularity


class SearchOrchestrator:
    """Exécute les stratégies dans l'ordre, une requête à la fois."""

    def __init__(self, api: LaundromatApi, strategies: Optional[List[Strategy]] = None):
        self.api = api
        self.strategies = strategies if strategies is not None else list(DEFAULT_CHAIN)
        self.ranker = Ranker()

    async def run(self, query: SearchQuery) -> SearchOutcome:
        """Parcourt la chaîne jusqu'à un résultat accepté.

        Raises:
            SearchUnavailableError: toutes les étapes ont échoué.
        """
        start = time.time()
        attempts: List[StepOutcome] = []
        previous: Optional[StepOutcome] = None

        for strategy in self.strategies:
            step = strategy(query, previous)
            if step is None:
                continue
            if isinstance(step, Accept):
                return self._finish(query, step.outcome, attempts, start)
            previous = await self._execute(step, query)
            attempts.append(previous)

        logger.error("All fallbacks failed after {n} attempt(s)", n=len(attempts))
        raise SearchUnavailableError("All fallbacks failed", attempts=attempts)

    async def _execute(self, step: BackendQuery, query: SearchQuery) -> StepOutcome:
        try:
            if step.kind is QueryKind.COORDINATES:
                center = step.map_view.center
                logger.info(
                    "Fetching laundromats near ({lat}, {lng}) within {radius} miles",
                    lat=center.lat, lng=center.lng, radius=step.radius
                )
                listings = await self.api.search_by_coordinates(
                    center.lat, center.lng, step.radius, query.filters
                )
            elif step.kind is QueryKind.STATE:
                logger.info("Falling back to state: {state}", state=step.state_code)
                listings = await self.api.search_by_state(step.state_code, query.filters)
            else:
                logger.warning("Using default city fallback")
                listings = await self.api.default_city_listings()
        except BackendError as e:
            logger.warning("{kind} step failed: {error}", kind=step.kind.value, error=e.message)
            return StepOutcome(query=step, error=e)

        logger.info("{kind} step returned {n} laundromat(s)", kind=step.kind.value, n=len(listings))
        return StepOutcome(query=step, listings=listings)

    def _finish(
            self,
            query: SearchQuery,
            outcome: StepOutcome,
            attempts: List[StepOutcome],
            start: float
        ) -> SearchOutcome:
        listings = self.ranker.rank(annotate_distances(outcome.listings, query.coordinates))

        duration = time.time() - start
        memory_mb = psutil.Process().memory_info().rss / 1024 / 1024
        logger.info(
            "Recherche de proximité ({granularity}, {n} résultats, {steps} étape(s)) : "
            "Durée = {duration:.4f}s | RAM = {memory:.2f} Mo",
            granularity=outcome.query.map_view.granularity, n=len(listings),
            steps=len(attempts), duration=duration, memory=memory_mb
        )
        return SearchOutcome(
            listings=listings,
            map_view=outcome.query.map_view,
            attempts=attempts,
            query_time_ms=duration * 1000,
            memory_used_mb=memory_mb,
        )
