"""Espace propriétaires : tableau de bord, recherche de fiche, revendication, abonnement."""
import asyncio
from typing import Any, Dict, List, Optional

from app.backend.api import LaundromatApi
from app.config import settings
from app.errors import BackendError, PaymentError
from app.logger import logger
from app.models import (
    BusinessDashboardPage,
    BusinessMatch,
    ClaimRequest,
    PaymentResult,
    SubscriptionIntent,
)
from app.scoring.similarity import name_similarity

DASHBOARD_URL = "/business/dashboard"


class BusinessService:
    """Opérations de l'espace propriétaires, déléguées au backend."""

    def __init__(self, api: LaundromatApi, publishable_key: str = settings.STRIPE_PUBLIC_KEY):
        self.api = api
        self.publishable_key = publishable_key

    async def dashboard_page(self, headers: Optional[Dict[str, str]] = None) -> BusinessDashboardPage:
        """Tableau de bord, avis et statistiques (trois clés distinctes, en parallèle)."""
        dashboard, reviews, analytics = await asyncio.gather(
            self.api.business_dashboard(headers),
            self.api.business_reviews(headers),
            self.api.business_analytics(headers),
        )
        return BusinessDashboardPage(dashboard=dashboard, reviews=reviews, analytics=analytics)

    async def search(self, query: str, limit: int = 20) -> List[BusinessMatch]:
        """Recherche de fiche à revendiquer, reclassée par proximité du nom."""
        query = (query or "").strip()
        if not query:
            return []
        listings = await self.api.business_search(query)
        matches = [
            BusinessMatch(listing=listing, score=name_similarity.score(query, listing.name))
            for listing in listings
        ]
        matches.sort(key=lambda m: -m.score)
        return matches[:limit]

    async def claim(self, request: ClaimRequest, headers: Optional[Dict[str, str]] = None) -> Any:
        payload = request.model_dump(by_alias=True)
        logger.info("Claim request for laundromat {id}", id=request.laundry_id)
        return await self.api.claim_listing(payload, headers=headers)

    async def start_subscription(
            self,
            laundry_id: int,
            headers: Optional[Dict[str, str]] = None
        ) -> SubscriptionIntent:
        """Crée l'intent de paiement chez le fournisseur via le backend.

        Raises:
            PaymentError: création refusée ou réponse sans client secret.
        """
        try:
            data = await self.api.start_subscription(laundry_id, headers=headers)
        except BackendError as e:
            logger.error("Subscription setup failed for {id}: {error}", id=laundry_id, error=e.message)
            raise PaymentError(
                e.message or "An error occurred while setting up your subscription",
                title="Error Setting Up Subscription",
            ) from e

        client_secret = data.get("clientSecret")
        if not client_secret:
            raise PaymentError(
                "Payment provider did not return a client secret",
                title="Error Setting Up Subscription",
            )
        return SubscriptionIntent(
            laundry_id=laundry_id,
            client_secret=client_secret,
            publishable_key=self.publishable_key,
        )

    @staticmethod
    def payment_result(laundry_id: int, result: PaymentResult) -> Dict[str, Any]:
        """Issue signalée par le fournisseur ; un échec bloque la suite.

        Raises:
            PaymentError: paiement refusé par le fournisseur.
        """
        if result.status == "failed":
            logger.warning("Payment failed for laundromat {id}: {error}",
                           id=laundry_id, error=result.error_message)
            raise PaymentError(result.error_message or "An unexpected error occurred")

        logger.info("Premium subscription active for laundromat {id}", id=laundry_id)
        return {
            "notification": {
                "title": "Payment Method Added Successfully!",
                "description": "Your Premium subscription is now active.",
                "variant": "default",
            },
            "redirect": DASHBOARD_URL,
        }
