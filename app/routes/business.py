"""Espace propriétaires : tableau de bord, recherche, revendication, abonnement."""
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.business.service import BusinessService
from app.dependencies import forwarded_headers, get_business_service
from app.errors import BackendError
from app.models import (
    BusinessDashboardPage,
    BusinessMatch,
    ClaimRequest,
    PaymentResult,
    SubscriptionIntent,
)
from app.search.results import error_panel

router = APIRouter(tags=["business"])


@router.get("/api/pages/business/dashboard", response_model=BusinessDashboardPage)
async def dashboard(
        headers: Dict[str, str] = Depends(forwarded_headers),
        svc: BusinessService = Depends(get_business_service)
    ):
    try:
        return await svc.dashboard_page(headers=headers)
    except BackendError as e:
        raise HTTPException(
            status_code=e.status_code if e.status_code in (401, 403) else status.HTTP_502_BAD_GATEWAY,
            detail={"error": error_panel("We couldn't load your dashboard. Please try again.").model_dump()},
        ) from e


@router.get("/api/business/search", response_model=List[BusinessMatch])
async def business_search(
        q: str = Query(..., min_length=1),
        svc: BusinessService = Depends(get_business_service)
    ):
    try:
        return await svc.search(q)
    except BackendError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": error_panel("Search failed. Please try again.").model_dump()},
        ) from e


@router.post("/api/business/claim", status_code=status.HTTP_201_CREATED)
async def claim_listing(
        request: ClaimRequest,
        headers: Dict[str, str] = Depends(forwarded_headers),
        svc: BusinessService = Depends(get_business_service)
    ):
    try:
        result = await svc.claim(request, headers=headers)
    except BackendError as e:
        raise HTTPException(
            status_code=e.status_code if e.status_code and e.status_code < 500 else status.HTTP_502_BAD_GATEWAY,
            detail={"notification": {
                "title": "Claim Failed",
                "description": e.message,
                "variant": "destructive",
            }},
        ) from e
    return {
        "result": result,
        "notification": {
            "title": "Claim Submitted",
            "description": "We'll review your request and contact you shortly.",
            "variant": "default",
        },
    }


@router.post("/api/business/subscription/{laundry_id}", response_model=SubscriptionIntent)
async def start_subscription(
        laundry_id: int,
        headers: Dict[str, str] = Depends(forwarded_headers),
        svc: BusinessService = Depends(get_business_service)
    ):
    """Crée l'intent de paiement ; les erreurs passent par le handler PaymentError."""
    return await svc.start_subscription(laundry_id, headers=headers)


@router.post("/api/business/subscription/{laundry_id}/result")
async def subscription_result(
        laundry_id: int,
        result: PaymentResult,
        svc: BusinessService = Depends(get_business_service)
    ):
    return svc.payment_result(laundry_id, result)
