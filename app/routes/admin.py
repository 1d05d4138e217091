"""Modération des notifications."""
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.admin.notifications import TABS, NotificationService
from app.dependencies import forwarded_headers, get_notification_service
from app.errors import BackendError
from app.logger import logger
from app.models import NotificationsPage, NotificationStatusUpdate
from app.search.results import error_panel

router = APIRouter(tags=["admin"])


@router.get("/api/pages/admin/notifications", response_model=NotificationsPage)
async def notifications_page(
        tab: str = Query("all", pattern="^(" + "|".join(TABS) + ")$"),
        headers: Dict[str, str] = Depends(forwarded_headers),
        svc: NotificationService = Depends(get_notification_service)
    ):
    try:
        return await svc.page(tab, headers=headers)
    except BackendError as e:
        raise HTTPException(
            status_code=e.status_code if e.status_code in (401, 403) else status.HTTP_502_BAD_GATEWAY,
            detail={"error": error_panel("We couldn't load notifications. Please try again.").model_dump()},
        ) from e


@router.patch("/api/admin/notifications/{notification_id}")
async def update_notification(
        notification_id: int,
        update: NotificationStatusUpdate,
        headers: Dict[str, str] = Depends(forwarded_headers),
        svc: NotificationService = Depends(get_notification_service)
    ):
    try:
        toast = await svc.update_status(notification_id, update.status, headers=headers)
    except BackendError as e:
        logger.error("Failed to update notification {id}: {error}", id=notification_id, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"notification": {
                "title": "Error",
                "description": "Failed to update notification status",
                "variant": "destructive",
            }},
        ) from e
    return {"notification": toast}
