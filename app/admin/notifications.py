"""Modération : notifications des demandes de propriétaires."""
from typing import Dict, List, Optional

from app.backend.api import LaundromatApi
from app.logger import logger
from app.models import Notification, NotificationsPage

TABS = ("all", "unread", "read", "contacted")


def count_by_status(notifications: List[Notification]) -> Dict[str, int]:
    counts = {tab: 0 for tab in TABS}
    counts["all"] = len(notifications)
    for notification in notifications:
        counts[notification.status] = counts.get(notification.status, 0) + 1
    return counts


def filter_by_tab(notifications: List[Notification], tab: str) -> List[Notification]:
    if tab == "all":
        return list(notifications)
    return [n for n in notifications if n.status == tab]


class NotificationService:
    def __init__(self, api: LaundromatApi):
        self.api = api

    async def page(self, tab: str = "all", headers: Optional[Dict[str, str]] = None) -> NotificationsPage:
        if tab not in TABS:
            tab = "all"
        notifications = await self.api.notifications(headers=headers)
        return NotificationsPage(
            tab=tab,
            notifications=filter_by_tab(notifications, tab),
            counts=count_by_status(notifications),
        )

    async def update_status(self, notification_id: int, status: str,
                            headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Met à jour le statut ; renvoie le toast à afficher."""
        await self.api.update_notification(notification_id, status, headers=headers)
        logger.info("Notification {id} marked as {status}", id=notification_id, status=status)
        return {
            "title": "Status updated",
            "description": f"Notification marked as {status}",
        }
