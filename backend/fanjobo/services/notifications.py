"""Admin notification inbox.

Moderators see rows of admin_notifications in the admin panel. The
submission wizard writes one per pending submission.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from fanjobo.wizards.collaborators import Storage

logger = structlog.get_logger()

NOTIFICATIONS_TABLE = "admin_notifications"


class AdminNotificationSink:
    """NotificationSink that stores notifications as table rows."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def create(
        self,
        type: str,
        title: str,
        message: str,
        payload: Mapping[str, Any],
    ) -> None:
        """Insert an open notification.

        Args:
            type: Notification type (e.g. "submission-pending").
            title: Short title for the inbox list.
            message: Body text.
            payload: JSON details (ids the moderator needs).
        """
        row = await self._storage.insert(
            NOTIFICATIONS_TABLE,
            {
                "type": type,
                "title": title,
                "message": message,
                "payload": dict(payload),
                "status": "open",
            },
        )
        logger.info("Admin notification created", notification_id=row.get("id"), type=type)
