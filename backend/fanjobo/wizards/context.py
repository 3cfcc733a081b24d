"""Actor context loader.

At wizard start the chat actor is resolved to a platform user (created on
first contact) and the profile fields later steps need are snapshotted
into the session's read-only context.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from fanjobo.wizards.collaborators import Storage
from fanjobo.wizards.state import freeze_context

logger = structlog.get_logger()

PLACEHOLDER_NAME = "Student"


class ActorContextLoader:
    """Builds the context snapshot for a new session."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def ensure_user(self, actor_id: str, display_name: str | None = None) -> dict[str, Any]:
        """Find the user row for a chat actor, creating it when absent.

        Args:
            actor_id: Chat actor identifier (stored as users.telegram_id).
            display_name: Name reported by the transport, if any.

        Returns:
            The users row.
        """
        user = await self._storage.fetch_one("users", {"telegram_id": actor_id})
        if user is not None:
            return user

        logger.info("Creating user for chat actor", actor_id=actor_id)
        return await self._storage.insert(
            "users",
            {
                "full_name": (display_name or "").strip() or PLACEHOLDER_NAME,
                "phone_or_email": f"telegram:{actor_id}",
                "telegram_id": actor_id,
            },
        )

    async def load(self, actor_id: str, display_name: str | None = None) -> Mapping[str, Any]:
        """Snapshot of the actor's user and profile fields.

        Args:
            actor_id: Chat actor identifier.
            display_name: Name reported by the transport, if any.

        Returns:
            Read-only mapping with user_id, full_name, major, term and
            profile_complete (True once a major is recorded).
        """
        user = await self.ensure_user(actor_id, display_name)
        profile = await self._storage.fetch_one("user_profiles", {"user_id": user["id"]})
        major = (profile or {}).get("major")
        return freeze_context(
            {
                "user_id": user["id"],
                "full_name": user.get("full_name"),
                "major": major,
                "term": (profile or {}).get("term"),
                "profile_complete": bool(major),
            }
        )

    async def load_profile(
        self, actor_id: str, display_name: str | None = None
    ) -> dict[str, Any] | None:
        """The actor's user_profiles row, or None before the profile wizard ran."""
        user = await self.ensure_user(actor_id, display_name)
        return await self._storage.fetch_one("user_profiles", {"user_id": user["id"]})
