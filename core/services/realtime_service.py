# =============================================================================
# core/services/realtime_service.py - Realtime Change Feeds
# =============================================================================
# Wraps Supabase realtime channels on `user_profiles`:
# - one user's profile (coin balance updates after triggers run)
# - any profile change (leaderboard refresh)
#
# Each subscribe call returns an async unsubscribe function.
# =============================================================================

import logging
from typing import Any, Callable

from lib.supabase_client import Unsubscribe
from lib.utils import normalize_uuid

from .base import BackendService

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[dict[str, Any]], None]


class RealtimeService(BackendService):

    async def subscribe_to_user_profile(self, user_id: str, callback: ChangeHandler) -> Unsubscribe:
        """Call `callback` with each UPDATE payload of this user's profile."""
        user_id = normalize_uuid(user_id)
        return await self.backend.subscribe_to_changes(
            "user_profile_changes",
            table="user_profiles",
            callback=callback,
            event="UPDATE",
            filter=f"id=eq.{user_id}",
        )

    async def subscribe_to_leaderboard(self, callback: ChangeHandler) -> Unsubscribe:
        """Call `callback` on any change to any profile."""
        return await self.backend.subscribe_to_changes(
            "leaderboard_changes",
            table="user_profiles",
            callback=callback,
            event="*",
        )


def updated_total_coins(payload: dict[str, Any]) -> int | None:
    """
    total_coins from a postgres_changes payload, if present.

    Payload shapes differ between realtime versions: the new row sits under
    "new" or under "data" -> "record".
    """
    record = payload.get("new") or (payload.get("data") or {}).get("record") or {}
    value = record.get("total_coins")
    return int(value) if value is not None else None
