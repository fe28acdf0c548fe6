# =============================================================================
# core/services/profile_service.py - User Profile Queries
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from app.exceptions import BreezException
from core.models.profile import UserProfile
from core.models.results import QueryResult
from lib.utils import normalize_uuid

from .base import BackendService

logger = logging.getLogger(__name__)


class ProfileService(BackendService):
    """Reads and updates rows of `user_profiles`."""

    async def get_user_profile(self, user_id: str) -> UserProfile | None:
        """
        Fetch one profile.

        Returns:
            The profile, or None if it doesn't exist or the query failed
        """
        user_id = normalize_uuid(user_id)
        try:
            query = (await self.backend.table("user_profiles")).select("*").eq("id", user_id).single()
            row = await self._fetch(query, "fetch user profile", {"user_id": user_id})
            return UserProfile.model_validate(row) if row else None
        except (BreezException, ValidationError) as e:
            if getattr(e, "is_not_found", False):
                return None
            logger.error(f"Error fetching user profile: {e}")
            return None

    async def update_user_profile(self, user_id: str, updates: dict[str, Any]) -> QueryResult:
        """
        Update profile fields (name, semester, privacy flags).

        Coin balances and counters are owned by backend triggers and are
        dropped from `updates`.
        """
        user_id = normalize_uuid(user_id)
        protected = {
            "id",
            "total_coins",
            "coins_earned",
            "coins_spent",
            "uploaded_files_count",
            "downloaded_files_count",
        }
        clean = {k: v for k, v in updates.items() if k not in protected}
        result = await self._write(
            "user_profiles",
            lambda table: table.update(clean).eq("id", user_id),
            "update user profile",
            {"user_id": user_id},
        )
        if result.ok:
            result.data = UserProfile.model_validate(result.data)
        return result

    async def check_user_coins(self, user_id: str) -> int:
        """Current total_coins, or 0 when unknown."""
        user_id = normalize_uuid(user_id)
        try:
            query = (await self.backend.table("user_profiles")).select("total_coins").eq("id", user_id).single()
            row = await self._fetch(query, "check user coins", {"user_id": user_id})
            return int((row or {}).get("total_coins") or 0)
        except BreezException as e:
            logger.error(f"Error checking user coins: {e}")
            return 0
