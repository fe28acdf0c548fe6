# =============================================================================
# core/services/leaderboard_service.py - Leaderboard, Achievements, Coins
# =============================================================================
# Read-only queries behind the leaderboard and dashboard screens:
# - `leaderboard` view (ranked by total coins)
# - `achievements` / `user_achievements`
# - `coin_transactions`
# =============================================================================

import logging

from pydantic import ValidationError

from app.exceptions import BreezException
from core.models.achievement import Achievement, UserAchievement
from core.models.profile import LeaderboardEntry
from core.models.resource import CoinTransaction
from lib.utils import normalize_uuid

from .base import BackendService

logger = logging.getLogger(__name__)


class LeaderboardService(BackendService):

    async def get_leaderboard(self, limit: int = 50) -> list[LeaderboardEntry]:
        """Top `limit` rows of the leaderboard view, best first."""
        try:
            query = (await self.backend.table("leaderboard")).select("*").order("rank").limit(limit)
            rows = await self._fetch(query, "fetch leaderboard", {"limit": limit})
            return [LeaderboardEntry.model_validate(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching leaderboard: {e}")
            return []

    async def get_user_rank(self, user_id: str) -> int:
        """A user's rank, or 0 when unranked or unknown."""
        user_id = normalize_uuid(user_id)
        try:
            query = (await self.backend.table("leaderboard")).select("rank").eq("id", user_id).single()
            row = await self._fetch(query, "fetch user rank", {"user_id": user_id})
            return int((row or {}).get("rank") or 0)
        except BreezException as e:
            if not getattr(e, "is_not_found", False):
                logger.error(f"Error fetching user rank: {e}")
            return 0

    async def get_all_achievements(self) -> list[Achievement]:
        """Active achievement definitions, easiest first."""
        try:
            query = (
                (await self.backend.table("achievements"))
                .select("*")
                .eq("is_active", True)
                .order("requirement_value")
            )
            rows = await self._fetch(query, "fetch achievements")
            return [Achievement.model_validate(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching achievements: {e}")
            return []

    async def get_user_achievements(self, user_id: str) -> list[UserAchievement]:
        """Achievements a user earned, most recent first."""
        user_id = normalize_uuid(user_id)
        try:
            query = (
                (await self.backend.table("user_achievements"))
                .select("*, achievements(*)")
                .eq("user_id", user_id)
                .order("earned_at", desc=True)
            )
            rows = await self._fetch(query, "fetch user achievements", {"user_id": user_id})

            earned = []
            for row in rows or []:
                row = dict(row)
                row["achievement"] = row.pop("achievements", None)
                earned.append(UserAchievement.model_validate(row))
            return earned
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching user achievements: {e}")
            return []

    async def get_coin_transactions(self, user_id: str, limit: int = 20) -> list[CoinTransaction]:
        """Latest coin movements for a user."""
        user_id = normalize_uuid(user_id)
        try:
            query = (
                (await self.backend.table("coin_transactions"))
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .limit(limit)
            )
            rows = await self._fetch(query, "fetch coin transactions", {"user_id": user_id})
            return [CoinTransaction.model_validate(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching coin transactions: {e}")
            return []
