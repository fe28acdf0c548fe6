# =============================================================================
# core/services/dashboard_service.py - Dashboard and Leaderboard Loading
# =============================================================================
# The only place with concurrent fan-out: independent read-only queries run
# together with asyncio.gather and are joined locally once all resolve.
# Each read already degrades to an empty value on failure, so one failing
# query never blanks the whole screen.
# =============================================================================

import asyncio
import logging

from core.models.dashboard import AchievementStatus, DashboardData, LeaderboardData

from .download_service import DownloadService
from .leaderboard_service import LeaderboardService
from .profile_service import ProfileService
from .resource_service import ResourceService

logger = logging.getLogger(__name__)


class DashboardService:
    """Assembles the dashboard and leaderboard views."""

    def __init__(
        self,
        profiles: ProfileService,
        resources: ResourceService,
        downloads: DownloadService,
        leaderboard: LeaderboardService,
        transactions_limit: int = 20,
        leaderboard_limit: int = 50,
    ):
        self.profiles = profiles
        self.resources = resources
        self.downloads = downloads
        self.leaderboard = leaderboard
        self.transactions_limit = transactions_limit
        self.leaderboard_limit = leaderboard_limit

    async def load_dashboard(self, user_id: str) -> DashboardData:
        profile, uploads, downloads, transactions = await asyncio.gather(
            self.profiles.get_user_profile(user_id),
            self.resources.get_user_resources(user_id),
            self.downloads.get_user_downloads(user_id),
            self.leaderboard.get_coin_transactions(user_id, limit=self.transactions_limit),
        )
        if profile is not None and not profile.balance_consistent:
            logger.warning(
                f"Profile {user_id} balance mismatch: total={profile.total_coins} "
                f"earned={profile.coins_earned} spent={profile.coins_spent}"
            )
        return DashboardData(
            profile=profile,
            uploads=uploads,
            downloads=downloads,
            transactions=transactions,
        )

    async def load_leaderboard(self, user_id: str | None = None, limit: int | None = None) -> LeaderboardData:
        """
        Leaderboard rows plus, for a signed-in viewer, rank and badges.

        Every active achievement is listed; `earned` marks the ones the
        viewer has.
        """
        limit = limit or self.leaderboard_limit
        if user_id is None:
            entries, achievements = await asyncio.gather(
                self.leaderboard.get_leaderboard(limit),
                self.leaderboard.get_all_achievements(),
            )
            rank, earned = 0, []
        else:
            entries, rank, achievements, earned = await asyncio.gather(
                self.leaderboard.get_leaderboard(limit),
                self.leaderboard.get_user_rank(user_id),
                self.leaderboard.get_all_achievements(),
                self.leaderboard.get_user_achievements(user_id),
            )

        earned_ids = {item.achievement_id for item in earned}
        return LeaderboardData(
            entries=entries,
            user_rank=rank,
            achievements=[
                AchievementStatus(achievement=a, earned=a.id in earned_ids)
                for a in achievements
            ],
        )
