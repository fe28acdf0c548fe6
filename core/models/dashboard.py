# =============================================================================
# core/models/dashboard.py - Dashboard and Leaderboard Views
# =============================================================================
# Joined views assembled locally from concurrent reads.
# =============================================================================

from pydantic import BaseModel, Field

from .achievement import Achievement
from .profile import LeaderboardEntry, UserProfile
from .resource import CoinTransaction, Download, Resource


class DashboardData(BaseModel):
    """Everything the dashboard screen shows for one user."""
    profile: UserProfile | None = None
    uploads: list[Resource] = Field(default_factory=list)
    downloads: list[Download] = Field(default_factory=list)
    transactions: list[CoinTransaction] = Field(default_factory=list)

    @property
    def net_coin_change(self) -> int:
        """Sum of the listed transactions, spending counted negative."""
        return sum(t.signed_amount for t in self.transactions)


class AchievementStatus(BaseModel):
    """An achievement definition plus whether the user has it."""
    achievement: Achievement
    earned: bool = False


class LeaderboardData(BaseModel):
    """Leaderboard rows, the viewer's rank and their badges."""
    entries: list[LeaderboardEntry] = Field(default_factory=list)
    user_rank: int = 0
    achievements: list[AchievementStatus] = Field(default_factory=list)

    @property
    def earned_count(self) -> int:
        return sum(1 for status in self.achievements if status.earned)
