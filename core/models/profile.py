# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# Rows of the `user_profiles` table and the derived `leaderboard` view.
#
# Coin balances are maintained by backend triggers. The client reads them and
# never writes them (except the optimistic display value in the download
# workflow, which is not persisted).
# =============================================================================

from datetime import datetime

from pydantic import Field

from .base import BackendRow


class UserProfile(BackendRow):
    """
    One student's profile, created by the backend on sign-up.

    Example:
        {
            "id": "550e8400-...",
            "full_name": "Nadia Rahman",
            "student_id": "EDU123456",
            "semester": 7,
            "total_coins": 45,
            "coins_earned": 65,
            "coins_spent": 20
        }
    """

    id: str
    email: str | None = None
    full_name: str = ""
    student_id: str = ""
    semester: int = Field(default=1, ge=1, le=12)

    # Coin balances
    total_coins: int = 0
    coins_earned: int = 0
    coins_spent: int = 0

    # Activity counters
    uploaded_files_count: int = 0
    downloaded_files_count: int = 0

    # Privacy flags mirrored from settings
    profile_visible: bool = True
    show_stats: bool = True
    allow_messages: bool = True

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def balance_consistent(self) -> bool:
        """Whether total_coins == coins_earned - coins_spent holds."""
        return self.total_coins == self.coins_earned - self.coins_spent


class LeaderboardEntry(BackendRow):
    """A row of the `leaderboard` view, ranked by total coins."""

    id: str
    full_name: str = ""
    student_id: str = ""
    semester: int = 1
    total_coins: int = 0
    uploaded_files_count: int = 0
    downloaded_files_count: int = 0
    coins_earned: int = 0
    rank: int = Field(..., ge=1)
