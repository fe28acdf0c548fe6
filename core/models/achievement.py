# =============================================================================
# core/models/achievement.py - Achievement Schemas
# =============================================================================
# Static achievement definitions and the per-user earned set. Unlocking is
# done by the backend; the client only reads.
# =============================================================================

from datetime import datetime

from .base import BackendRow


class Achievement(BackendRow):
    """An achievement definition, e.g. "First Upload" (uploads >= 1)."""

    id: str
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    requirement_type: str = ""
    requirement_value: int = 0
    is_active: bool = True
    created_at: datetime | None = None


class UserAchievement(BackendRow):
    """An achievement a user has earned, with its definition joined in."""

    id: str
    user_id: str
    achievement_id: str
    earned_at: datetime | None = None
    achievement: Achievement | None = None
