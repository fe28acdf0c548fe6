# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: BackendRow, the NULL-tolerant base for table rows
# - profile.py: User profiles and leaderboard rows
# - resource.py: Categories, resources, downloads, coin transactions
# - achievement.py: Achievement definitions and earned achievements
# - settings.py: Per-user settings
# - upload.py: Upload form input
# - results.py: Structured results returned by workflows and writes
# - dashboard.py: Joined dashboard / leaderboard views
#
# These models define the contract between the backend tables and the UI.
# =============================================================================

# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------
from .base import BackendRow

# -----------------------------------------------------------------------------
# Profile Models
# -----------------------------------------------------------------------------
from .profile import LeaderboardEntry, UserProfile

# -----------------------------------------------------------------------------
# Resource Models
# -----------------------------------------------------------------------------
from .resource import (
    Category,
    CoinTransaction,
    Download,
    ReferenceType,
    Resource,
    ResourceCreate,
    TransactionType,
)

# -----------------------------------------------------------------------------
# Achievement / Settings Models
# -----------------------------------------------------------------------------
from .achievement import Achievement, UserAchievement
from .settings import EDITABLE_SETTINGS, UserSettings

# -----------------------------------------------------------------------------
# Workflow Models
# -----------------------------------------------------------------------------
from .upload import SelectedFile, UploadRequest
from .results import (
    DownloadOutcome,
    FailureReason,
    QueryError,
    QueryResult,
    UploadResult,
)
from .dashboard import AchievementStatus, DashboardData, LeaderboardData

__all__ = [
    # Base
    "BackendRow",
    # Profile
    "LeaderboardEntry",
    "UserProfile",
    # Resource
    "Category",
    "CoinTransaction",
    "Download",
    "ReferenceType",
    "Resource",
    "ResourceCreate",
    "TransactionType",
    # Achievement / Settings
    "Achievement",
    "UserAchievement",
    "EDITABLE_SETTINGS",
    "UserSettings",
    # Workflow
    "SelectedFile",
    "UploadRequest",
    "DownloadOutcome",
    "FailureReason",
    "QueryError",
    "QueryResult",
    "UploadResult",
    # Views
    "AchievementStatus",
    "DashboardData",
    "LeaderboardData",
]
