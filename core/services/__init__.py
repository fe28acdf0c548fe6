# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .base import BackendService
from .dashboard_service import DashboardService
from .download_service import DownloadService
from .leaderboard_service import LeaderboardService
from .profile_service import ProfileService
from .realtime_service import RealtimeService
from .resource_service import ResourceService
from .settings_service import SettingsDraft, SettingsService
from .storage_service import StorageService

__all__ = [
    "BackendService",
    "DashboardService",
    "DownloadService",
    "LeaderboardService",
    "ProfileService",
    "RealtimeService",
    "ResourceService",
    "SettingsDraft",
    "SettingsService",
    "StorageService",
]
