# =============================================================================
# core/models/settings.py - User Settings Schemas
# =============================================================================

from datetime import datetime

from .base import BackendRow


class UserSettings(BackendRow):
    """
    A row of `user_settings`.

    The defaults are what a new account starts with; SettingsDraft uses them
    for reset.
    """

    id: str | None = None
    user_id: str | None = None

    # Notifications
    push_notifications: bool = True
    email_notifications: bool = True
    download_notifications: bool = True
    upload_notifications: bool = False

    # Privacy
    profile_visible: bool = True
    show_stats: bool = True
    allow_messages: bool = True

    # Preferences
    dark_mode: bool = False
    language: str = "English"
    auto_download: bool = False

    created_at: datetime | None = None
    updated_at: datetime | None = None


# Columns a client may change
EDITABLE_SETTINGS = frozenset({
    "push_notifications",
    "email_notifications",
    "download_notifications",
    "upload_notifications",
    "profile_visible",
    "show_stats",
    "allow_messages",
    "dark_mode",
    "language",
    "auto_download",
})
