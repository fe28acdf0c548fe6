# =============================================================================
# core/services/settings_service.py - User Settings
# =============================================================================
# Reads and writes `user_settings`, plus SettingsDraft: the in-memory edit
# buffer behind the settings screen (edit, save, reset to defaults).
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from app.exceptions import BreezException
from core.models.results import QueryResult
from core.models.settings import EDITABLE_SETTINGS, UserSettings
from lib.utils import normalize_uuid

from .base import BackendService

logger = logging.getLogger(__name__)


class SettingsService(BackendService):

    async def get_user_settings(self, user_id: str) -> UserSettings | None:
        user_id = normalize_uuid(user_id)
        try:
            query = (await self.backend.table("user_settings")).select("*").eq("user_id", user_id).single()
            row = await self._fetch(query, "fetch user settings", {"user_id": user_id})
            return UserSettings.model_validate(row) if row else None
        except (BreezException, ValidationError) as e:
            if not getattr(e, "is_not_found", False):
                logger.error(f"Error fetching user settings: {e}")
            return None

    async def update_user_settings(self, user_id: str, changes: dict[str, Any]) -> QueryResult:
        """Update editable columns only; `data` is the stored UserSettings."""
        user_id = normalize_uuid(user_id)
        clean = {k: v for k, v in changes.items() if k in EDITABLE_SETTINGS}
        result = await self._write(
            "user_settings",
            lambda table: table.update(clean).eq("user_id", user_id),
            "update user settings",
            {"user_id": user_id, "fields": sorted(clean)},
        )
        if result.ok:
            result.data = UserSettings.model_validate(result.data)
        return result


class SettingsDraft:
    """
    Unsaved edits to one user's settings.

    Example:
        draft = SettingsDraft(service, user_id)
        await draft.load()
        draft.update_setting("dark_mode", True)
        if draft.has_unsaved_changes:
            await draft.save()
    """

    def __init__(self, service: SettingsService, user_id: str):
        self.service = service
        self.user_id = user_id
        self.saved = UserSettings(user_id=user_id)
        self.current = self.saved.model_copy()

    @property
    def has_unsaved_changes(self) -> bool:
        return self.changes() != {}

    def changes(self) -> dict[str, Any]:
        return {
            field: getattr(self.current, field)
            for field in EDITABLE_SETTINGS
            if getattr(self.current, field) != getattr(self.saved, field)
        }

    async def load(self) -> UserSettings:
        """Load stored settings; defaults are kept when none exist."""
        stored = await self.service.get_user_settings(self.user_id)
        if stored is not None:
            self.saved = stored
        self.current = self.saved.model_copy()
        return self.current

    def update_setting(self, field: str, value: Any) -> None:
        if field not in EDITABLE_SETTINGS:
            raise KeyError(f"Unknown setting: {field}")
        self.current = self.current.model_copy(update={field: value})

    async def save(self) -> QueryResult:
        """Write pending changes; the draft stays dirty if the write fails."""
        changes = self.changes()
        if not changes:
            return QueryResult(data=self.saved)
        result = await self.service.update_user_settings(self.user_id, changes)
        if result.ok:
            self.saved = result.data
            self.current = self.saved.model_copy()
        return result

    def reset(self) -> None:
        """Back to the defaults; call save() to persist them."""
        self.current = UserSettings(id=self.saved.id, user_id=self.user_id)
