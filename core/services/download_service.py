# =============================================================================
# core/services/download_service.py - Download Records
# =============================================================================
# A row in `downloads` is the purchase. Backend triggers debit the coins and
# bump counters when it is inserted; a unique (downloader_id, resource_id)
# constraint rejects a second purchase.
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from app.exceptions import BreezException
from core.models.resource import Download
from core.models.results import QueryResult
from lib.utils import normalize_uuid

from .base import BackendService

logger = logging.getLogger(__name__)


def flatten_download(row: dict[str, Any]) -> Download:
    """Move the joined resource title and category onto the download."""
    row = dict(row)
    resource = row.pop("resources", None) or {}
    category = resource.get("categories") or {}
    row["resource_title"] = resource.get("title")
    row["resource_category"] = category.get("name")
    return Download.model_validate(row)


class DownloadService(BackendService):
    """Queries against `downloads`."""

    async def download_resource(self, resource_id: str, downloader_id: str, coins_spent: int) -> QueryResult:
        """
        Record a purchase.

        Returns:
            QueryResult whose data is the created Download
        """
        payload = {
            "resource_id": normalize_uuid(resource_id),
            "downloader_id": normalize_uuid(downloader_id),
            "coins_spent": coins_spent,
        }
        result = await self._write(
            "downloads",
            lambda table: table.insert(payload),
            "record download",
            payload,
        )
        if result.ok:
            result.data = Download.model_validate(result.data)
        return result

    async def get_user_downloads(self, user_id: str) -> list[Download]:
        """A user's downloads, newest first."""
        user_id = normalize_uuid(user_id)
        try:
            query = (
                (await self.backend.table("downloads"))
                .select("*, resources(title, categories(name))")
                .eq("downloader_id", user_id)
                .order("downloaded_at", desc=True)
            )
            rows = await self._fetch(query, "fetch user downloads", {"user_id": user_id})
            return [flatten_download(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching user downloads: {e}")
            return []

    async def has_user_downloaded(self, user_id: str, resource_id: str) -> bool:
        """
        Whether a Download row exists for (user, resource).

        A failed check answers False; the unique constraint on insert still
        prevents a double charge.
        """
        user_id = normalize_uuid(user_id)
        resource_id = normalize_uuid(resource_id)
        try:
            query = (
                (await self.backend.table("downloads"))
                .select("id")
                .eq("downloader_id", user_id)
                .eq("resource_id", resource_id)
                .limit(1)
            )
            rows = await self._fetch(query, "check download status", {"resource_id": resource_id})
            return bool(rows)
        except BreezException as e:
            logger.error(f"Error checking download status: {e}")
            return False
