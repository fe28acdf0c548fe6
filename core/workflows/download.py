# =============================================================================
# core/workflows/download.py - Download Workflow
# =============================================================================
# Buys and opens a resource. Checks run in order and stop at the first
# failure:
#   1. signed in
#   2. enough coins (local balance)
#   3. not already downloaded
#   4. user confirmed (optional)
#   5. download recorded (backend debits the coins)
# then the local balance is decremented and the file is opened.
#
# Downloads of the same resource are serialized by a per-resource lock, so
# a second tap waits for the first and then sees ALREADY_DOWNLOADED.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import webbrowser
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable

import httpx

from app.exceptions import BreezException
from core.models.resource import Resource
from core.models.results import DownloadOutcome, FailureReason
from core.services.download_service import DownloadService
from core.services.profile_service import ProfileService
from core.services.storage_service import StorageService

if TYPE_CHECKING:
    from app.auth.state import AuthStateCache

logger = logging.getLogger(__name__)

Confirm = Callable[[Resource], Awaitable[bool]]

OPENED_MESSAGE = "Download complete."
NOT_OPENED_MESSAGE = "Download complete, but the file could not be opened automatically."


# =============================================================================
# Document openers
# =============================================================================

class DocumentOpener:
    """Hands a downloaded file's URL to something that can show it."""

    async def open(self, url: str, resource: Resource) -> bool:
        raise NotImplementedError


class BrowserDocumentOpener(DocumentOpener):
    """Opens the URL in the system browser / document viewer."""

    async def open(self, url: str, resource: Resource) -> bool:
        return await asyncio.to_thread(webbrowser.open, url)


class SavingDocumentOpener(DocumentOpener):
    """
    Fetches the file into a local directory.

    `last_path` is where the most recent file was written.
    """

    def __init__(self, directory: Path | str, timeout: float = 30.0):
        self.directory = Path(directory)
        self.timeout = timeout
        self.last_path: Path | None = None

    def target_for(self, resource: Resource) -> Path:
        if resource.file_url:
            name = Path(resource.file_url).name
        else:
            name = f"{resource.id}.{resource.file_type.lower() or 'bin'}"
        return self.directory / name

    async def open(self, url: str, resource: Resource) -> bool:
        target = self.target_for(resource)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url)
                response.raise_for_status()
            await asyncio.to_thread(self._write, target, response.content)
        except (httpx.HTTPError, OSError) as e:
            logger.warning(f"Could not save {url} to {target}: {e}")
            return False

        self.last_path = target
        logger.info(f"Saved {resource.title!r} to {target}")
        return True

    @staticmethod
    def _write(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)


# =============================================================================
# Workflow
# =============================================================================

class DownloadWorkflow:
    """
    Download flow for the signed-in user.

    `balance` is the coin count shown in the UI. It is decremented
    optimistically after a recorded download and corrected by
    refresh_balance() or set_balance() (realtime profile updates).
    """

    def __init__(
        self,
        auth: AuthStateCache,
        downloads: DownloadService,
        profiles: ProfileService,
        storage: StorageService,
        opener: DocumentOpener | None = None,
    ):
        self.auth = auth
        self.downloads = downloads
        self.profiles = profiles
        self.storage = storage
        self.opener = opener or BrowserDocumentOpener()
        self.balance = 0
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiting: dict[str, int] = {}

    # -------------------------------------------------------------------------
    # Balance
    # -------------------------------------------------------------------------

    async def refresh_balance(self) -> int:
        """Re-read total_coins for the signed-in user (0 when signed out)."""
        user = self.auth.user
        self.balance = await self.profiles.check_user_coins(user.id) if user else 0
        return self.balance

    def set_balance(self, value: int) -> None:
        self.balance = value

    # -------------------------------------------------------------------------
    # In-flight guard
    # -------------------------------------------------------------------------

    def is_in_flight(self, resource_id: str) -> bool:
        """True while a download of this resource is running or queued."""
        return self._waiting.get(resource_id, 0) > 0

    async def download(self, resource: Resource, confirm: Confirm | None = None) -> DownloadOutcome:
        """
        Buy and open a resource.

        Args:
            resource: The resource to download
            confirm: Optional async prompt; returning False cancels

        Returns:
            DownloadOutcome; never raises
        """
        lock = self._locks.setdefault(resource.id, asyncio.Lock())
        self._waiting[resource.id] = self._waiting.get(resource.id, 0) + 1
        try:
            async with lock:
                return await self._download(resource, confirm)
        except Exception:
            logger.exception(f"Unexpected error downloading {resource.id}")
            return self._fail(FailureReason.UNEXPECTED_ERROR, "An unexpected error occurred during download")
        finally:
            self._waiting[resource.id] -= 1
            if self._waiting[resource.id] == 0:
                del self._waiting[resource.id]
                self._locks.pop(resource.id, None)

    async def _download(self, resource: Resource, confirm: Confirm | None) -> DownloadOutcome:
        user = self.auth.user
        if user is None:
            return self._fail(FailureReason.NOT_AUTHENTICATED, "Please sign in to download resources.")

        price = resource.coin_price
        if self.balance < price:
            return self._fail(
                FailureReason.INSUFFICIENT_COINS,
                f"This resource costs {price} coins but you only have {self.balance}.",
            )

        if await self.downloads.has_user_downloaded(user.id, resource.id):
            return self._fail(FailureReason.ALREADY_DOWNLOADED, "You have already downloaded this resource.")

        if confirm is not None and not await confirm(resource):
            return self._fail(FailureReason.CANCELLED, "Download cancelled.")

        result = await self.downloads.download_resource(resource.id, user.id, price)
        if not result.ok:
            return self._fail(FailureReason.DOWNLOAD_FAILED, result.error.message)

        self.balance -= price
        logger.info(f"Downloaded {resource.id} for {price} coins; displayed balance {self.balance}")

        url, opened = await self._open(resource)
        return DownloadOutcome(
            success=True,
            message=OPENED_MESSAGE if opened else NOT_OPENED_MESSAGE,
            coins_spent=price,
            url=url,
            opened=opened,
            download=result.data,
        )

    async def _open(self, resource: Resource) -> tuple[str | None, bool]:
        if not resource.file_url:
            return None, False
        try:
            url = await self.storage.get_public_url(resource.file_url)
        except BreezException as e:
            logger.warning(f"Could not resolve URL for {resource.file_url}: {e}")
            return None, False
        try:
            return url, bool(await self.opener.open(url, resource))
        except Exception as e:
            logger.warning(f"Opener failed for {url}: {e}")
            return url, False

    @staticmethod
    def _fail(reason: FailureReason, message: str) -> DownloadOutcome:
        return DownloadOutcome(success=False, reason=reason, message=message)
