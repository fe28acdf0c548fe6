# =============================================================================
# core/workflows/upload.py - Upload Workflow
# =============================================================================
# Turns an upload form submission into a resource record:
#
#   25  category resolved
#   50  binary stored (or first simulated step)
#   75  ready to record (or second simulated step)
#   100 resource record created
#
# Progress only moves forward. On failure it stays where it stopped.
#
# Two strategies share one interface:
# - StorageUploadStrategy: a file was picked; upload it to Supabase Storage
# - SimulatedUploadStrategy: no file picker; fake the transfer but still
#   create a real record (demo and test path)
#
# Coins for the uploader are granted by backend triggers on insert; this
# workflow never touches balances.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from app.exceptions import BreezException
from core.models.resource import ResourceCreate
from core.models.results import FailureReason, UploadResult
from core.models.upload import UploadRequest
from core.services.resource_service import ResourceService
from core.services.storage_service import StorageService
from lib.pricing import calculate_coin_price
from lib.utils import epoch_millis, extract_tags

if TYPE_CHECKING:
    from app.auth.state import AuthStateCache

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

PROGRESS_CATEGORY = 25
PROGRESS_STORED = 50
PROGRESS_PREPARED = 75
PROGRESS_DONE = 100

SIMULATED_SIZE_RANGE = (100_000, 1_100_000)


@dataclass(frozen=True)
class StoredFile:
    """Where the binary ended up and how big it was."""
    path: str
    size: int
    simulated: bool = False

    @property
    def size_known(self) -> bool:
        return not self.simulated


class UploadStrategy:
    """Moves the binary somewhere and reports 50 and 75 along the way."""

    async def transfer(self, request: UploadRequest, report: ProgressCallback) -> StoredFile:
        raise NotImplementedError


class StorageUploadStrategy(UploadStrategy):

    def __init__(self, storage: StorageService):
        self.storage = storage

    async def transfer(self, request: UploadRequest, report: ProgressCallback) -> StoredFile:
        """
        Raises:
            StorageUploadError: If the store rejects the file
        """
        path, size = await self.storage.upload_file(request.file)
        report(PROGRESS_STORED)
        report(PROGRESS_PREPARED)
        return StoredFile(path=path, size=size)


class SimulatedUploadStrategy(UploadStrategy):

    def __init__(self, delay: float = 1.0, rng: random.Random | None = None):
        self.delay = delay
        self.rng = rng or random.Random()

    async def transfer(self, request: UploadRequest, report: ProgressCallback) -> StoredFile:
        await asyncio.sleep(self.delay)
        report(PROGRESS_STORED)
        await asyncio.sleep(self.delay)
        report(PROGRESS_PREPARED)

        low, high = SIMULATED_SIZE_RANGE
        return StoredFile(
            path=f"mock-{epoch_millis()}.{request.file_type.lower()}",
            size=self.rng.randrange(low, high),
            simulated=True,
        )


class UploadWorkflow:
    """
    Orchestrates one upload at a time for the signed-in user.

    `uploading` and `progress` mirror what the upload screen shows.
    """

    def __init__(
        self,
        auth: AuthStateCache,
        resources: ResourceService,
        storage_strategy: UploadStrategy,
        simulated_strategy: UploadStrategy,
    ):
        self.auth = auth
        self.resources = resources
        self.storage_strategy = storage_strategy
        self.simulated_strategy = simulated_strategy
        self.uploading = False
        self.progress = 0

    def strategy_for(self, request: UploadRequest) -> UploadStrategy:
        return self.storage_strategy if request.file is not None else self.simulated_strategy

    async def submit(self, request: UploadRequest, on_progress: ProgressCallback | None = None) -> UploadResult:
        """
        Upload a resource.

        Args:
            request: Form contents (file may be None)
            on_progress: Called with 25, 50, 75, 100 as steps complete

        Returns:
            UploadResult; never raises
        """
        user = self.auth.user
        if user is None:
            return self._fail(FailureReason.NOT_AUTHENTICATED, "User not authenticated")

        def report(value: int) -> None:
            self.progress = value
            if on_progress is not None:
                on_progress(value)

        self.uploading = True
        self.progress = 0
        try:
            category = await self.resources.find_category(request.category)
            if category is None:
                return self._fail(FailureReason.INVALID_CATEGORY, "Invalid category selected")
            report(PROGRESS_CATEGORY)

            try:
                stored = await self.strategy_for(request).transfer(request, report)
            except BreezException as e:
                logger.error(f"Upload transfer failed: {e}")
                return self._fail(FailureReason.UPLOAD_FAILED, e.message)

            coin_price = calculate_coin_price(
                request.file_type, stored.size if stored.size_known else None
            )

            result = await self.resources.upload_resource(
                ResourceCreate(
                    title=request.title,
                    description=request.description,
                    category_id=category.id,
                    file_type=request.file_type,
                    file_url=stored.path,
                    file_size=stored.size,
                    coin_price=coin_price,
                    uploader_id=user.id,
                    is_approved=True,
                    tags=extract_tags(request.title),
                )
            )
            if not result.ok:
                if not stored.simulated:
                    # No compensating delete: the blob stays for external cleanup
                    logger.warning(f"Resource record failed; storage object {stored.path} is orphaned")
                return self._fail(
                    FailureReason.RECORD_FAILED,
                    result.error.message or "Failed to create resource record",
                )

            report(PROGRESS_DONE)
            logger.info(f"Upload complete: {result.data.id} priced at {coin_price} coins")
            return UploadResult(
                success=True,
                resource=result.data,
                storage_path=stored.path,
                coin_price=coin_price,
            )

        except Exception:
            logger.exception("Unexpected error in upload workflow")
            return self._fail(FailureReason.UNEXPECTED_ERROR, "An unexpected error occurred during upload")
        finally:
            self.uploading = False

    @staticmethod
    def _fail(reason: FailureReason, error: str) -> UploadResult:
        return UploadResult(success=False, reason=reason, error=error)
