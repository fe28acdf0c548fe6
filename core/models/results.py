# =============================================================================
# core/models/results.py - Operation Result Schemas
# =============================================================================
# Workflows and write operations never raise to their callers. They return
# one of these results instead:
# - QueryResult: {data, error} from a single backend write
# - UploadResult: {success, reason, error} from the upload workflow
# - DownloadOutcome: the download workflow's verdict
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel

from .resource import Download, Resource


class FailureReason(str, Enum):
    """
    Why a workflow stopped.

    Precondition failures (not enough coins, already downloaded) are normal
    outcomes here, not exceptions.
    """
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_CATEGORY = "invalid_category"
    UPLOAD_FAILED = "upload_failed"
    RECORD_FAILED = "record_failed"
    INSUFFICIENT_COINS = "insufficient_coins"
    ALREADY_DOWNLOADED = "already_downloaded"
    CANCELLED = "cancelled"
    DOWNLOAD_FAILED = "download_failed"
    CONFIGURATION_ERROR = "configuration_error"
    UNEXPECTED_ERROR = "unexpected_error"


class QueryError(BaseModel):
    """A backend rejection as passed on to the caller."""
    message: str
    code: str = "REMOTE_REQUEST_FAILED"
    status: int | None = None
    backend_code: str | None = None


class QueryResult(BaseModel):
    """Result of a write: exactly one of data / error is set."""
    data: Any = None
    error: QueryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class UploadResult(BaseModel):
    """
    Outcome of UploadWorkflow.submit().

    Example (failure):
        {
            "success": false,
            "reason": "invalid_category",
            "error": "Invalid category selected"
        }
    """
    success: bool
    reason: FailureReason | None = None
    error: str | None = None
    resource: Resource | None = None
    storage_path: str | None = None
    coin_price: int | None = None


class DownloadOutcome(BaseModel):
    """
    Outcome of DownloadWorkflow.download().

    A successful download whose file could not be opened has
    success=True, opened=False and an explanatory message.
    """
    success: bool
    reason: FailureReason | None = None
    message: str = ""
    coins_spent: int = 0
    url: str | None = None
    opened: bool = False
    download: Download | None = None
