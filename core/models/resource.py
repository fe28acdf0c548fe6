# =============================================================================
# core/models/resource.py - Resource, Category, Download, Transaction Schemas
# =============================================================================
# These models mirror the backend tables the access layer reads:
# - Category: fixed taxonomy (read-only)
# - Resource: an uploaded file's record (not the binary)
# - Download: who downloaded what, for how many coins (immutable)
# - CoinTransaction: append-only audit of coin movements
#
# Joined columns (category_name, uploader_name, ...) are flattened onto the
# model by the services.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .base import BackendRow


class Category(BackendRow):
    """A subject category such as "Mathematics"."""

    id: str
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    is_active: bool = True
    created_at: datetime | None = None


class Resource(BackendRow):
    """
    An uploaded study material.

    `file_url` holds the storage path; the public URL is resolved on
    download.

    Example:
        {
            "id": "7a1c...",
            "title": "Linear Algebra Notes",
            "file_type": "PDF",
            "file_url": "1718000000000-3f9a1c0b2d4e.pdf",
            "coin_price": 5,
            "category_name": "Mathematics"
        }
    """

    id: str
    title: str
    description: str = ""
    category_id: str | None = None
    file_type: str = ""
    file_url: str | None = None
    file_size: int = 0

    # What a download costs
    coin_price: int = Field(default=2, ge=0)

    uploader_id: str | None = None
    download_count: int = 0
    is_approved: bool = False
    is_active: bool = True
    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Joined fields
    category_name: str | None = None
    uploader_name: str | None = None
    uploader_student_id: str | None = None


class ResourceCreate(BaseModel):
    """Payload inserted into `resources` by the upload workflow."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category_id: str
    file_type: str
    file_url: str
    file_size: int = Field(default=0, ge=0)
    coin_price: int = Field(..., ge=0)
    uploader_id: str
    is_approved: bool = True
    tags: list[str] = Field(default_factory=list)


class Download(BackendRow):
    """One (resource, downloader) purchase."""

    id: str
    resource_id: str
    downloader_id: str
    coins_spent: int = 0
    downloaded_at: datetime | None = None

    # Joined fields
    resource_title: str | None = None
    resource_category: str | None = None


class TransactionType(str, Enum):
    EARNED = "earned"
    SPENT = "spent"
    BONUS = "bonus"
    PENALTY = "penalty"


class ReferenceType(str, Enum):
    UPLOAD = "upload"
    DOWNLOAD = "download"
    BONUS = "bonus"
    PENALTY = "penalty"


class CoinTransaction(BackendRow):
    """An entry in the coin audit log, written by backend triggers."""

    id: str
    user_id: str
    transaction_type: TransactionType
    amount: int
    description: str = ""
    reference_id: str | None = None
    reference_type: ReferenceType | None = None
    created_at: datetime | None = None

    @property
    def signed_amount(self) -> int:
        """Amount with spending and penalties negative."""
        if self.transaction_type in (TransactionType.SPENT, TransactionType.PENALTY):
            return -abs(self.amount)
        return abs(self.amount)
