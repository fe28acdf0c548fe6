# =============================================================================
# core/workflows/ - Multi-step User Workflows
# =============================================================================
# - upload.py: pick -> store -> price -> record, with progress
# - download.py: check -> record -> debit display -> open
#
# Workflows never raise to their callers; they return UploadResult /
# DownloadOutcome.
# =============================================================================

from .download import (
    BrowserDocumentOpener,
    DocumentOpener,
    DownloadWorkflow,
    SavingDocumentOpener,
)
from .upload import (
    SimulatedUploadStrategy,
    StorageUploadStrategy,
    StoredFile,
    UploadStrategy,
    UploadWorkflow,
)

__all__ = [
    "BrowserDocumentOpener",
    "DocumentOpener",
    "DownloadWorkflow",
    "SavingDocumentOpener",
    "SimulatedUploadStrategy",
    "StorageUploadStrategy",
    "StoredFile",
    "UploadStrategy",
    "UploadWorkflow",
]
