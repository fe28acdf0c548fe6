# =============================================================================
# core/models/upload.py - Upload Request Schemas
# =============================================================================

from pathlib import Path

from pydantic import BaseModel, Field


class SelectedFile(BaseModel):
    """
    A file the user picked.

    Either `path` (read at upload time) or `content` must be set.
    """
    name: str = Field(..., min_length=1)
    path: Path | None = None
    content: bytes | None = None
    mime_type: str | None = None
    size: int | None = Field(default=None, ge=0)


class UploadRequest(BaseModel):
    """
    What the upload form submits.

    `file` is None when no file picker is available; the workflow then
    takes the simulated path.
    """
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1)
    file: SelectedFile | None = None
