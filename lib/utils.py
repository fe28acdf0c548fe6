# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import time
import uuid
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        String representation of the UUID

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Naming Utilities
# =============================================================================

def epoch_millis() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def file_extension(filename: str | None, default: str = "unknown") -> str:
    """
    Extension of a filename without the dot.

    Example:
        file_extension("notes.final.pdf")  # "pdf"
        file_extension("README")           # "unknown"
    """
    if not filename or "." not in filename:
        return default
    ext = filename.rsplit(".", 1)[1]
    return ext or default


def storage_object_name(filename: str | None) -> str:
    """
    Build a collision-resistant object name for an uploaded file.

    Format: <epoch ms>-<random token>.<original extension>

    Example:
        storage_object_name("calculus.pdf")  # "1718000000000-3f9a1c0b2d4e.pdf"
    """
    token = uuid.uuid4().hex[:12]
    return f"{epoch_millis()}-{token}.{file_extension(filename)}"


def extract_tags(title: str) -> list[str]:
    """Words of a title longer than two characters, in order."""
    return [word for word in title.split(" ") if len(word) > 2]
