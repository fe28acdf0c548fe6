# =============================================================================
# app/exceptions.py - Error Taxonomy
# =============================================================================
# Centralized exception classes for the client core.
#
# Only a few failures are exceptions at all:
# - ConfigurationError: Supabase credentials are missing
# - RemoteRequestError: the backend rejected a call
#
# Validation failures are ValidationResult values (lib/validation.py) and
# precondition failures (not enough coins, already downloaded) are failure
# reasons on workflow results. Workflows catch these exceptions at their
# boundary and return structured results instead.
# =============================================================================

from typing import Any


class BreezException(Exception):
    """
    Base exception for the Breez client core.

    All custom exceptions inherit from this class.
    Carries an actionable suggestion alongside the message.
    """

    def __init__(
        self,
        message: str,
        code: str = "BREEZ_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigurationError(BreezException):
    """Raised when the Supabase connection parameters are absent."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Supabase configuration is missing. Please check your environment variables.",
            code="CONFIGURATION_ERROR",
            suggestion=f"Set {', '.join(missing)} in the environment or .env file",
            details={"missing": missing}
        )


# =============================================================================
# Remote Request Exceptions
# =============================================================================

class RemoteRequestError(BreezException):
    """
    Raised when the backend rejects a call.

    The message is what the backend said; it is passed through to the user.
    """

    def __init__(
        self,
        message: str,
        code: str = "REMOTE_REQUEST_FAILED",
        status: int | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)
        self.status = status


class StorageUploadError(RemoteRequestError):
    """Raised when the object store refuses an upload."""

    def __init__(self, path: str, error: str, status: int | None = None):
        super().__init__(
            message=f"Failed to upload file: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status=status,
            suggestion="Check that the storage bucket exists and you are signed in",
            details={"path": path, "error": error}
        )
