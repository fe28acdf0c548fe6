# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
#
# AuthUser/AuthSession are our own shapes for what Supabase Auth returns, so
# the rest of the code never touches SDK objects. AuthSnapshot is the value
# the auth-state cache publishes to its listeners.
# =============================================================================

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def _as_dict(obj: Any) -> dict[str, Any]:
    """SDK objects are pydantic models in current releases; cached ones are dicts."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return dict(vars(obj))


class AuthUser(BaseModel):
    """
    The signed-in user as reported by Supabase Auth.

    user_metadata carries what was sent at sign-up
    (full_name, student_id, semester).
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    email: Optional[str] = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    @classmethod
    def from_backend(cls, obj: Any) -> AuthUser | None:
        data = _as_dict(obj)
        if not data.get("id"):
            return None
        return cls.model_validate(data)

    @property
    def full_name(self) -> str:
        return self.user_metadata.get("full_name") or ""


class AuthSession(BaseModel):
    """Token bundle plus the user it belongs to."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None
    user: Optional[AuthUser] = None

    @classmethod
    def from_backend(cls, obj: Any) -> AuthSession | None:
        data = _as_dict(obj)
        if not data.get("access_token"):
            return None
        user = AuthUser.from_backend(data.get("user"))
        return cls.model_validate({**data, "user": user})


class AuthStatus(str, Enum):
    """
    States of the auth-state cache.

    Flow: uninitialized -> loading -> authenticated | anonymous,
    then authenticated <-> anonymous on every auth event.
    """
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class AuthSnapshot(BaseModel):
    """
    Immutable view of the auth state at one moment.

    While LOADING, `user` may hold the warm-start user read from the local
    cache so screens can paint before the backend answers.
    """
    model_config = ConfigDict(frozen=True)

    status: AuthStatus = AuthStatus.UNINITIALIZED
    user: Optional[AuthUser] = None
    session: Optional[AuthSession] = None

    @property
    def loading(self) -> bool:
        return self.status in (AuthStatus.UNINITIALIZED, AuthStatus.LOADING)

    @property
    def is_authenticated(self) -> bool:
        return self.status == AuthStatus.AUTHENTICATED and self.user is not None


class AuthError(BaseModel):
    """An auth failure as shown to the user."""
    model_config = ConfigDict(frozen=True)

    message: str
    code: str = "AUTH_ERROR"
    status: Optional[int] = None


class AuthResult(BaseModel):
    """Result of sign_up / sign_in / sign_out. `error` is None on success."""
    model_config = ConfigDict(frozen=True)

    error: Optional[AuthError] = None

    @property
    def success(self) -> bool:
        return self.error is None
