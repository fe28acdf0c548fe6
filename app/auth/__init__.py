# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Auth-state cache over Supabase Auth with a warm-start local mirror.
#
# Usage:
#   from app.auth import AuthStateCache, JsonFileStore
#
#   auth = AuthStateCache(backend, JsonFileStore(settings.LOCAL_CACHE_PATH))
#   await auth.start()
#   unsubscribe = auth.subscribe(lambda snapshot: render(snapshot))
# =============================================================================

from app.auth.models import (
    AuthError,
    AuthResult,
    AuthSession,
    AuthSnapshot,
    AuthStatus,
    AuthUser,
)
from app.auth.state import AuthStateCache
from app.auth.storage import JsonFileStore, LocalStore, MemoryStore, StorageKeys

__all__ = [
    "AuthError",
    "AuthResult",
    "AuthSession",
    "AuthSnapshot",
    "AuthStatus",
    "AuthStateCache",
    "AuthUser",
    "JsonFileStore",
    "LocalStore",
    "MemoryStore",
    "StorageKeys",
]
