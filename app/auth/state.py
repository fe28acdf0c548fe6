# =============================================================================
# app/auth/state.py - Authentication-State Cache
# =============================================================================
# Holds the current session/user, mirrors it to the local store for warm
# start, and delegates sign up / sign in / sign out to Supabase Auth.
#
# The cache is the single writer of auth state. Readers call `subscribe()`
# and receive an AuthSnapshot on every change (and once immediately).
#
# Lifecycle:
#   auth = AuthStateCache(backend, store)
#   await auth.start()     # warm start, session check, event subscription
#   ...
#   await auth.shutdown()  # unsubscribe, flush pending cache writes
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable

from pydantic import ValidationError

from app.auth.models import (
    AuthError,
    AuthResult,
    AuthSession,
    AuthSnapshot,
    AuthStatus,
    AuthUser,
)
from app.auth.storage import AUTHENTICATED_FLAG, LocalStore, StorageKeys
from app.exceptions import BreezException, ConfigurationError

if TYPE_CHECKING:
    from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthSnapshot], None]


def _snapshot_for(session: AuthSession | None) -> AuthSnapshot:
    if session is not None and session.user is not None:
        return AuthSnapshot(status=AuthStatus.AUTHENTICATED, user=session.user, session=session)
    return AuthSnapshot(status=AuthStatus.ANONYMOUS)


class AuthStateCache:
    """
    Single-writer holder of the auth state.

    Live state from Supabase always wins over the local cache: the cached
    user is only shown while the state is still LOADING.
    """

    def __init__(self, backend: SupabaseClient, store: LocalStore):
        self.backend = backend
        self.store = store
        self._state = AuthSnapshot()
        self._listeners: list[AuthListener] = []
        self._unsubscribe_backend: Callable[[], None] | None = None
        self._persist_lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Observer channel
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AuthSnapshot:
        return self._state

    @property
    def user(self) -> AuthUser | None:
        return self._state.user if self._state.is_authenticated else None

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """
        Register a listener; it is called with the current snapshot right away.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        self._notify(listener, self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, snapshot: AuthSnapshot) -> None:
        self._state = snapshot
        for listener in list(self._listeners):
            self._notify(listener, snapshot)

    @staticmethod
    def _notify(listener: AuthListener, snapshot: AuthSnapshot) -> None:
        try:
            listener(snapshot)
        except Exception:
            logger.exception("Auth state listener raised")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """
        Warm start from the local cache, then confirm with Supabase.

        Calling start() twice is a no-op.
        """
        if self._state.status != AuthStatus.UNINITIALIZED:
            return

        logger.info("Initializing authentication")
        self._publish(AuthSnapshot(status=AuthStatus.LOADING))

        cached_user = await self._load_cached_user()
        if cached_user is not None:
            self._publish(AuthSnapshot(status=AuthStatus.LOADING, user=cached_user))
            logger.debug("Loaded cached user data")

        try:
            session = await self.backend.get_session()
        except BreezException as e:
            # Keep the stale cache for the next warm start
            logger.error(f"Session check failed: {e}")
            self._publish(AuthSnapshot(status=AuthStatus.ANONYMOUS))
        else:
            logger.info(f"Session check: has_session={session is not None}")
            self._publish(_snapshot_for(session))
            await self._persist(session)

        try:
            self._unsubscribe_backend = await self.backend.on_auth_state_change(self._on_auth_event)
        except BreezException as e:
            logger.error(f"Could not subscribe to auth changes: {e}")

    async def shutdown(self) -> None:
        """Stop listening to Supabase and flush pending cache writes."""
        if self._unsubscribe_backend is not None:
            self._unsubscribe_backend()
            self._unsubscribe_backend = None
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._listeners.clear()
        logger.info("Auth state cache shut down")

    def _on_auth_event(self, event: str, session: AuthSession | None) -> None:
        logger.info(f"Auth state changed: {event} (has_session={session is not None})")
        self._publish(_snapshot_for(session))

        task = asyncio.get_running_loop().create_task(self._persist(session))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # -------------------------------------------------------------------------
    # Local cache
    # -------------------------------------------------------------------------

    async def _persist(self, session: AuthSession | None) -> None:
        """Mirror the state into the local store; failures are only logged."""
        async with self._persist_lock:
            try:
                if session is not None and session.user is not None:
                    await self.store.set(StorageKeys.USER_SESSION, session.model_dump_json())
                    await self.store.set(StorageKeys.USER_DATA, session.user.model_dump_json())
                    await self.store.set(StorageKeys.AUTH_STATE, AUTHENTICATED_FLAG)
                    logger.debug("Auth state saved to local cache")
                else:
                    await self.store.multi_remove(StorageKeys.ALL)
                    logger.debug("Auth state cleared from local cache")
            except Exception as e:
                logger.error(f"Error saving auth state to local cache: {e}")

    async def _clear_cache(self) -> None:
        async with self._persist_lock:
            try:
                await self.store.multi_remove(StorageKeys.ALL)
            except Exception as e:
                logger.error(f"Error clearing local cache: {e}")

    async def _load_cached_user(self) -> AuthUser | None:
        try:
            raw = await self.store.get(StorageKeys.USER_DATA)
        except Exception as e:
            logger.error(f"Error loading auth state from local cache: {e}")
            return None
        if not raw:
            return None
        try:
            return AuthUser.model_validate_json(raw)
        except ValidationError:
            logger.warning("Cached user data is unreadable; ignoring it")
            return None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str | None = None,
        student_id: str | None = None,
        semester: str | int | None = None,
    ) -> AuthResult:
        """
        Create an account. State arrives later through the auth-change feed.

        Returns an AuthResult; a missing Supabase configuration is reported
        as CONFIGURATION_ERROR without contacting the backend.
        """
        logger.info(f"Attempting signup for {email}")
        try:
            self.backend.require_credentials()
        except ConfigurationError as e:
            logger.error(f"Supabase configuration missing: {e.details.get('missing')}")
            return AuthResult(error=AuthError(message=e.message, code=e.code))

        metadata = {
            "full_name": full_name or "",
            "student_id": student_id or "",
            "semester": str(semester) if semester else "1",
        }
        return await self._delegate(
            "signup",
            self.backend.sign_up(email, password, metadata),
            "An unexpected error occurred during signup",
        )

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await self._delegate(
            "signin",
            self.backend.sign_in_with_password(email, password),
            "An unexpected error occurred during sign in",
        )

    async def sign_out(self) -> AuthResult:
        """
        Sign out locally first, then tell Supabase.

        Always succeeds: a failed remote sign-out is logged and otherwise
        ignored so the user is never stuck signed in on this device.
        """
        logger.info("Starting signout")
        self._publish(AuthSnapshot(status=AuthStatus.ANONYMOUS))
        await self._clear_cache()

        try:
            await self.backend.sign_out()
        except Exception as e:
            logger.error(f"Supabase signout error (local state already cleared): {e}")
        else:
            logger.info("Signed out from Supabase")

        return AuthResult()

    async def _delegate(self, action: str, call, unexpected_message: str) -> AuthResult:
        try:
            await call
        except BreezException as e:
            logger.warning(f"{action} failed: {e.message}")
            return AuthResult(
                error=AuthError(message=e.message, code=e.code, status=getattr(e, "status", None))
            )
        except Exception:
            logger.exception(f"Unexpected {action} error")
            return AuthResult(error=AuthError(message=unexpected_message, code="UNEXPECTED_ERROR"))
        return AuthResult()
