# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed async wrapper around the Supabase SDK.
# It is the only module that talks to the SDK directly and covers:
# - Auth (sign up / sign in / sign out / session / auth-change events)
# - PostgREST table queries (services build queries, `execute` runs them)
# - Storage uploads and public URLs
# - Realtime postgres_changes channels
#
# Every SDK failure is converted to SupabaseClientError so callers deal with
# one exception type carrying the backend's message.
#
# Usage:
#   backend = SupabaseClient(settings)
#   query = (await backend.table("categories")).select("*").eq("is_active", True)
#   rows = await backend.execute(query, "fetch categories")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from supabase import AsyncClient, acreate_client

from app.auth.models import AuthSession
from app.config import Settings, settings as default_settings
from app.exceptions import ConfigurationError, RemoteRequestError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows" on .single()
NOT_FOUND_CODE = "PGRST116"

AuthChangeCallback = Callable[[str, "AuthSession | None"], None]
ChangeCallback = Callable[[dict[str, Any]], None]
Unsubscribe = Callable[[], Awaitable[None]]


class SupabaseClientError(RemoteRequestError):
    """
    Error during Supabase operations.

    `backend_code` is the code the backend attached (PostgREST codes such as
    PGRST116, or Postgres codes such as 23505 for unique violations).
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        status: int | None = None,
        backend_code: str | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, status=status, suggestion=suggestion, details=details)
        self.backend_code = backend_code

    @property
    def is_not_found(self) -> bool:
        return self.backend_code == NOT_FOUND_CODE or NOT_FOUND_CODE in self.message


def describe_error(error: Exception) -> tuple[str, int | None, str | None]:
    """
    Pull (message, status, code) out of whatever the SDK raised.

    Auth errors carry .message/.status, PostgREST errors .message/.code,
    storage errors a dict in args[0].
    """
    message = getattr(error, "message", None)
    status = getattr(error, "status", None)
    code = getattr(error, "code", None)

    if not message and error.args and isinstance(error.args[0], dict):
        payload = error.args[0]
        message = payload.get("message") or payload.get("error")
        status = status or payload.get("statusCode") or payload.get("status")
        code = code or payload.get("code")

    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    return str(message or error), status, (str(code) if code is not None else None)


class SupabaseClient:
    """
    Async wrapper for one Supabase project.

    The SDK client is created lazily on first use, so the app can start (and
    show its warm-start cache) without credentials; the first real call then
    raises ConfigurationError.

    Example:
        backend = SupabaseClient(settings)
        session = await backend.get_session()
    """

    def __init__(self, settings: Settings | None = None, client: AsyncClient | None = None):
        self.settings = settings or default_settings
        self._client = client

    # -------------------------------------------------------------------------
    # Client
    # -------------------------------------------------------------------------

    def require_credentials(self) -> None:
        """
        Raises:
            ConfigurationError: If SUPABASE_URL or SUPABASE_ANON_KEY is unset
        """
        missing = [
            name
            for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY")
            if not getattr(self.settings, name, "").strip()
        ]
        if missing:
            raise ConfigurationError(missing)

    async def get_client(self) -> AsyncClient:
        """
        Get or create the SDK client.

        Uses the anon key: row level security applies as the signed-in user.

        Raises:
            ConfigurationError: If credentials are missing
            SupabaseClientError: If client creation fails
        """
        if self._client is None:
            self.require_credentials()
            try:
                self._client = await acreate_client(
                    self.settings.SUPABASE_URL,
                    self.settings.SUPABASE_ANON_KEY,
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                message, status, _ = describe_error(e)
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {message}",
                    code="CLIENT_INIT_FAILED",
                    status=status,
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return self._client

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> None:
        client = await self.get_client()
        try:
            await client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata},
            })
        except Exception as e:
            raise self._auth_error("sign up", e)

    async def sign_in_with_password(self, email: str, password: str) -> None:
        client = await self.get_client()
        try:
            await client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise self._auth_error("sign in", e)

    async def sign_out(self) -> None:
        client = await self.get_client()
        try:
            await client.auth.sign_out()
        except Exception as e:
            raise self._auth_error("sign out", e)

    async def get_session(self) -> AuthSession | None:
        client = await self.get_client()
        try:
            session = await client.auth.get_session()
        except Exception as e:
            raise self._auth_error("get session", e)
        return AuthSession.from_backend(session)

    async def on_auth_state_change(self, callback: AuthChangeCallback) -> Callable[[], None]:
        """
        Register for auth-change events.

        The callback receives the event name (e.g. "SIGNED_IN") and our own
        AuthSession (or None). Returns a function that unsubscribes.
        """
        client = await self.get_client()

        def relay(event: Any, session: Any) -> None:
            callback(str(getattr(event, "value", event)), AuthSession.from_backend(session))

        subscription = client.auth.on_auth_state_change(relay)
        return subscription.unsubscribe

    @staticmethod
    def _auth_error(action: str, error: Exception) -> SupabaseClientError:
        message, status, code = describe_error(error)
        logger.debug(f"Supabase auth {action} failed: {message}")
        return SupabaseClientError(
            message=message,
            code="AUTH_REQUEST_FAILED",
            status=status,
            backend_code=code,
            details={"action": action},
        )

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    async def table(self, name: str) -> Any:
        """Start a PostgREST query builder for a table or view."""
        client = await self.get_client()
        return client.table(name)

    async def execute(
        self,
        query: Any,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> Any:
        """
        Run a built query and return `response.data`.

        Args:
            query: A PostgREST builder from `table()`
            operation: Short description used in the error ("fetch resources")
            details: Extra context for the error

        Raises:
            SupabaseClientError: If the backend rejects the query
        """
        try:
            response = await query.execute()
        except Exception as e:
            message, status, code = describe_error(e)
            raise SupabaseClientError(
                message=f"Failed to {operation}: {message}",
                code="QUERY_FAILED",
                status=status,
                backend_code=code,
                details=details,
            )
        return response.data if response is not None else None

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    async def upload_object(self, path: str, data: bytes, content_type: str) -> str:
        """
        Upload bytes to the resources bucket.

        Returns:
            The stored path

        Raises:
            SupabaseClientError: If the store rejects the upload
        """
        client = await self.get_client()
        bucket = self.settings.STORAGE_BUCKET
        try:
            response = await client.storage.from_(bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": content_type, "upsert": "false"},
            )
        except Exception as e:
            message, status, code = describe_error(e)
            raise SupabaseClientError(
                message=message,
                code="STORAGE_UPLOAD_FAILED",
                status=status,
                backend_code=code,
                details={"bucket": bucket, "path": path},
            )
        return getattr(response, "path", None) or path

    async def get_public_url(self, path: str) -> str:
        client = await self.get_client()
        bucket = self.settings.STORAGE_BUCKET
        try:
            return await client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            message, status, code = describe_error(e)
            raise SupabaseClientError(
                message=f"Failed to get public URL: {message}",
                code="PUBLIC_URL_FAILED",
                status=status,
                backend_code=code,
                details={"bucket": bucket, "path": path},
            )

    # -------------------------------------------------------------------------
    # Realtime
    # -------------------------------------------------------------------------

    async def subscribe_to_changes(
        self,
        channel_name: str,
        table: str,
        callback: ChangeCallback,
        event: str = "*",
        filter: str | None = None,
    ) -> Unsubscribe:
        """
        Listen to postgres_changes on a table.

        Returns:
            Coroutine function that removes the channel
        """
        client = await self.get_client()
        try:
            channel = client.channel(channel_name)
            channel.on_postgres_changes(
                event,
                callback=callback,
                table=table,
                schema="public",
                filter=filter,
            )
            await channel.subscribe()
        except Exception as e:
            message, status, code = describe_error(e)
            raise SupabaseClientError(
                message=f"Failed to subscribe to {table} changes: {message}",
                code="REALTIME_SUBSCRIBE_FAILED",
                status=status,
                backend_code=code,
                details={"channel": channel_name, "table": table},
            )

        logger.debug(f"Subscribed to {event} on {table} via {channel_name}")

        async def unsubscribe() -> None:
            await client.remove_channel(channel)
            logger.debug(f"Removed realtime channel {channel_name}")

        return unsubscribe
