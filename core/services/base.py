# =============================================================================
# core/services/base.py - Shared Service Plumbing
# =============================================================================
# Every service wraps one SupabaseClient. The read/write conventions:
# - reads return an empty value ([], None, 0) on backend failure or an
#   unreadable row, and log it
# - writes return QueryResult(data, error) and never raise
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.exceptions import BreezException
from core.models.results import QueryError, QueryResult

logger = logging.getLogger(__name__)


class BackendService:
    """Base class holding the backend client."""

    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def _fetch(self, query: Any, operation: str, details: dict[str, Any] | None = None) -> Any:
        return await self.backend.execute(query, operation, details=details)

    @staticmethod
    def _failure(error: BreezException) -> QueryResult:
        """Turn a raised backend error into a QueryResult."""
        return QueryResult(
            error=QueryError(
                message=error.message,
                code=error.code,
                status=getattr(error, "status", None),
                backend_code=getattr(error, "backend_code", None),
            )
        )

    async def _write(
        self,
        table: str,
        build,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> QueryResult:
        """
        Run a write and return its single row as a QueryResult.

        Args:
            table: Table name
            build: Function taking the table builder and returning the query
            operation: Description for errors ("record download")
        """
        try:
            query = build(await self.backend.table(table))
            rows = await self._fetch(query, operation, details)
        except BreezException as e:
            logger.error(f"Error trying to {operation}: {e}")
            return self._failure(e)

        if isinstance(rows, list):
            if not rows:
                return self._failure(
                    SupabaseClientError(
                        message=f"Failed to {operation}: no row returned",
                        code="WRITE_NO_DATA",
                        details=details,
                    )
                )
            rows = rows[0]
        return QueryResult(data=rows)
