# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabase: stands in for supabase.AsyncClient (tables, auth, storage,
#   realtime) so SupabaseClient and the services run against canned rows
# - Signed-in / signed-out auth-state caches
# =============================================================================

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("MOCK_UPLOAD_DELAY_SECONDS", "0")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from app.auth.state import AuthStateCache
from app.auth.storage import MemoryStore
from app.config import Settings
from lib.supabase_client import SupabaseClient


# =============================================================================
# Fakes
# =============================================================================

class FakeAPIError(Exception):
    """Shaped like postgrest's APIError: message + code attributes."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeQuery:
    """
    Chainable stand-in for a PostgREST builder.

    Every builder method records its call and returns self; execute()
    returns the canned data or raises the canned error.
    """

    def __init__(self, data=None, error: Exception | None = None):
        self.data = data
        self.error = error
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return method

    async def execute(self):
        self.calls.append(("execute", (), {}))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)

    def args_of(self, name: str) -> list[tuple]:
        return [args for called, args, _ in self.calls if called == name]

    def kwargs_of(self, name: str) -> list[dict]:
        return [kwargs for called, _, kwargs in self.calls if called == name]


class FakeSupabase:
    """
    Stand-in for supabase.AsyncClient.

    Queue responses per table with respond(); each table() call consumes
    the next one (the last is reused).
    """

    def __init__(self):
        self._responses: dict[str, list[FakeQuery]] = {}
        self._last: dict[str, FakeQuery] = {}
        self.issued: list[tuple[str, FakeQuery]] = []

        self.auth = MagicMock()
        self.auth.sign_up = AsyncMock(return_value=None)
        self.auth.sign_in_with_password = AsyncMock(return_value=None)
        self.auth.sign_out = AsyncMock(return_value=None)
        self.auth.get_session = AsyncMock(return_value=None)
        self.auth_subscription = MagicMock()
        self.auth.on_auth_state_change = MagicMock(return_value=self.auth_subscription)

        self.bucket = MagicMock()
        self.bucket.upload = AsyncMock(side_effect=lambda **kwargs: SimpleNamespace(path=kwargs["path"]))
        self.bucket.get_public_url = AsyncMock(
            side_effect=lambda path: f"https://test-project.supabase.co/storage/v1/object/public/resources/{path}"
        )
        self.storage = MagicMock()
        self.storage.from_ = MagicMock(return_value=self.bucket)

        self.realtime_channel = MagicMock()
        self.realtime_channel.subscribe = AsyncMock()
        self.channel = MagicMock(return_value=self.realtime_channel)
        self.remove_channel = AsyncMock()

    def respond(self, table: str, data=None, error: Exception | None = None) -> FakeQuery:
        query = FakeQuery(data=data, error=error)
        self._responses.setdefault(table, []).append(query)
        return query

    def table(self, name: str) -> FakeQuery:
        queue = self._responses.get(name)
        if queue:
            query = queue.pop(0)
            self._last[name] = query
        else:
            query = self._last.get(name) or FakeQuery(data=[])
        self.issued.append((name, query))
        return query

    def auth_callback(self):
        """The callback registered with on_auth_state_change."""
        return self.auth.on_auth_state_change.call_args[0][0]


def session_payload(user_id: str = "user-1", email: str = "nadia@eastdelta.edu.bd") -> dict:
    return {
        "access_token": "access-token",
        "refresh_token": "refresh-token",
        "token_type": "bearer",
        "expires_at": 1893456000,
        "user": {
            "id": user_id,
            "email": email,
            "user_metadata": {"full_name": "Nadia Rahman", "student_id": "EDU123456", "semester": "7"},
        },
    }


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def test_settings(tmp_path):
    """Settings with credentials, no upload delay and a temp cache path."""
    return Settings(
        SUPABASE_URL="https://test-project.supabase.co",
        SUPABASE_ANON_KEY="test-anon-key",
        MOCK_UPLOAD_DELAY_SECONDS=0,
        LOCAL_CACHE_PATH=tmp_path / "auth_cache.json",
        DOWNLOAD_DIR=tmp_path / "downloads",
    )


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def backend(test_settings, fake_supabase):
    return SupabaseClient(test_settings, client=fake_supabase)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
async def signed_in_auth(backend, fake_supabase, store):
    """An auth cache that started with a live session for user-1."""
    fake_supabase.auth.get_session.return_value = session_payload()
    auth = AuthStateCache(backend, store)
    await auth.start()
    yield auth
    await auth.shutdown()


@pytest.fixture
async def signed_out_auth(backend, store):
    auth = AuthStateCache(backend, store)
    await auth.start()
    yield auth
    await auth.shutdown()


@pytest.fixture
def sample_resource_row():
    """A resources row with joins, as PostgREST returns it."""
    return {
        "id": "res-1",
        "title": "Linear Algebra Notes",
        "description": "Chapters 1-4 with solved problems",
        "category_id": "cat-math",
        "file_type": "PDF",
        "file_url": "1718000000000-3f9a1c0b2d4e.pdf",
        "file_size": 2_400_000,
        "coin_price": 5,
        "uploader_id": "user-2",
        "download_count": 45,
        "is_approved": True,
        "is_active": True,
        "tags": ["Linear", "Algebra", "Notes"],
        "created_at": "2024-09-01T10:00:00Z",
        "updated_at": "2024-09-01T10:00:00Z",
        "categories": {"name": "Mathematics"},
        "user_profiles": {"full_name": "Tanvir Hasan", "student_id": "CSE20230012"},
    }


@pytest.fixture
def sample_categories():
    return [
        {"id": "cat-cs", "name": "Computer Science", "icon": "code", "color": "#2563EB", "is_active": True},
        {"id": "cat-math", "name": "Mathematics", "icon": "sigma", "color": "#10B981", "is_active": True},
    ]


@pytest.fixture
def sample_profile_row():
    return {
        "id": "user-1",
        "email": "nadia@eastdelta.edu.bd",
        "full_name": "Nadia Rahman",
        "student_id": "EDU123456",
        "semester": 7,
        "total_coins": 45,
        "coins_earned": 65,
        "coins_spent": 20,
        "uploaded_files_count": 8,
        "downloaded_files_count": 12,
        "profile_visible": True,
        "show_stats": True,
        "allow_messages": True,
        "created_at": "2024-09-01T10:00:00Z",
        "updated_at": "2024-10-01T10:00:00Z",
    }
