# =============================================================================
# app/main.py - Application Context
# =============================================================================
# Builds every collaborator the UI layer needs and owns their lifecycle.
# Nothing here is global: screens receive the AppContext they were given.
#
# Usage:
#   async with lifespan() as ctx:
#       await ctx.auth.sign_in(email, password)
#       result = await ctx.uploads.submit(request)
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from app.auth.models import AuthSnapshot, AuthStatus
from app.auth.state import AuthStateCache
from app.auth.storage import JsonFileStore, LocalStore
from app.config import Settings, get_settings
from app.exceptions import BreezException
from core.services import (
    DashboardService,
    DownloadService,
    LeaderboardService,
    ProfileService,
    RealtimeService,
    ResourceService,
    SettingsService,
    StorageService,
)
from core.services.realtime_service import updated_total_coins
from core.workflows import (
    BrowserDocumentOpener,
    DocumentOpener,
    DownloadWorkflow,
    SavingDocumentOpener,
    SimulatedUploadStrategy,
    StorageUploadStrategy,
    UploadWorkflow,
)
from lib.supabase_client import SupabaseClient, Unsubscribe
from lib.validation import ValidationResult, validate_signup_form

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Root logging setup; DEBUG when settings.DEBUG is on."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


class AppContext:
    """
    The wired-up client core.

    start() warms up auth and begins following the signed-in user's coin
    balance; shutdown() undoes it.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        backend: SupabaseClient | None = None,
        store: LocalStore | None = None,
        opener: DocumentOpener | None = None,
    ):
        self.settings = settings or get_settings()
        self.backend = backend or SupabaseClient(self.settings)
        self.store = store or JsonFileStore(self.settings.LOCAL_CACHE_PATH)

        self.auth = AuthStateCache(self.backend, self.store)

        # Access layer
        self.profiles = ProfileService(self.backend)
        self.resources = ResourceService(self.backend)
        self.downloads = DownloadService(self.backend)
        self.leaderboard = LeaderboardService(self.backend)
        self.user_settings = SettingsService(self.backend)
        self.storage = StorageService(self.backend)
        self.realtime = RealtimeService(self.backend)
        self.dashboard = DashboardService(
            self.profiles,
            self.resources,
            self.downloads,
            self.leaderboard,
            transactions_limit=self.settings.TRANSACTIONS_LIMIT,
            leaderboard_limit=self.settings.LEADERBOARD_LIMIT,
        )

        # Workflows
        self.uploads = UploadWorkflow(
            self.auth,
            self.resources,
            storage_strategy=StorageUploadStrategy(self.storage),
            simulated_strategy=SimulatedUploadStrategy(self.settings.MOCK_UPLOAD_DELAY_SECONDS),
        )
        self.download_flow = DownloadWorkflow(
            self.auth,
            self.downloads,
            self.profiles,
            self.storage,
            opener=opener or self._default_opener(),
        )

        self._unsubscribe_auth = None
        self._unsubscribe_profile: Unsubscribe | None = None
        self._watched_user_id: str | None = None
        self._tasks: set[asyncio.Task] = set()
        self._follow_lock = asyncio.Lock()

    def _default_opener(self) -> DocumentOpener:
        if self.settings.DOWNLOAD_MODE == "save":
            return SavingDocumentOpener(self.settings.DOWNLOAD_DIR)
        return BrowserDocumentOpener()

    async def start(self) -> None:
        logger.info(f"Starting Breez client in {self.settings.ENVIRONMENT} mode")
        if not self.settings.has_supabase_credentials:
            logger.warning("Supabase credentials are not set; running from the local cache only")
        await self.auth.start()
        self._unsubscribe_auth = self.auth.subscribe(self._on_auth_change)

    async def shutdown(self) -> None:
        logger.info("Shutting down Breez client")
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._stop_watching_profile()
        await self.auth.shutdown()

    def validate_signup(
        self,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
        student_id: str | None,
        semester: str | int | None,
    ) -> ValidationResult:
        """Sign-up form checks against the configured institution domain."""
        return validate_signup_form(
            email,
            password,
            confirm_password,
            student_id,
            semester,
            domain=self.settings.INSTITUTION_EMAIL_DOMAIN,
        )

    # -------------------------------------------------------------------------
    # Balance tracking
    # -------------------------------------------------------------------------

    def _on_auth_change(self, snapshot: AuthSnapshot) -> None:
        user_id = snapshot.user.id if snapshot.is_authenticated else None
        if snapshot.status == AuthStatus.LOADING or user_id == self._watched_user_id:
            return
        # Set before the task runs so repeat events for the same user are ignored
        self._watched_user_id = user_id
        task = asyncio.get_running_loop().create_task(self._follow_user(user_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _follow_user(self, user_id: str | None) -> None:
        """
        Point balance tracking at `user_id` (None when signed out).

        Follow tasks run one at a time; a task whose user is no longer the
        watched one does nothing, and a channel opened for a user who left
        meanwhile is removed again.
        """
        async with self._follow_lock:
            if user_id != self._watched_user_id:
                return
            await self._stop_watching_profile()
            await self.download_flow.refresh_balance()
            if user_id is None:
                return
            try:
                unsubscribe = await self.realtime.subscribe_to_user_profile(
                    user_id, self._on_profile_change
                )
            except BreezException as e:
                logger.warning(f"Realtime profile updates unavailable: {e}")
                return

            self._unsubscribe_profile = unsubscribe
            if user_id != self._watched_user_id:
                logger.debug(f"User {user_id} signed out while subscribing; removing channel")
                await self._stop_watching_profile()

    def _on_profile_change(self, payload: dict) -> None:
        if self._unsubscribe_profile is None:
            return
        total = updated_total_coins(payload)
        if total is not None:
            logger.debug(f"Balance pushed from backend: {total}")
            self.download_flow.set_balance(total)

    async def _stop_watching_profile(self) -> None:
        if self._unsubscribe_profile is None:
            return
        unsubscribe, self._unsubscribe_profile = self._unsubscribe_profile, None
        try:
            await unsubscribe()
        except Exception as e:
            logger.warning(f"Failed to remove profile channel: {e}")


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
    backend: SupabaseClient | None = None,
    store: LocalStore | None = None,
    opener: DocumentOpener | None = None,
) -> AsyncIterator[AppContext]:
    """
    Build, start and finally shut down an AppContext.

    Logging is configured here, once, for the process.
    """
    ctx = AppContext(settings=settings, backend=backend, store=store, opener=opener)
    configure_logging(ctx.settings)
    await ctx.start()
    try:
        yield ctx
    finally:
        await ctx.shutdown()
