# =============================================================================
# tests/test_app_context.py - Application Wiring Tests
# =============================================================================

import asyncio

import pytest

from app.main import AppContext, lifespan
from core.workflows import BrowserDocumentOpener, SavingDocumentOpener
from tests.conftest import session_payload


async def settle(ctx: AppContext) -> None:
    """Wait for background balance tasks started by auth changes."""
    while ctx._tasks:
        await asyncio.gather(*list(ctx._tasks))


@pytest.fixture
def signed_in_backend(fake_supabase, backend):
    fake_supabase.auth.get_session.return_value = session_payload()
    fake_supabase.respond("user_profiles", data={"total_coins": 45})
    return backend


class TestAppContext:

    @pytest.mark.asyncio
    async def test_start_follows_signed_in_user(self, test_settings, signed_in_backend, store, fake_supabase):
        ctx = AppContext(settings=test_settings, backend=signed_in_backend, store=store)
        await ctx.start()
        await settle(ctx)

        assert ctx.auth.user.id == "user-1"
        assert ctx.download_flow.balance == 45
        kwargs = fake_supabase.realtime_channel.on_postgres_changes.call_args.kwargs
        assert kwargs["filter"] == "id=eq.user-1"

        await ctx.shutdown()

    @pytest.mark.asyncio
    async def test_realtime_push_updates_balance(self, test_settings, signed_in_backend, store, fake_supabase):
        ctx = AppContext(settings=test_settings, backend=signed_in_backend, store=store)
        await ctx.start()
        await settle(ctx)

        on_change = fake_supabase.realtime_channel.on_postgres_changes.call_args.kwargs["callback"]
        on_change({"new": {"id": "user-1", "total_coins": 30}})

        assert ctx.download_flow.balance == 30
        await ctx.shutdown()

    @pytest.mark.asyncio
    async def test_sign_out_stops_following(self, test_settings, signed_in_backend, store, fake_supabase):
        ctx = AppContext(settings=test_settings, backend=signed_in_backend, store=store)
        await ctx.start()
        await settle(ctx)

        await ctx.auth.sign_out()
        await settle(ctx)

        fake_supabase.remove_channel.assert_awaited_once_with(fake_supabase.realtime_channel)
        assert ctx.download_flow.balance == 0
        await ctx.shutdown()

    @pytest.mark.asyncio
    async def test_services_share_backend(self, test_settings, backend, store):
        ctx = AppContext(settings=test_settings, backend=backend, store=store)

        assert ctx.resources.backend is backend
        assert ctx.uploads.resources is ctx.resources
        assert ctx.download_flow.auth is ctx.auth
        assert ctx.dashboard.leaderboard_limit == test_settings.LEADERBOARD_LIMIT

    def test_browser_opener_by_default(self, test_settings, backend, store):
        ctx = AppContext(settings=test_settings, backend=backend, store=store)

        assert isinstance(ctx.download_flow.opener, BrowserDocumentOpener)

    def test_save_mode_writes_into_download_dir(self, test_settings, backend, store):
        settings = test_settings.model_copy(update={"DOWNLOAD_MODE": "save"})
        ctx = AppContext(settings=settings, backend=backend, store=store)

        opener = ctx.download_flow.opener
        assert isinstance(opener, SavingDocumentOpener)
        assert opener.directory == test_settings.DOWNLOAD_DIR

    def test_explicit_opener_wins(self, test_settings, backend, store):
        settings = test_settings.model_copy(update={"DOWNLOAD_MODE": "save"})
        opener = BrowserDocumentOpener()
        ctx = AppContext(settings=settings, backend=backend, store=store, opener=opener)

        assert ctx.download_flow.opener is opener


class TestLifespan:

    @pytest.mark.asyncio
    async def test_shutdown_on_exit(self, test_settings, backend, store, fake_supabase):
        async with lifespan(settings=test_settings, backend=backend, store=store) as ctx:
            assert not ctx.auth.state.loading

        fake_supabase.auth_subscription.unsubscribe.assert_called_once()


class TestValidateSignup:

    def test_uses_configured_domain(self, tmp_path, backend, store):
        from app.config import Settings

        settings = Settings(INSTITUTION_EMAIL_DOMAIN="uni.example.edu", LOCAL_CACHE_PATH=tmp_path / "c.json")
        ctx = AppContext(settings=settings, backend=backend, store=store)

        assert ctx.validate_signup("a@uni.example.edu", "secret1", "secret1", "EDU1234", "3").is_valid
        assert not ctx.validate_signup("a@eastdelta.edu.bd", "secret1", "secret1", "EDU1234", "3").is_valid


class TestFollowUser:
    """Balance tracking across bursts of auth events."""

    @pytest.fixture
    def anonymous_ctx(self, test_settings, backend, store, fake_supabase):
        fake_supabase.respond("user_profiles", data={"total_coins": 45})
        return AppContext(settings=test_settings, backend=backend, store=store)

    @pytest.mark.asyncio
    async def test_repeat_events_open_one_channel(self, anonymous_ctx, fake_supabase):
        async def slow_subscribe(*args, **kwargs):
            await asyncio.sleep(0.01)

        fake_supabase.realtime_channel.subscribe.side_effect = slow_subscribe
        await anonymous_ctx.start()

        on_auth = fake_supabase.auth_callback()
        on_auth("SIGNED_IN", session_payload())
        on_auth("TOKEN_REFRESHED", session_payload())
        await settle(anonymous_ctx)
        await anonymous_ctx.shutdown()

        assert fake_supabase.channel.call_count == 1
        assert fake_supabase.remove_channel.await_count == 1

    @pytest.mark.asyncio
    async def test_sign_out_while_subscribing(self, anonymous_ctx, fake_supabase):
        subscribing = asyncio.Event()
        release = asyncio.Event()

        async def slow_subscribe(*args, **kwargs):
            subscribing.set()
            await release.wait()

        fake_supabase.realtime_channel.subscribe.side_effect = slow_subscribe
        await anonymous_ctx.start()

        on_auth = fake_supabase.auth_callback()
        on_auth("SIGNED_IN", session_payload())
        await subscribing.wait()
        on_auth("SIGNED_OUT", None)
        release.set()
        await settle(anonymous_ctx)

        fake_supabase.remove_channel.assert_awaited_once_with(fake_supabase.realtime_channel)
        assert anonymous_ctx.download_flow.balance == 0

        # A late push for the departed user is ignored
        on_change = fake_supabase.realtime_channel.on_postgres_changes.call_args.kwargs["callback"]
        on_change({"new": {"id": "user-1", "total_coins": 99}})
        assert anonymous_ctx.download_flow.balance == 0

        await anonymous_ctx.shutdown()
        assert fake_supabase.remove_channel.await_count == 1

    @pytest.mark.asyncio
    async def test_switching_users_moves_channel(self, anonymous_ctx, fake_supabase):
        await anonymous_ctx.start()

        on_auth = fake_supabase.auth_callback()
        on_auth("SIGNED_IN", session_payload(user_id="user-1"))
        await settle(anonymous_ctx)
        on_auth("SIGNED_IN", session_payload(user_id="user-2"))
        await settle(anonymous_ctx)

        filters = [c.kwargs["filter"] for c in fake_supabase.realtime_channel.on_postgres_changes.call_args_list]
        assert filters == ["id=eq.user-1", "id=eq.user-2"]
        assert fake_supabase.remove_channel.await_count == 1

        await anonymous_ctx.shutdown()
        assert fake_supabase.remove_channel.await_count == 2
