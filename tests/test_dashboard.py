# =============================================================================
# tests/test_dashboard.py - Dashboard / Leaderboard Assembly Tests
# =============================================================================

import pytest

from core.services import (
    DashboardService,
    DownloadService,
    LeaderboardService,
    ProfileService,
    ResourceService,
)
from tests.conftest import FakeAPIError


@pytest.fixture
def dashboard(backend):
    return DashboardService(
        ProfileService(backend),
        ResourceService(backend),
        DownloadService(backend),
        LeaderboardService(backend),
        transactions_limit=5,
        leaderboard_limit=3,
    )


ACHIEVEMENTS = [
    {"id": "ach-1", "name": "First Upload", "requirement_type": "uploads", "requirement_value": 1},
    {"id": "ach-2", "name": "Coin Collector", "requirement_type": "coins", "requirement_value": 100},
]


class TestLoadDashboard:

    @pytest.mark.asyncio
    async def test_joins_all_sections(self, dashboard, fake_supabase, sample_profile_row, sample_resource_row):
        fake_supabase.respond("user_profiles", data=sample_profile_row)
        fake_supabase.respond("resources", data=[sample_resource_row])
        fake_supabase.respond("downloads", data=[
            {"id": "dl-1", "resource_id": "res-9", "downloader_id": "user-1", "coins_spent": 3},
        ])
        transactions = fake_supabase.respond("coin_transactions", data=[
            {"id": "t-1", "user_id": "user-1", "transaction_type": "earned", "amount": 5},
            {"id": "t-2", "user_id": "user-1", "transaction_type": "spent", "amount": 3},
        ])

        data = await dashboard.load_dashboard("user-1")

        assert data.profile.total_coins == 45
        assert [r.id for r in data.uploads] == ["res-1"]
        assert [d.id for d in data.downloads] == ["dl-1"]
        assert data.net_coin_change == 2
        assert transactions.args_of("limit") == [(5,)]

    @pytest.mark.asyncio
    async def test_one_failed_query_keeps_the_rest(self, dashboard, fake_supabase, sample_profile_row):
        fake_supabase.respond("user_profiles", data=sample_profile_row)
        fake_supabase.respond("resources", error=FakeAPIError("timeout"))

        data = await dashboard.load_dashboard("user-1")

        assert data.profile is not None
        assert data.uploads == []

    @pytest.mark.asyncio
    async def test_balance_mismatch_logged(self, dashboard, fake_supabase, sample_profile_row, caplog):
        fake_supabase.respond("user_profiles", data={**sample_profile_row, "total_coins": 99})

        await dashboard.load_dashboard("user-1")

        assert "balance mismatch" in caplog.text


class TestLoadLeaderboard:

    @pytest.mark.asyncio
    async def test_signed_in_viewer(self, dashboard, fake_supabase):
        entries = fake_supabase.respond("leaderboard", data=[
            {"id": "user-2", "full_name": "Tanvir", "total_coins": 90, "rank": 1},
            {"id": "user-1", "full_name": "Nadia", "total_coins": 45, "rank": 2},
        ])
        fake_supabase.respond("leaderboard", data={"rank": 2})
        fake_supabase.respond("achievements", data=ACHIEVEMENTS)
        fake_supabase.respond("user_achievements", data=[
            {"id": "ua-1", "user_id": "user-1", "achievement_id": "ach-1"},
        ])

        data = await dashboard.load_leaderboard("user-1")

        assert [e.id for e in data.entries] == ["user-2", "user-1"]
        assert data.user_rank == 2
        assert [(s.achievement.name, s.earned) for s in data.achievements] == [
            ("First Upload", True),
            ("Coin Collector", False),
        ]
        assert data.earned_count == 1
        assert entries.args_of("limit") == [(3,)]

    @pytest.mark.asyncio
    async def test_anonymous_viewer(self, dashboard, fake_supabase):
        fake_supabase.respond("leaderboard", data=[])
        fake_supabase.respond("achievements", data=ACHIEVEMENTS)

        data = await dashboard.load_leaderboard()

        assert data.user_rank == 0
        assert data.earned_count == 0
        assert len(data.achievements) == 2
        assert not any(name == "user_achievements" for name, _ in fake_supabase.issued)


class TestUnreadableRows:

    @pytest.mark.asyncio
    async def test_bad_leaderboard_row_keeps_other_sections(self, dashboard, fake_supabase):
        fake_supabase.respond("leaderboard", data=[{"id": "u", "rank": None}])
        fake_supabase.respond("leaderboard", data={"rank": 2})
        fake_supabase.respond("achievements", data=ACHIEVEMENTS)
        fake_supabase.respond("user_achievements", data=[])

        data = await dashboard.load_leaderboard("user-1")

        assert data.entries == []
        assert data.user_rank == 2
        assert len(data.achievements) == 2

    @pytest.mark.asyncio
    async def test_bad_transaction_row_keeps_profile(self, dashboard, fake_supabase, sample_profile_row):
        fake_supabase.respond("user_profiles", data=sample_profile_row)
        fake_supabase.respond("coin_transactions", data=[
            {"id": "t-1", "user_id": "user-1", "transaction_type": "gift", "amount": 5},
        ])

        data = await dashboard.load_dashboard("user-1")

        assert data.profile.total_coins == 45
        assert data.transactions == []
