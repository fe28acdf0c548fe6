# =============================================================================
# tests/test_local_store.py - Local Key-Value Store Tests
# =============================================================================

import pytest

from app.auth.storage import JsonFileStore, MemoryStore, StorageKeys


class TestMemoryStore:

    @pytest.mark.asyncio
    async def test_set_get_remove(self):
        store = MemoryStore()
        await store.set(StorageKeys.USER_DATA, '{"id": "u"}')
        assert await store.get(StorageKeys.USER_DATA) == '{"id": "u"}'

        await store.multi_remove(StorageKeys.ALL)
        assert await store.get(StorageKeys.USER_DATA) is None

    @pytest.mark.asyncio
    async def test_missing_key(self):
        assert await MemoryStore().get("nope") is None


class TestJsonFileStore:

    @pytest.mark.asyncio
    async def test_survives_new_instance(self, tmp_path):
        path = tmp_path / "cache" / "auth.json"
        await JsonFileStore(path).set(StorageKeys.AUTH_STATE, "authenticated")

        assert path.exists()
        assert await JsonFileStore(path).get(StorageKeys.AUTH_STATE) == "authenticated"

    @pytest.mark.asyncio
    async def test_multi_remove_keeps_other_keys(self, tmp_path):
        store = JsonFileStore(tmp_path / "auth.json")
        await store.set(StorageKeys.USER_DATA, "{}")
        await store.set("other", "kept")

        await store.multi_remove(StorageKeys.ALL)

        assert await store.get(StorageKeys.USER_DATA) is None
        assert await store.get("other") == "kept"

    @pytest.mark.asyncio
    async def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "auth.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        assert await store.get(StorageKeys.USER_DATA) is None
        await store.set(StorageKeys.USER_DATA, "{}")
        assert await store.get(StorageKeys.USER_DATA) == "{}"

    @pytest.mark.asyncio
    async def test_no_temp_file_left(self, tmp_path):
        store = JsonFileStore(tmp_path / "auth.json")
        await store.set("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["auth.json"]
