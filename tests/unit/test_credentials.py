"""Tests for credentials, the credential holder and the stores."""

import stat
import threading
from unittest.mock import AsyncMock, MagicMock, patch

import orjson
import pytest

from flickr_client.config import ConfigurationError
from flickr_client.credentials import (
    DEFAULT_REDIS_KEY,
    Credential,
    CredentialHolder,
    InMemoryCredentialStore,
    JsonFileCredentialStore,
    RedisCredentialStore,
    StoredCredential,
)


class TestCredential:
    def test_rejects_empty_token(self):
        with pytest.raises(ValueError):
            Credential("", "secret")

    def test_repr_hides_secret(self):
        text = repr(Credential("72157-abcdef", "very-secret"))
        assert "very-secret" not in text
        assert "abcdef" not in text


class TestCredentialHolder:
    def test_starts_unauthorized(self):
        holder = CredentialHolder()
        assert holder.current is None
        assert holder.user_id is None
        assert not holder.is_authorized

    def test_replace_swaps_credential_and_user(self):
        holder = CredentialHolder(Credential("old", "s1"), "1@N01")
        replacement = Credential("new", "s2")

        holder.replace(replacement, "2@N02")

        assert holder.current is replacement
        assert holder.user_id == "2@N02"

    def test_clear(self):
        holder = CredentialHolder(Credential("tok", "sec"), "1@N01")
        holder.clear()
        assert not holder.is_authorized
        assert holder.user_id is None

    def test_concurrent_readers_see_whole_credentials(self):
        first = Credential("a", "a-secret")
        second = Credential("b", "b-secret")
        holder = CredentialHolder(first, "a-user")
        seen = []

        def reader():
            for _ in range(1000):
                seen.append(holder.current)

        def writer():
            for index in range(1000):
                holder.replace(second if index % 2 else first, "user")

        threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert set(seen) <= {first, second}


@pytest.mark.asyncio
async def test_in_memory_store_roundtrip():
    store = InMemoryCredentialStore()
    assert await store.load_record() is None

    await store.save(Credential("tok", "sec"), "12@N01")
    assert await store.load_record() == StoredCredential(Credential("tok", "sec"), "12@N01")

    await store.clear()
    assert await store.load_record() is None


class TestJsonFileCredentialStore:
    @pytest.mark.asyncio
    async def test_missing_file_loads_nothing(self, tmp_path):
        store = JsonFileCredentialStore(tmp_path / "absent.json")
        assert await store.load_record() is None

    @pytest.mark.asyncio
    async def test_save_writes_single_private_document(self, tmp_path):
        path = tmp_path / "nested" / "credentials.json"
        store = JsonFileCredentialStore(path)

        await store.save(Credential("tok", "sec"), "12@N01")

        assert orjson.loads(path.read_bytes()) == {"token": "tok", "token_secret": "sec", "user_id": "12@N01"}
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert [entry.name for entry in path.parent.iterdir()] == ["credentials.json"]

    @pytest.mark.asyncio
    async def test_save_replaces_previous_credential(self, tmp_path):
        store = JsonFileCredentialStore(tmp_path / "credentials.json")
        await store.save(Credential("old", "old-secret"), "1@N01")

        await store.save(Credential("new", "new-secret"), "2@N02")

        assert await store.load_record() == StoredCredential(Credential("new", "new-secret"), "2@N02")

    @pytest.mark.asyncio
    async def test_load_record_reads_file_once(self, tmp_path):
        store = JsonFileCredentialStore(tmp_path / "credentials.json")
        await store.save(Credential("tok", "sec"), "12@N01")

        with patch.object(store, "_read", wraps=store._read) as read:
            stored = await store.load_record()

        assert read.call_count == 1
        assert stored.credential == Credential("tok", "sec")
        assert stored.user_id == "12@N01"

    @pytest.mark.asyncio
    async def test_clear_removes_file(self, tmp_path):
        path = tmp_path / "credentials.json"
        store = JsonFileCredentialStore(path)
        await store.save(Credential("tok", "sec"), "12@N01")

        await store.clear()
        await store.clear()

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_file_raises_configuration_error(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            await JsonFileCredentialStore(path).load_record()

    @pytest.mark.asyncio
    async def test_record_without_secret_raises(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_bytes(orjson.dumps({"token": "tok"}))

        with pytest.raises(ConfigurationError):
            await JsonFileCredentialStore(path).load_record()


class TestRedisCredentialStore:
    @pytest.fixture
    def pipeline(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[1, 3])
        pipe.__aenter__ = AsyncMock(return_value=pipe)
        pipe.__aexit__ = AsyncMock(return_value=None)
        return pipe

    @pytest.fixture
    def redis(self, pipeline):
        client = MagicMock()
        client.hgetall = AsyncMock(return_value={})
        client.delete = AsyncMock(return_value=1)
        client.pipeline.return_value = pipeline
        return client

    @pytest.mark.asyncio
    async def test_load_decodes_bytes(self, redis):
        redis.hgetall.return_value = {b"token": b"tok", b"token_secret": b"sec", b"user_id": b"12@N01"}
        store = RedisCredentialStore(redis)

        assert await store.load_record() == StoredCredential(Credential("tok", "sec"), "12@N01")
        redis.hgetall.assert_awaited_with(DEFAULT_REDIS_KEY)

    @pytest.mark.asyncio
    async def test_load_empty_hash(self, redis):
        store = RedisCredentialStore(redis, key="custom")
        assert await store.load_record() is None

    @pytest.mark.asyncio
    async def test_save_uses_transaction(self, redis, pipeline):
        store = RedisCredentialStore(redis, key="custom")

        await store.save(Credential("tok", "sec"), "12@N01")

        redis.pipeline.assert_called_once_with(transaction=True)
        pipeline.delete.assert_called_once_with("custom")
        pipeline.hset.assert_called_once_with(
            "custom", mapping={"token": "tok", "token_secret": "sec", "user_id": "12@N01"}
        )
        pipeline.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_clear_deletes_key(self, redis):
        await RedisCredentialStore(redis, key="custom").clear()
        redis.delete.assert_awaited_once_with("custom")


@pytest.mark.asyncio
async def test_redis_store_replaces_whole_record(fake_redis):
    store = RedisCredentialStore(fake_redis)
    await store.save(Credential("old", "old-secret"), "1@N01")

    await store.save(Credential("new", "new-secret"), "2@N02")

    assert fake_redis.dump_hash(DEFAULT_REDIS_KEY) == {
        "token": "new",
        "token_secret": "new-secret",
        "user_id": "2@N02",
    }
    assert (await store.load_record()).credential == Credential("new", "new-secret")

    await store.clear()
    assert await store.load_record() is None
