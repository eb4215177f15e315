"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from flickr_client.config import get_flickr_settings, runtime


@pytest.fixture(autouse=True)
def isolated_dotenv(monkeypatch):
    """Keep developer .env files out of tests and drop cached settings."""
    monkeypatch.setattr(runtime, "_DEFAULT_VALUES", {})
    get_flickr_settings.cache_clear()
    yield
    get_flickr_settings.cache_clear()


class FakeRedis:
    """In-memory Redis mock covering the hash commands the credential store uses."""

    def __init__(self):
        self._hashes: dict[str, dict[str, str]] = {}

    async def hset(self, key: str, mapping: dict[str, str] | None = None, **kwargs: Any) -> int:
        """Set hash fields from ``mapping`` or keyword arguments."""
        update_map = mapping if mapping is not None else kwargs
        current = self._hashes.setdefault(key, {})
        added = sum(1 for k in update_map if k not in current)
        current.update(update_map)
        return added

    async def hgetall(self, key: str) -> dict[str, str]:
        """Get all fields in a hash."""
        return self._hashes.get(key, {}).copy()

    async def delete(self, *keys: str) -> int:
        """Delete keys."""
        deleted = 0
        for k in keys:
            if k in self._hashes:
                del self._hashes[k]
                deleted += 1
        return deleted

    def pipeline(self, transaction: bool = True):
        """Create a pipeline context."""
        return FakeRedisPipeline(self, transaction=transaction)

    def dump_hash(self, key: str) -> dict[str, str]:
        """Dump contents of a hash (test helper)."""
        return self._hashes.get(key, {}).copy()


class FakeRedisPipeline:
    """Redis pipeline mock; queued commands run on ``execute``."""

    def __init__(self, fake_redis: FakeRedis, transaction: bool = True):
        self.fake_redis = fake_redis
        self.transaction = transaction
        self.commands: list[tuple[str, tuple, dict]] = []

    def hset(self, key: str, mapping: dict[str, str] | None = None, **kwargs: Any) -> "FakeRedisPipeline":
        self.commands.append(("hset", (key,), {"mapping": mapping, **kwargs}))
        return self

    def delete(self, *keys: str) -> "FakeRedisPipeline":
        self.commands.append(("delete", keys, {}))
        return self

    async def execute(self) -> list[Any]:
        """Execute all queued commands in order."""
        results = []
        for cmd, args, kwargs in self.commands:
            results.append(await getattr(self.fake_redis, cmd)(*args, **kwargs))
        self.commands.clear()
        return results

    async def __aenter__(self) -> "FakeRedisPipeline":
        return self

    async def __aexit__(self, *args):
        self.commands.clear()


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Provide a fake Redis instance."""
    return FakeRedis()
