"""OAuth credentials, the shared credential holder and persistent stores."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple, Optional, Protocol, Tuple

import orjson

from .config import ConfigurationError

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)

DEFAULT_REDIS_KEY = "flickr:access_credential"


@dataclass(frozen=True)
class Credential:
    """An OAuth token and its secret."""

    token: str
    token_secret: str

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("Credential token must not be empty")

    def __repr__(self) -> str:
        return f"Credential(token={self.token[:4]}..., token_secret=***)"


class StoredCredential(NamedTuple):
    """A persisted access credential and the user it was confirmed against."""

    credential: Credential
    user_id: Optional[str]


class CredentialHolder:
    """Shared, swappable reference to the current access credential.

    Readers take a single attribute read and always see either the previous or
    the replacement credential. Writers serialize on a lock and replace the
    reference; the ``Credential`` itself is immutable.
    """

    def __init__(self, credential: Optional[Credential] = None, user_id: Optional[str] = None) -> None:
        self._state: Tuple[Optional[Credential], Optional[str]] = (credential, user_id)
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[Credential]:
        return self._state[0]

    @property
    def user_id(self) -> Optional[str]:
        return self._state[1]

    @property
    def is_authorized(self) -> bool:
        return self._state[0] is not None

    def replace(self, credential: Optional[Credential], user_id: Optional[str] = None) -> None:
        with self._lock:
            self._state = (credential, user_id)

    def clear(self) -> None:
        self.replace(None, None)


class CredentialStore(Protocol):
    """Durable storage for the single long-lived access credential."""

    async def load_record(self) -> Optional[StoredCredential]:
        """Credential and user id from one read; None when nothing is stored."""
        ...

    async def save(self, credential: Credential, user_id: str) -> None: ...

    async def clear(self) -> None: ...


class InMemoryCredentialStore:
    """Process-local store, mainly for tests and short-lived scripts."""

    def __init__(self, credential: Optional[Credential] = None, user_id: Optional[str] = None) -> None:
        self._record: Tuple[Optional[Credential], Optional[str]] = (credential, user_id)

    async def load_record(self) -> Optional[StoredCredential]:
        credential, user_id = self._record
        return StoredCredential(credential, user_id) if credential is not None else None

    async def save(self, credential: Credential, user_id: str) -> None:
        self._record = (credential, user_id)

    async def clear(self) -> None:
        self._record = (None, None)


class JsonFileCredentialStore:
    """Stores the credential and user id in one JSON document.

    Writes go to a temporary file in the same directory which is then renamed
    over the target, so a reader never sees a half-written document.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def load_record(self) -> Optional[StoredCredential]:
        record = await asyncio.to_thread(self._read)
        return _stored_from_record(record, source=str(self._path))

    async def save(self, credential: Credential, user_id: str) -> None:
        record = {
            "token": credential.token,
            "token_secret": credential.token_secret,
            "user_id": user_id,
        }
        await asyncio.to_thread(self._write, orjson.dumps(record))
        logger.info("Saved Flickr access credential for user %s to %s", user_id, self._path)

    async def clear(self) -> None:
        await asyncio.to_thread(self._remove)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            payload = orjson.loads(self._path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            raise ConfigurationError(f"Failed to read Flickr credentials from {self._path}") from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(f"Flickr credentials at {self._path} must be a JSON object")
        return payload

    def _write(self, data: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _remove(self) -> None:
        self._path.unlink(missing_ok=True)


class RedisCredentialStore:
    """Stores the credential and user id as a single Redis hash."""

    def __init__(self, redis: "Redis", key: str = DEFAULT_REDIS_KEY) -> None:
        self._redis = redis
        self._key = key

    async def load_record(self) -> Optional[StoredCredential]:
        record = _decode_hash(await self._redis.hgetall(self._key))
        return _stored_from_record(record, source=f"redis:{self._key}")

    async def save(self, credential: Credential, user_id: str) -> None:
        mapping = {
            "token": credential.token,
            "token_secret": credential.token_secret,
            "user_id": user_id,
        }
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(self._key)
            pipe.hset(self._key, mapping=mapping)
            await pipe.execute()

    async def clear(self) -> None:
        await self._redis.delete(self._key)


def _decode_hash(raw: dict) -> dict:
    decoded = {}
    for key, value in (raw or {}).items():
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        decoded[key] = value
    return decoded


def _stored_from_record(record: dict, *, source: str) -> Optional[StoredCredential]:
    token = record.get("token")
    if not token:
        return None
    token_secret = record.get("token_secret")
    if token_secret is None:
        raise ConfigurationError(f"Stored Flickr credential at {source} is missing token_secret")
    user_id = record.get("user_id")
    return StoredCredential(
        Credential(token=str(token), token_secret=str(token_secret)),
        str(user_id) if user_id else None,
    )


__all__ = [
    "Credential",
    "CredentialHolder",
    "CredentialStore",
    "DEFAULT_REDIS_KEY",
    "InMemoryCredentialStore",
    "JsonFileCredentialStore",
    "RedisCredentialStore",
    "StoredCredential",
]
