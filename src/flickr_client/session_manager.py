"""Shared aiohttp session for the Flickr endpoints."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

import aiohttp

if TYPE_CHECKING:
    from .client import FlickrConfig


class SessionManager:
    """Owns the one ``aiohttp.ClientSession`` used for REST, OAuth and upload calls.

    Timeouts and proxy come from ``FlickrConfig``. An explicit proxy is passed
    per request by the transport; without one the session honors the
    ``HTTP(S)_PROXY`` environment variables.
    """

    def __init__(self, config: FlickrConfig) -> None:
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the session unless an open one already exists."""
        async with self._session_lock:
            if self._session is not None and not self._session.closed:
                return
            timeout = aiohttp.ClientTimeout(
                total=self._config.request_timeout_seconds,
                connect=self._config.connect_timeout_seconds,
            )
            self._session = aiohttp.ClientSession(timeout=timeout, trust_env=self._config.proxy_url is None)

    async def close(self) -> None:
        async with self._session_lock:
            if self._session is not None:
                await self._session.close()
                self._session = None

    def get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Flickr HTTP session is not open; call initialize() first")
        return self._session

    @property
    def proxy_url(self) -> Optional[str]:
        return self._config.proxy_url
