"""HTTP transport for signed Flickr requests."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict

import aiohttp

from .exceptions import AuthorizationError, TransportError
from .request_builder import SignedRequest
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

HTTP_UNAUTHORIZED = 401
HTTP_ERROR_STATUS_THRESHOLD = 400

NETWORK_ERROR_TYPES = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)


@dataclass(frozen=True)
class RawResponse:
    status: int
    body: str
    url: str

    @property
    def looks_like_json(self) -> bool:
        return self.body.lstrip().startswith("{")


def build_request_kwargs(request: SignedRequest) -> Dict[str, Any]:
    """Place the signed parameters in the query string, form body or multipart body."""
    parameters = dict(request.parameters)
    if request.http_method == "GET":
        return {"params": parameters}
    if request.is_multipart:
        form = aiohttp.FormData()
        for key, value in parameters.items():
            form.add_field(key, value)
        for upload in request.files:
            form.add_field(
                upload.field,
                upload.content,
                filename=upload.filename,
                content_type=upload.content_type,
            )
        return {"data": form}
    return {"data": parameters}


class Transport:
    """Executes signed requests. Failures are classified, never retried."""

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager

    async def execute(self, request: SignedRequest) -> RawResponse:
        await self._session_manager.initialize()
        session = self._session_manager.get_session()
        request_kwargs = build_request_kwargs(request)
        proxy_url = self._session_manager.proxy_url
        if proxy_url:
            request_kwargs["proxy"] = proxy_url

        try:
            async with session.request(request.http_method, request.url, **request_kwargs) as response:
                body = await response.text()
                raw = RawResponse(status=response.status, body=body, url=request.url)
        except NETWORK_ERROR_TYPES as exc:
            logger.warning("Flickr %s %s failed: %s", request.http_method, request.url, type(exc).__name__)
            raise TransportError(
                f"Flickr request to {request.url} failed: {exc.__class__.__name__}: {exc}",
                url=request.url,
            ) from exc

        return _check_status(raw)


def _check_status(raw: RawResponse) -> RawResponse:
    if raw.status == HTTP_UNAUTHORIZED:
        raise AuthorizationError(
            f"Flickr rejected the request signature for {raw.url}: {raw.body[:200]}",
            status=raw.status,
            url=raw.url,
        )
    if raw.status >= HTTP_ERROR_STATUS_THRESHOLD and not raw.looks_like_json:
        raise TransportError(
            f"Flickr request to {raw.url} returned HTTP {raw.status}",
            status=raw.status,
            url=raw.url,
        )
    return raw


__all__ = ["NETWORK_ERROR_TYPES", "RawResponse", "Transport", "build_request_kwargs"]
