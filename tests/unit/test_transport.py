"""Tests for the HTTP transport."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from flickr_client.exceptions import AuthorizationError, TransportError
from flickr_client.request_builder import SignedRequest, UploadFile
from flickr_client.transport import RawResponse, Transport, build_request_kwargs

REST_URL = "https://api.flickr.com/services/rest/"


def _request(method="GET", files=()):
    return SignedRequest(
        http_method=method,
        url=REST_URL,
        parameters={"method": "flickr.test.echo", "oauth_signature": "sig"},
        signature="sig",
        files=files,
    )


def _session_returning(status=200, body='{"stat":"ok"}', error=None):
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.text = AsyncMock(return_value=body)

    mock_cm = MagicMock()
    if error is not None:
        mock_cm.__aenter__ = AsyncMock(side_effect=error)
    else:
        mock_cm.__aenter__ = AsyncMock(return_value=mock_response)
    mock_cm.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.request.return_value = mock_cm
    return mock_session


@pytest.fixture
def session_manager():
    manager = MagicMock()
    manager.initialize = AsyncMock()
    manager.proxy_url = None
    return manager


class TestBuildRequestKwargs:
    def test_get_uses_query_string(self):
        kwargs = build_request_kwargs(_request("GET"))
        assert kwargs == {"params": {"method": "flickr.test.echo", "oauth_signature": "sig"}}

    def test_post_uses_form_body(self):
        kwargs = build_request_kwargs(_request("POST"))
        assert kwargs == {"data": {"method": "flickr.test.echo", "oauth_signature": "sig"}}

    def test_post_with_files_uses_multipart(self):
        upload = UploadFile("photo", "cat.jpg", b"\xff\xd8", "image/jpeg")
        kwargs = build_request_kwargs(_request("POST", (upload,)))
        assert isinstance(kwargs["data"], aiohttp.FormData)


@pytest.mark.asyncio
async def test_execute_returns_raw_response(session_manager):
    session = _session_returning(body='{"stat":"ok","user":{}}')
    session_manager.get_session.return_value = session

    result = await Transport(session_manager).execute(_request())

    assert result == RawResponse(status=200, body='{"stat":"ok","user":{}}', url=REST_URL)
    session_manager.initialize.assert_awaited_once()
    method, url = session.request.call_args.args
    assert (method, url) == ("GET", REST_URL)
    assert "proxy" not in session.request.call_args.kwargs


@pytest.mark.asyncio
async def test_execute_passes_proxy(session_manager):
    session = _session_returning()
    session_manager.get_session.return_value = session
    session_manager.proxy_url = "http://proxy.local:3128"

    await Transport(session_manager).execute(_request())

    assert session.request.call_args.kwargs["proxy"] == "http://proxy.local:3128"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError(), OSError("unreachable")],
)
async def test_network_failures_become_transport_errors(session_manager, error):
    session = _session_returning(error=error)
    session_manager.get_session.return_value = session

    with pytest.raises(TransportError) as exc_info:
        await Transport(session_manager).execute(_request())

    assert exc_info.value.__cause__ is error
    assert session.request.call_count == 1


@pytest.mark.asyncio
async def test_unauthorized_status_is_authorization_error(session_manager):
    session_manager.get_session.return_value = _session_returning(401, "oauth_problem=signature_invalid")

    with pytest.raises(AuthorizationError) as exc_info:
        await Transport(session_manager).execute(_request())

    assert exc_info.value.status == 401


@pytest.mark.asyncio
async def test_server_error_with_html_is_transport_error(session_manager):
    session_manager.get_session.return_value = _session_returning(502, "<html>Bad gateway</html>")

    with pytest.raises(TransportError) as exc_info:
        await Transport(session_manager).execute(_request())

    assert exc_info.value.status == 502


@pytest.mark.asyncio
async def test_error_status_with_json_body_is_returned(session_manager):
    body = '{"stat":"fail","code":105,"message":"Service currently unavailable"}'
    session_manager.get_session.return_value = _session_returning(503, body)

    result = await Transport(session_manager).execute(_request())

    assert result.status == 503
    assert result.body == body
