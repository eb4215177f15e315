"""Tests for the identity lookup."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from flickr_client.credentials import Credential
from flickr_client.entities import AuthenticatedIdentity
from flickr_client.services import AuthenticationOperations
from flickr_client.services.authentication import TEST_LOGIN_METHOD


@pytest.fixture
def client():
    mock_client = MagicMock()
    mock_client.invoke = AsyncMock(return_value=AuthenticatedIdentity("12@N01", "bees"))
    return mock_client


@pytest.mark.asyncio
async def test_test_login(client):
    identity = await AuthenticationOperations(client).test_login()

    assert identity.user_id == "12@N01"
    args, kwargs = client.invoke.call_args
    assert args == (TEST_LOGIN_METHOD,)
    assert kwargs["extractor"]({"user": {"id": "34@N02", "username": {"_content": "wasps"}}}) == (
        AuthenticatedIdentity("34@N02", "wasps")
    )


@pytest.mark.asyncio
async def test_test_login_with_explicit_credential(client):
    credential = Credential("acc", "secret")

    await AuthenticationOperations(client).test_login_with(credential)

    assert client.invoke.call_args.kwargs["credential"] is credential
