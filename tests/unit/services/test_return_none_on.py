"""Tests for the not-found decorator."""

import pytest

from flickr_client.error_codes import FlickrErrorCode
from flickr_client.exceptions import DomainFailure, TransportError
from flickr_client.services import return_none_on


def test_requires_codes():
    with pytest.raises(ValueError):
        return_none_on()


@pytest.mark.asyncio
async def test_passes_result_through():
    @return_none_on(FlickrErrorCode.NOT_FOUND)
    async def lookup():
        return "found"

    assert await lookup() == "found"
    assert lookup.__name__ == "lookup"


@pytest.mark.asyncio
async def test_listed_code_becomes_none():
    @return_none_on(FlickrErrorCode.NOT_FOUND, FlickrErrorCode.METHOD_NOT_FOUND)
    async def lookup():
        raise DomainFailure(FlickrErrorCode.METHOD_NOT_FOUND, "Method not found", method_name="flickr.x")

    assert await lookup() is None


@pytest.mark.asyncio
async def test_other_code_is_reraised_unchanged():
    failure = DomainFailure(FlickrErrorCode.INVALID_API_KEY, "Invalid API Key", method_name="flickr.x")

    @return_none_on(FlickrErrorCode.NOT_FOUND)
    async def lookup():
        raise failure

    with pytest.raises(DomainFailure) as exc_info:
        await lookup()

    assert exc_info.value is failure


@pytest.mark.asyncio
async def test_non_domain_errors_propagate():
    @return_none_on(FlickrErrorCode.NOT_FOUND)
    async def lookup():
        raise TransportError("down")

    with pytest.raises(TransportError):
        await lookup()
