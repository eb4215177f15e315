"""Flickr API client library.

This module provides the Flickr client and the pieces of its request pipeline.
Import FlickrClient and FlickrConfig from here for API access.

Internal modules:
- signing: OAuth 1.0a HMAC-SHA1 request signing
- request_builder: canonical parameter sets and signed requests
- transport / session_manager: HTTP exchange over aiohttp
- envelope: ``stat: ok | fail`` response decoding
- pagination: page metadata for list results
- handshake: three-legged authorization
- credentials: credential holder and stores
- services: per-feature operations
"""

from .client import FlickrClient, FlickrConfig
from .credentials import Credential, InMemoryCredentialStore, JsonFileCredentialStore, RedisCredentialStore
from .entities import AuthenticatedIdentity
from .envelope import Failure, Success
from .error_codes import FlickrErrorCode
from .exceptions import (
    AuthorizationError,
    DomainFailure,
    FlickrError,
    HandshakeStateError,
    MalformedResponseError,
    SignatureRejectedError,
    TransportError,
)
from .pagination import Paginated
from .services import return_none_on

__all__ = [
    "AuthenticatedIdentity",
    "AuthorizationError",
    "Credential",
    "DomainFailure",
    "Failure",
    "FlickrClient",
    "FlickrConfig",
    "FlickrError",
    "FlickrErrorCode",
    "HandshakeStateError",
    "InMemoryCredentialStore",
    "JsonFileCredentialStore",
    "MalformedResponseError",
    "Paginated",
    "RedisCredentialStore",
    "SignatureRejectedError",
    "Success",
    "TransportError",
    "return_none_on",
]
