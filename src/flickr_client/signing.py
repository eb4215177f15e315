"""OAuth 1.0a request signing (HMAC-SHA1)."""

from __future__ import annotations

import base64
import time
import uuid
from typing import Iterable, Mapping, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from cryptography.hazmat.primitives import hashes, hmac

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"
SIGNATURE_PARAM = "oauth_signature"

# RFC 3986 unreserved characters; ``quote`` always keeps ALPHA / DIGIT / "_.-~".
_UNRESERVED_EXTRA = "~"


def percent_encode(value: object) -> str:
    """Encode ``value`` the way OAuth 1.0a requires (space is ``%20``)."""
    if isinstance(value, bytes):
        raw = value
    else:
        raw = str(value).encode("utf-8")
    return quote(raw, safe=_UNRESERVED_EXTRA)


def normalize_url(url: str) -> str:
    """Return the base URL used in the signature: no query, no fragment, lowercase host."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    netloc = parts.netloc.lower()
    if scheme == "http" and netloc.endswith(":80"):
        netloc = netloc[:-3]
    elif scheme == "https" and netloc.endswith(":443"):
        netloc = netloc[:-4]
    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, "", ""))


def normalize_parameters(parameters: Mapping[str, object] | Iterable[Tuple[str, object]]) -> str:
    """Encode, sort and join parameters, excluding ``oauth_signature``."""
    items = parameters.items() if isinstance(parameters, Mapping) else parameters
    encoded = sorted(
        (percent_encode(key), percent_encode(value)) for key, value in items if key != SIGNATURE_PARAM
    )
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(
    http_method: str,
    url: str,
    parameters: Mapping[str, object] | Iterable[Tuple[str, object]],
) -> str:
    return "&".join(
        (
            http_method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(parameters)),
        )
    )


def signing_key(consumer_secret: str, token_secret: Optional[str] = None) -> str:
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


class RequestSigner:
    """Signs requests with the application's shared secret.

    The token secret is passed per call so the signer itself holds no user
    credential and can be shared freely between concurrent requests.
    """

    def __init__(self, consumer_secret: str) -> None:
        self._consumer_secret = consumer_secret

    def sign(
        self,
        http_method: str,
        url: str,
        parameters: Mapping[str, object],
        token_secret: Optional[str] = None,
    ) -> str:
        """
        Compute the base64 HMAC-SHA1 signature for a request.

        Args:
            http_method: HTTP verb (GET, POST)
            url: Endpoint URL; any query string is ignored
            parameters: All request parameters except ``oauth_signature``
            token_secret: Secret of the request or access credential, if any

        Returns:
            Base64 encoded signature
        """
        base_string = signature_base_string(http_method, url, parameters)
        key = signing_key(self._consumer_secret, token_secret)
        mac = hmac.HMAC(key.encode("utf-8"), hashes.SHA1())
        mac.update(base_string.encode("utf-8"))
        return base64.b64encode(mac.finalize()).decode("ascii")


def generate_nonce() -> str:
    """Return a random nonce; uuid4 is safe to call from concurrent tasks and threads."""
    return uuid.uuid4().hex


def current_timestamp() -> str:
    return str(int(time.time()))


__all__ = [
    "OAUTH_VERSION",
    "RequestSigner",
    "SIGNATURE_METHOD",
    "SIGNATURE_PARAM",
    "current_timestamp",
    "generate_nonce",
    "normalize_parameters",
    "normalize_url",
    "percent_encode",
    "signature_base_string",
    "signing_key",
]
