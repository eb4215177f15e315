"""Exception taxonomy for the Flickr client.

Every error raised by the request pipeline derives from ``FlickrError``:

- ``TransportError``: the HTTP exchange itself failed (network, TLS, timeout,
  unexpected HTTP status). Never retried by the client.
- ``MalformedResponseError``: the body was not the JSON envelope we expect.
- ``DomainFailure``: a well-formed ``stat: fail`` envelope. Carries the
  ``FlickrErrorCode`` so callers can branch on it cheaply.
- ``AuthorizationError``: signature rejected, or handshake steps out of order.
"""

from __future__ import annotations

from typing import Any, Optional

from .error_codes import FlickrErrorCode

_BODY_EXCERPT_LIMIT = 200


class FlickrError(RuntimeError):
    """Base error that attaches provided keyword fields as attributes."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class TransportError(FlickrError):
    """Raised when the HTTP exchange with Flickr fails."""

    def __init__(self, message: str, *, status: Optional[int] = None, url: str = "") -> None:
        super().__init__(message, status=status, url=url)


class MalformedResponseError(FlickrError):
    """Raised when a response body cannot be decoded into an envelope."""

    def __init__(self, message: str, *, method_name: str = "", body: Any = None) -> None:
        super().__init__(message)
        self.method_name = method_name
        self.body_excerpt = _excerpt(body)


class AuthorizationError(FlickrError):
    """Raised when Flickr rejects our credentials or the handshake is misused."""


class HandshakeStateError(AuthorizationError):
    """Handshake step invoked out of order."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Authorization handshake expected state {expected}, found {actual}")
        self.expected = expected
        self.actual = actual


class DomainFailure(FlickrError):
    """Raised when Flickr answers with a ``stat: fail`` envelope."""

    def __init__(
        self,
        code: FlickrErrorCode,
        message: str = "",
        *,
        method_name: str = "",
        raw_code: Any = None,
    ) -> None:
        super().__init__(f"Error calling method '{method_name}' ({message})")
        self.code = code
        self.remote_message = message
        self.method_name = method_name
        self.raw_code = raw_code

    @property
    def is_not_found(self) -> bool:
        return self.code is FlickrErrorCode.NOT_FOUND

    def has_code(self, *codes: FlickrErrorCode) -> bool:
        """Return True when this failure carries one of ``codes``."""
        return self.code in codes


class SignatureRejectedError(DomainFailure, AuthorizationError):
    """Flickr refused the request signature or the access token."""


def _excerpt(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    text = str(body)
    if len(text) > _BODY_EXCERPT_LIMIT:
        return text[:_BODY_EXCERPT_LIMIT] + "..."
    return text


__all__ = [
    "AuthorizationError",
    "DomainFailure",
    "FlickrError",
    "HandshakeStateError",
    "MalformedResponseError",
    "SignatureRejectedError",
    "TransportError",
]
