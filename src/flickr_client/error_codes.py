"""Flickr API error codes."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class FlickrErrorCode(IntEnum):
    """Closed set of error codes reported in a ``stat: fail`` envelope."""

    UNKNOWN = -1
    UNSPECIFIED = 0
    NOT_FOUND = 1
    SSL_REQUIRED = 95
    INVALID_SIGNATURE = 96
    MISSING_SIGNATURE = 97
    LOGIN_FAILED = 98
    INSUFFICIENT_PERMISSIONS = 99
    INVALID_API_KEY = 100
    SERVICE_UNAVAILABLE = 105
    WRITE_OPERATION_FAILED = 106
    FORMAT_NOT_FOUND = 111
    METHOD_NOT_FOUND = 112
    INVALID_SOAP_ENVELOPE = 114
    INVALID_XML_RPC_CALL = 115
    BAD_URL_FOUND = 116

    @classmethod
    def from_code(cls, value: Any) -> "FlickrErrorCode":
        """Map a raw envelope code to a member; never raises."""
        if value is None or value == "":
            return cls.UNSPECIFIED
        if isinstance(value, bool):
            return cls.UNKNOWN
        try:
            numeric = int(value)
        except (TypeError, ValueError):
            return cls.UNKNOWN
        try:
            return cls(numeric)
        except ValueError:
            return cls.UNKNOWN


SIGNATURE_REJECTION_CODES = frozenset(
    {
        FlickrErrorCode.INVALID_SIGNATURE,
        FlickrErrorCode.MISSING_SIGNATURE,
        FlickrErrorCode.LOGIN_FAILED,
    }
)


__all__ = ["FlickrErrorCode", "SIGNATURE_REJECTION_CODES"]
