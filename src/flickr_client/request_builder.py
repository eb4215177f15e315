"""Request construction for Flickr API calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .credentials import Credential
from .signing import (
    OAUTH_VERSION,
    SIGNATURE_METHOD,
    SIGNATURE_PARAM,
    RequestSigner,
    current_timestamp,
    generate_nonce,
)

logger = logging.getLogger(__name__)

RESPONSE_FORMAT = "json"
SENSITIVE_PARAMETERS = frozenset(
    {
        "api_key",
        "oauth_consumer_key",
        "oauth_signature",
        "oauth_token",
        "oauth_verifier",
    }
)
_REDACTED = "***"


@dataclass(frozen=True)
class UploadFile:
    """Binary content sent as a multipart field; never part of the signature."""

    field: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def __repr__(self) -> str:
        return f"UploadFile(field={self.field!r}, filename={self.filename!r}, size={len(self.content)})"


@dataclass(frozen=True)
class SignedRequest:
    http_method: str
    url: str
    parameters: Mapping[str, str]
    signature: str
    files: Tuple[UploadFile, ...] = field(default_factory=tuple)

    @property
    def is_multipart(self) -> bool:
        return bool(self.files)


def stringify(value: Any) -> str:
    """Render a caller-supplied value as a Flickr parameter string."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def merge_parameters(target: Dict[str, str], params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Merge ``params`` into ``target``; ``None`` values are omitted, last write wins."""
    if not params:
        return target
    for key, value in params.items():
        if value is None:
            continue
        target[str(key)] = stringify(value)
    return target


def redact_parameters(parameters: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``parameters`` safe to log."""
    return {key: (_REDACTED if key in SENSITIVE_PARAMETERS else value) for key, value in parameters.items()}


class RequestBuilder:
    """Builds canonical parameter sets and signs them."""

    def __init__(self, api_key: str, signer: RequestSigner) -> None:
        self._api_key = api_key
        self._signer = signer

    def build_oauth_parameters(
        self,
        extra: Optional[Mapping[str, Any]] = None,
        credential: Optional[Credential] = None,
    ) -> Dict[str, str]:
        """OAuth protocol parameters, plus ``oauth_token`` when a credential is given."""
        parameters: Dict[str, str] = {
            "oauth_consumer_key": self._api_key,
            "oauth_nonce": generate_nonce(),
            "oauth_timestamp": current_timestamp(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_version": OAUTH_VERSION,
        }
        if credential is not None:
            parameters["oauth_token"] = credential.token
        return merge_parameters(parameters, extra)

    def build_parameters(
        self,
        method_name: str,
        params: Optional[Mapping[str, Any]] = None,
        credential: Optional[Credential] = None,
    ) -> Dict[str, str]:
        """Canonical parameter set for a REST method call."""
        if not method_name:
            raise ValueError("Flickr method name must not be empty")
        parameters = self.build_oauth_parameters(credential=credential)
        parameters.update(
            {
                "api_key": self._api_key,
                "method": method_name,
                "format": RESPONSE_FORMAT,
                "nojsoncallback": "1",
            }
        )
        return merge_parameters(parameters, params)

    def sign(
        self,
        http_method: str,
        url: str,
        parameters: Mapping[str, str],
        credential: Optional[Credential] = None,
        files: Tuple[UploadFile, ...] = (),
    ) -> SignedRequest:
        """Sign ``parameters`` and return an immutable request."""
        method_upper = http_method.upper()
        unsigned = {key: value for key, value in parameters.items() if key != SIGNATURE_PARAM}
        token_secret = credential.token_secret if credential is not None else None
        signature = self._signer.sign(method_upper, url, unsigned, token_secret)
        unsigned[SIGNATURE_PARAM] = signature
        logger.debug("Signed %s %s with params %s", method_upper, url, redact_parameters(unsigned))
        return SignedRequest(
            http_method=method_upper,
            url=url,
            parameters=MappingProxyType(unsigned),
            signature=signature,
            files=tuple(files),
        )

    def build_signed_request(
        self,
        http_method: str,
        url: str,
        method_name: str,
        params: Optional[Mapping[str, Any]] = None,
        credential: Optional[Credential] = None,
    ) -> SignedRequest:
        parameters = self.build_parameters(method_name, params, credential)
        return self.sign(http_method, url, parameters, credential)

    def build_upload_request(
        self,
        url: str,
        upload: UploadFile,
        params: Optional[Mapping[str, Any]],
        credential: Credential,
    ) -> SignedRequest:
        """Multipart POST for the upload endpoint: OAuth fields plus ``params``, no ``method``/``format``."""
        parameters = self.build_oauth_parameters(params, credential)
        return self.sign("POST", url, parameters, credential, (upload,))


__all__ = [
    "RESPONSE_FORMAT",
    "RequestBuilder",
    "SENSITIVE_PARAMETERS",
    "SignedRequest",
    "UploadFile",
    "merge_parameters",
    "redact_parameters",
    "stringify",
]
