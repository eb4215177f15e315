"""Decoding of the ``stat: ok | fail`` response envelope (JSON REST bodies, XML upload bodies)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, Union

import orjson

from .error_codes import SIGNATURE_REJECTION_CODES, FlickrErrorCode
from .exceptions import DomainFailure, MalformedResponseError, SignatureRejectedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Extractor = Callable[[Dict[str, Any]], T]

STATUS_OK = "ok"
STATUS_FAIL = "fail"
UPLOAD_METHOD_NAME = "upload"


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T


@dataclass(frozen=True)
class Failure:
    code: FlickrErrorCode
    message: str = ""
    raw_code: Any = None


Envelope = Union[Success[Any], Failure]


def payload_fields(tree: Dict[str, Any]) -> Dict[str, Any]:
    """Default extractor: the decoded body without the ``stat`` marker."""
    return {key: value for key, value in tree.items() if key != "stat"}


def field_extractor(name: str, parser: Optional[Callable[[Any], T]] = None) -> Extractor:
    """Extractor returning a single top-level field, optionally parsed."""

    def extract(tree: Dict[str, Any]) -> Any:
        value = tree[name]
        return parser(value) if parser is not None else value

    return extract


def parse_body(raw_body: Union[str, bytes], method_name: str) -> Dict[str, Any]:
    try:
        tree = orjson.loads(raw_body)
    except (orjson.JSONDecodeError, TypeError) as exc:
        raise MalformedResponseError(
            f"Error parsing JSON response for '{method_name}'", method_name=method_name, body=raw_body
        ) from exc
    if not isinstance(tree, dict):
        raise MalformedResponseError(
            f"Response for '{method_name}' was not a JSON object", method_name=method_name, body=raw_body
        )
    return tree


def decode_envelope(
    raw_body: Union[str, bytes],
    method_name: str,
    extractor: Optional[Extractor] = None,
) -> Envelope:
    """
    Classify a raw response body.

    Args:
        raw_body: Body returned by the transport
        method_name: Remote method name, used in diagnostics
        extractor: Builds the typed payload from the decoded tree on success

    Returns:
        ``Success`` with the extracted payload, or ``Failure`` with the remote code

    Raises:
        MalformedResponseError: Body is not JSON, ``stat`` is missing or unknown,
            or the extractor could not find what it needed
    """
    tree = parse_body(raw_body, method_name)
    status = tree.get("stat")

    if status == STATUS_FAIL:
        raw_code = tree.get("code")
        message = tree.get("message")
        return Failure(
            code=FlickrErrorCode.from_code(raw_code),
            message="" if message is None else str(message),
            raw_code=raw_code,
        )

    if status == STATUS_OK:
        extract = extractor if extractor is not None else payload_fields
        try:
            return Success(extract(tree))
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            raise MalformedResponseError(
                f"Unexpected payload for '{method_name}': {exc.__class__.__name__}: {exc}",
                method_name=method_name,
                body=raw_body,
            ) from exc

    raise MalformedResponseError(
        f"Response for '{method_name}' has invalid stat {status!r}", method_name=method_name, body=raw_body
    )


def failure_to_exception(failure: Failure, method_name: str) -> DomainFailure:
    error_cls = SignatureRejectedError if failure.code in SIGNATURE_REJECTION_CODES else DomainFailure
    return error_cls(failure.code, failure.message, method_name=method_name, raw_code=failure.raw_code)


def unwrap(envelope: Envelope, method_name: str) -> Any:
    """Return the payload of a ``Success`` or raise the matching ``DomainFailure``."""
    if isinstance(envelope, Success):
        return envelope.payload
    logger.warning(
        "Flickr method %s failed with code %s (%s)",
        method_name,
        envelope.code.name,
        envelope.message,
    )
    raise failure_to_exception(envelope, method_name)


def decode(raw_body: Union[str, bytes], method_name: str, extractor: Optional[Extractor] = None) -> Any:
    return unwrap(decode_envelope(raw_body, method_name, extractor), method_name)


def decode_upload_envelope(raw_body: Union[str, bytes], method_name: str = UPLOAD_METHOD_NAME) -> Envelope:
    """
    Classify the XML body returned by the upload endpoint.

    ``<rsp stat="ok"><photoid>ID</photoid></rsp>`` yields ``Success(ID)``;
    ``<rsp stat="fail"><err code=".." msg=".."/></rsp>`` yields ``Failure``.
    """
    try:
        root = ET.fromstring(raw_body)
    except ET.ParseError as exc:
        raise MalformedResponseError(
            f"Error parsing XML response for '{method_name}'", method_name=method_name, body=raw_body
        ) from exc

    status = root.get("stat")
    if status == STATUS_FAIL:
        err = root.find("err")
        raw_code = err.get("code") if err is not None else None
        message = err.get("msg", "") if err is not None else ""
        return Failure(code=FlickrErrorCode.from_code(raw_code), message=message, raw_code=raw_code)

    if status == STATUS_OK:
        photo_id = (root.findtext("photoid") or "").strip()
        if not photo_id:
            raise MalformedResponseError(
                f"Response for '{method_name}' has no photoid", method_name=method_name, body=raw_body
            )
        return Success(photo_id)

    raise MalformedResponseError(
        f"Response for '{method_name}' has invalid stat {status!r}", method_name=method_name, body=raw_body
    )


__all__ = [
    "Envelope",
    "Extractor",
    "Failure",
    "Success",
    "decode",
    "decode_envelope",
    "decode_upload_envelope",
    "failure_to_exception",
    "field_extractor",
    "parse_body",
    "payload_fields",
    "unwrap",
]
