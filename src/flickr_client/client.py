"""Flickr REST client - slim coordinator over the request pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TypeVar

from .config import FlickrSettings, get_flickr_settings, validate_permission
from .config.settings import DEFAULT_CONNECT_TIMEOUT_SECONDS, DEFAULT_PERMISSION, DEFAULT_REQUEST_TIMEOUT_SECONDS
from .credentials import (
    Credential,
    CredentialHolder,
    CredentialStore,
    InMemoryCredentialStore,
    JsonFileCredentialStore,
)
from .entities import AuthenticatedIdentity, UserInfo
from .envelope import UPLOAD_METHOD_NAME, Envelope, Extractor, decode_envelope, decode_upload_envelope, unwrap
from .exceptions import AuthorizationError
from .handshake import AuthorizationHandshake, HandshakeState, parse_callback_url
from .pagination import Paginated, paginate
from .request_builder import RequestBuilder, UploadFile
from .services import AuthenticationOperations, FavoritesOperations, PeopleOperations
from .session_manager import SessionManager
from .signing import RequestSigner
from .transport import Transport

__all__ = ["FlickrClient", "FlickrConfig"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTTP_VERBS = ("GET", "POST")


@dataclass(frozen=True)
class FlickrConfig:
    """Endpoints and transport settings for the Flickr client."""

    rest_url: str = "https://api.flickr.com/services/rest/"
    upload_url: str = "https://up.flickr.com/services/upload/"
    oauth_base_url: str = "https://www.flickr.com/services/oauth"
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    proxy_url: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: FlickrSettings) -> "FlickrConfig":
        return cls(
            request_timeout_seconds=settings.request_timeout_seconds,
            connect_timeout_seconds=settings.connect_timeout_seconds,
            proxy_url=settings.proxy_url,
        )


class FlickrClient:
    """Acts on behalf of one Flickr user.

    REST calls go through ``invoke``: the parameters are canonicalized, signed
    with the current access credential, sent, and the envelope decoded. Photo
    bytes go to the upload endpoint through ``upload_photo``.
    The per-feature operations (``people``, ``favorites``, ``auth``) are thin
    callers of that pipeline.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        *,
        config: FlickrConfig | None = None,
        store: CredentialStore | None = None,
        callback_url: Optional[str] = None,
        permission: str = DEFAULT_PERMISSION,
    ) -> None:
        if not api_key or not api_secret:
            raise AuthorizationError("Flickr API key and secret are required")
        self._config = config if config else FlickrConfig()
        self._store: CredentialStore = store if store is not None else InMemoryCredentialStore()
        self._callback_url = callback_url
        self._holder = CredentialHolder()
        self._session_manager = SessionManager(self._config)
        self._request_builder = RequestBuilder(api_key, RequestSigner(api_secret))
        self._transport = Transport(self._session_manager)

        self.auth = AuthenticationOperations(self)
        self.people = PeopleOperations(self)
        self.favorites = FavoritesOperations(self)

        self._handshake = AuthorizationHandshake(
            request_builder=self._request_builder,
            transport=self._transport,
            holder=self._holder,
            store=self._store,
            identity_lookup=self.auth.test_login_with,
            oauth_base_url=self._config.oauth_base_url,
            permission=validate_permission(permission),
        )

    @classmethod
    def from_settings(
        cls,
        settings: FlickrSettings | None = None,
        *,
        store: CredentialStore | None = None,
    ) -> "FlickrClient":
        """Build a client from environment settings (``FLICKR_*`` variables)."""
        resolved = settings if settings is not None else get_flickr_settings()
        if store is None and resolved.credentials_path:
            store = JsonFileCredentialStore(resolved.credentials_path)
        return cls(
            resolved.api_key,
            resolved.api_secret,
            config=FlickrConfig.from_settings(resolved),
            store=store,
            callback_url=resolved.callback_url,
            permission=resolved.permission,
        )

    @property
    def config(self) -> FlickrConfig:
        return self._config

    @property
    def credentials(self) -> CredentialHolder:
        return self._holder

    @property
    def handshake_state(self) -> HandshakeState:
        return self._handshake.state

    @property
    def user_id(self) -> Optional[str]:
        return self._holder.user_id

    async def initialize(self) -> None:
        """Open the HTTP session and restore any persisted access credential."""
        await self._session_manager.initialize()
        await self._handshake.restore()

    async def close(self) -> None:
        await self._session_manager.close()

    async def __aenter__(self) -> "FlickrClient":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def is_first_start(self) -> bool:
        """True until an access credential has been obtained or restored."""
        return not self._holder.is_authorized

    async def invoke_envelope(
        self,
        method_name: str,
        params: Optional[Mapping[str, Any]] = None,
        http_verb: str = "GET",
        extractor: Optional[Extractor] = None,
        *,
        credential: Optional[Credential] = None,
    ) -> Envelope:
        """Execute a remote method and return its decoded envelope without raising on ``stat: fail``."""
        verb = http_verb.upper()
        if verb not in HTTP_VERBS:
            raise ValueError(f"Unsupported HTTP verb for Flickr: {http_verb}")
        signing_credential = credential if credential is not None else self._holder.current
        request = self._request_builder.build_signed_request(
            verb,
            self._config.rest_url,
            method_name,
            params,
            signing_credential,
        )
        logger.debug("Calling Flickr method %s via %s", method_name, verb)
        response = await self._transport.execute(request)
        return decode_envelope(response.body, method_name, extractor)

    async def invoke(
        self,
        method_name: str,
        params: Optional[Mapping[str, Any]] = None,
        http_verb: str = "GET",
        extractor: Optional[Extractor] = None,
        *,
        credential: Optional[Credential] = None,
    ) -> Any:
        """Execute a remote method and return its payload; ``stat: fail`` raises ``DomainFailure``."""
        envelope = await self.invoke_envelope(
            method_name, params, http_verb, extractor, credential=credential
        )
        return unwrap(envelope, method_name)

    def paginate(
        self,
        payload: Mapping[str, Any],
        item_key: str,
        item_parser: Optional[Callable[[Any], T]] = None,
        *,
        container_key: Optional[str] = None,
    ) -> Paginated[T]:
        return paginate(payload, item_key, item_parser, container_key=container_key)

    async def upload_photo(
        self,
        content: bytes,
        filename: str,
        *,
        content_type: str = "application/octet-stream",
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        is_public: Optional[bool] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Upload photo bytes to the upload endpoint and return the new photo id.

        Requires an access credential. The photo travels as a multipart field and
        is not part of the signature; ``params`` carries any further upload
        arguments (``safety_level``, ``hidden``, ...).

        Raises:
            AuthorizationError: No access credential is held
            DomainFailure: The upload endpoint answered ``stat="fail"``
        """
        credential = self._holder.current
        if credential is None:
            raise AuthorizationError("Uploading requires an authorized Flickr credential")
        upload_params: Dict[str, Any] = {
            "title": title,
            "description": description,
            "tags": " ".join(tags) if tags else None,
            "is_public": is_public,
        }
        if params:
            upload_params.update(params)

        request = self._request_builder.build_upload_request(
            self._config.upload_url,
            UploadFile("photo", filename, content, content_type),
            upload_params,
            credential,
        )
        logger.debug("Uploading %s (%d bytes) to Flickr", filename, len(content))
        response = await self._transport.execute(request)
        return unwrap(decode_upload_envelope(response.body), UPLOAD_METHOD_NAME)

    async def begin_authorization(self, callback_url: Optional[str] = None, permission: Optional[str] = None) -> str:
        """Start the handshake and return the URL the user must visit to grant access."""
        resolved_callback = callback_url or self._callback_url
        if not resolved_callback:
            raise AuthorizationError("No callback URL configured for Flickr authorization")
        return await self._handshake.begin(
            resolved_callback, validate_permission(permission) if permission else None
        )

    async def complete_authorization(self, verifier: str, token: str) -> AuthenticatedIdentity:
        """Exchange the verifier for an access credential and confirm the user."""
        return await self._handshake.complete(verifier, token)

    async def complete_authorization_from_url(self, callback_url: str) -> AuthenticatedIdentity:
        verifier, token = parse_callback_url(callback_url)
        return await self.complete_authorization(verifier, token)

    async def get_user(self) -> Optional[UserInfo]:
        """Information about the authorized user, or None before authorization."""
        user_id = self._holder.user_id
        if user_id is None:
            return None
        return await self.people.get_info(user_id)
