"""Three-legged OAuth 1.0a authorization handshake."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit

from .credentials import Credential, CredentialHolder, CredentialStore
from .entities import AuthenticatedIdentity
from .exceptions import AuthorizationError, HandshakeStateError, MalformedResponseError
from .request_builder import RequestBuilder
from .transport import Transport

logger = logging.getLogger(__name__)

IdentityLookup = Callable[[Credential], Awaitable[AuthenticatedIdentity]]


class HandshakeState(str, Enum):
    UNAUTHORIZED = "unauthorized"
    REQUEST_CREDENTIAL_OBTAINED = "request_credential_obtained"
    AWAITING_USER_GRANT = "awaiting_user_grant"
    AUTHORIZED = "authorized"


def parse_token_response(body: str, endpoint: str) -> Dict[str, str]:
    """Parse the form-encoded body returned by the OAuth endpoints."""
    values = dict(parse_qsl(body.strip(), keep_blank_values=True))
    if "oauth_problem" in values:
        raise AuthorizationError(f"Flickr {endpoint} rejected the request: {values['oauth_problem']}")
    if not values.get("oauth_token") or "oauth_token_secret" not in values:
        raise MalformedResponseError(f"Flickr {endpoint} response is missing the token", body=body)
    return values


def parse_callback_url(url: str) -> Tuple[str, str]:
    """Return ``(verifier, token)`` from ``callback?oauth_verifier=...&oauth_token=...``."""
    query = dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    verifier = query.get("oauth_verifier")
    token = query.get("oauth_token")
    if not verifier or not token:
        raise AuthorizationError("Callback URL does not carry oauth_verifier and oauth_token")
    return verifier, token


class AuthorizationHandshake:
    """Drives the request-token, user-grant and access-token exchange.

    The request credential lives only in this object. The access credential is
    committed to the store and the holder only after the identity lookup has
    confirmed it.
    """

    def __init__(
        self,
        *,
        request_builder: RequestBuilder,
        transport: Transport,
        holder: CredentialHolder,
        store: CredentialStore,
        identity_lookup: IdentityLookup,
        oauth_base_url: str,
        permission: str,
    ) -> None:
        self._request_builder = request_builder
        self._transport = transport
        self._holder = holder
        self._store = store
        self._identity_lookup = identity_lookup
        self._oauth_base_url = oauth_base_url.rstrip("/")
        self._permission = permission
        self._state = HandshakeState.AUTHORIZED if holder.is_authorized else HandshakeState.UNAUTHORIZED
        self._request_credential: Optional[Credential] = None

    @property
    def state(self) -> HandshakeState:
        return self._state

    @property
    def request_token_url(self) -> str:
        return f"{self._oauth_base_url}/request_token"

    @property
    def authorize_url(self) -> str:
        return f"{self._oauth_base_url}/authorize"

    @property
    def access_token_url(self) -> str:
        return f"{self._oauth_base_url}/access_token"

    async def restore(self) -> Optional[Credential]:
        """Load a previously saved access credential, if any."""
        stored = await self._store.load_record()
        if stored is None:
            return None
        self._holder.replace(stored.credential, stored.user_id)
        self._state = HandshakeState.AUTHORIZED
        return stored.credential

    async def obtain_request_credential(self, callback_url: str) -> Credential:
        if not callback_url:
            raise AuthorizationError("A callback URL is required to start authorization")
        await self._discard_access_credential()

        parameters = self._request_builder.build_oauth_parameters({"oauth_callback": callback_url})
        request = self._request_builder.sign("GET", self.request_token_url, parameters)
        response = await self._transport.execute(request)
        values = parse_token_response(response.body, "request_token")

        self._request_credential = Credential(values["oauth_token"], values["oauth_token_secret"])
        self._state = HandshakeState.REQUEST_CREDENTIAL_OBTAINED
        logger.info("Obtained Flickr request credential")
        return self._request_credential

    def authorization_url(self, permission: Optional[str] = None) -> str:
        if self._request_credential is None or self._state not in (
            HandshakeState.REQUEST_CREDENTIAL_OBTAINED,
            HandshakeState.AWAITING_USER_GRANT,
        ):
            raise HandshakeStateError(HandshakeState.REQUEST_CREDENTIAL_OBTAINED.value, self._state.value)
        query = urlencode({"oauth_token": self._request_credential.token, "perms": permission or self._permission})
        self._state = HandshakeState.AWAITING_USER_GRANT
        return f"{self.authorize_url}?{query}"

    async def begin(self, callback_url: str, permission: Optional[str] = None) -> str:
        await self.obtain_request_credential(callback_url)
        return self.authorization_url(permission)

    async def complete(self, verifier: str, token: str) -> AuthenticatedIdentity:
        if self._state is not HandshakeState.AWAITING_USER_GRANT or self._request_credential is None:
            raise HandshakeStateError(HandshakeState.AWAITING_USER_GRANT.value, self._state.value)
        if not verifier:
            raise AuthorizationError("Authorization verifier must not be empty")
        request_credential = self._request_credential
        if token != request_credential.token:
            raise AuthorizationError("Callback token does not match the pending request token")

        try:
            access_credential = await self._exchange(request_credential, verifier)
            identity = await self._identity_lookup(access_credential)
            await self._store.save(access_credential, identity.user_id)
        except BaseException:
            self._request_credential = None
            self._state = HandshakeState.UNAUTHORIZED
            raise

        self._holder.replace(access_credential, identity.user_id)
        self._request_credential = None
        self._state = HandshakeState.AUTHORIZED
        logger.info("Flickr authorization completed for user %s", identity.user_id)
        return identity

    async def _exchange(self, request_credential: Credential, verifier: str) -> Credential:
        parameters = self._request_builder.build_oauth_parameters({"oauth_verifier": verifier}, request_credential)
        request = self._request_builder.sign("GET", self.access_token_url, parameters, request_credential)
        response = await self._transport.execute(request)
        values = parse_token_response(response.body, "access_token")
        return Credential(values["oauth_token"], values["oauth_token_secret"])

    async def _discard_access_credential(self) -> None:
        if self._holder.is_authorized:
            logger.info("Discarding previous Flickr access credential before re-authorization")
        await self._store.clear()
        self._holder.clear()
        self._request_credential = None
        self._state = HandshakeState.UNAUTHORIZED


__all__ = [
    "AuthorizationHandshake",
    "HandshakeState",
    "IdentityLookup",
    "parse_callback_url",
    "parse_token_response",
]
