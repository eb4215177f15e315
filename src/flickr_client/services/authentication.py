"""Identity lookup for the authorized user."""

from __future__ import annotations

from typing import Any, Dict

from ..credentials import Credential
from ..entities import AuthenticatedIdentity, content
from .base import ClientOperationBase

TEST_LOGIN_METHOD = "flickr.test.login"


def _identity(tree: Dict[str, Any]) -> AuthenticatedIdentity:
    user = tree["user"]
    return AuthenticatedIdentity(user_id=str(user["id"]), username=str(content(user.get("username")) or ""))


class AuthenticationOperations(ClientOperationBase):
    """Handle authentication-related API operations."""

    async def test_login(self) -> AuthenticatedIdentity:
        """Return the user the current access credential belongs to."""
        return await self.client.invoke(TEST_LOGIN_METHOD, extractor=_identity)

    async def test_login_with(self, credential: Credential) -> AuthenticatedIdentity:
        """Same as ``test_login`` but signed with ``credential`` instead of the stored one."""
        return await self.client.invoke(TEST_LOGIN_METHOD, extractor=_identity, credential=credential)


__all__ = ["AuthenticationOperations", "TEST_LOGIN_METHOD"]
