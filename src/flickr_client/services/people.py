"""Handle people operations."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..entities import Group, Photo, User, UserInfo
from ..error_codes import FlickrErrorCode
from ..pagination import Paginated, paginate
from .base import ClientOperationBase
from .not_found import return_none_on

DEFAULT_PER_PAGE = 100
MAX_PER_PAGE = 500


def page_params(user_id: str, per_page: int, page: int) -> Dict[str, Any]:
    if not 0 < per_page <= MAX_PER_PAGE:
        raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}")
    if page < 1:
        raise ValueError("page must be at least 1")
    return {"user_id": user_id, "per_page": per_page, "page": page}


def photos_page(tree: Dict[str, Any]) -> Paginated[Photo]:
    return paginate(tree, "photo", Photo.from_payload, container_key="photos")


def _user(tree: Dict[str, Any]) -> User:
    return User.from_payload(tree["user"])


def _user_info(tree: Dict[str, Any]) -> UserInfo:
    return UserInfo.from_payload(tree["person"])


def _groups(tree: Dict[str, Any]) -> List[Group]:
    return paginate(tree, "group", Group.from_payload, container_key="groups").as_list()


class PeopleOperations(ClientOperationBase):
    """Handle people-related API operations."""

    @return_none_on(FlickrErrorCode.NOT_FOUND)
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by primary or secondary email; None when unknown."""
        return await self.client.invoke("flickr.people.findByEmail", {"find_email": email}, extractor=_user)

    @return_none_on(FlickrErrorCode.NOT_FOUND)
    async def find_by_username(self, username: str) -> Optional[User]:
        """Find a user by username; None when unknown."""
        return await self.client.invoke("flickr.people.findByUsername", {"username": username}, extractor=_user)

    async def get_info(self, user_id: str) -> UserInfo:
        return await self.client.invoke("flickr.people.getInfo", {"user_id": user_id}, extractor=_user_info)

    async def get_photos(self, user_id: str, per_page: int = DEFAULT_PER_PAGE, page: int = 1) -> Paginated[Photo]:
        """Photos from the user's photostream visible to the calling user."""
        return await self.client.invoke(
            "flickr.people.getPhotos", page_params(user_id, per_page, page), extractor=photos_page
        )

    async def get_public_photos(
        self, user_id: str, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> Paginated[Photo]:
        return await self.client.invoke(
            "flickr.people.getPublicPhotos", page_params(user_id, per_page, page), extractor=photos_page
        )

    async def get_photos_of(
        self,
        user_id: str,
        owner_id: Optional[str] = None,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
    ) -> Paginated[Photo]:
        """Photos containing ``user_id``, optionally restricted to those taken by ``owner_id``."""
        params = page_params(user_id, per_page, page)
        params["owner_id"] = owner_id
        return await self.client.invoke("flickr.people.getPhotosOf", params, extractor=photos_page)

    async def get_public_groups(self, user_id: str) -> List[Group]:
        return await self.client.invoke(
            "flickr.people.getPublicGroups", {"user_id": user_id}, extractor=_groups
        )


__all__ = ["PeopleOperations", "page_params", "photos_page"]
