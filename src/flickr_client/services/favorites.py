"""Handle favorites operations."""

from __future__ import annotations

from ..entities import Photo
from ..pagination import Paginated
from .base import ClientOperationBase
from .people import DEFAULT_PER_PAGE, page_params, photos_page


class FavoritesOperations(ClientOperationBase):
    """Handle favorites-related API operations."""

    async def get_list(self, user_id: str, per_page: int = DEFAULT_PER_PAGE, page: int = 1) -> Paginated[Photo]:
        """Favorites of ``user_id`` the calling user is allowed to see."""
        return await self.client.invoke(
            "flickr.favorites.getList", page_params(user_id, per_page, page), extractor=photos_page
        )

    async def get_public_list(
        self, user_id: str, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> Paginated[Photo]:
        return await self.client.invoke(
            "flickr.favorites.getPublicList", page_params(user_id, per_page, page), extractor=photos_page
        )

    async def add(self, photo_id: str) -> None:
        await self.client.invoke("flickr.favorites.add", {"photo_id": photo_id}, http_verb="POST")

    async def remove(self, photo_id: str) -> None:
        await self.client.invoke("flickr.favorites.remove", {"photo_id": photo_id}, http_verb="POST")


__all__ = ["FavoritesOperations"]
