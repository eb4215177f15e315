"""Thin per-feature wrappers over the Flickr request pipeline."""

from __future__ import annotations

from .authentication import AuthenticationOperations
from .base import ClientOperationBase
from .favorites import FavoritesOperations
from .not_found import return_none_on
from .people import PeopleOperations

__all__ = [
    "AuthenticationOperations",
    "ClientOperationBase",
    "FavoritesOperations",
    "PeopleOperations",
    "return_none_on",
]
