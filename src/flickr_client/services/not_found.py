"""Turn selected remote failures into an absent result."""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..error_codes import FlickrErrorCode
from ..exceptions import DomainFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def return_none_on(
    *codes: FlickrErrorCode,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[Optional[T]]]]:
    """Decorate a coroutine so ``DomainFailure`` with one of ``codes`` yields None.

    Any other failure, including other domain codes, propagates unchanged.
    """
    if not codes:
        raise ValueError("return_none_on requires at least one error code")
    absent_codes = frozenset(codes)

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Optional[T]]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            try:
                return await func(*args, **kwargs)
            except DomainFailure as exc:
                if exc.code not in absent_codes:
                    raise
                logger.debug("%s returned %s; treating as absent", exc.method_name, exc.code.name)
                return None

        return wrapper

    return decorator


__all__ = ["return_none_on"]
