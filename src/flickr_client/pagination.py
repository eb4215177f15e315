"""Pagination metadata for multi-item Flickr results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .exceptions import MalformedResponseError

T = TypeVar("T")


@dataclass(frozen=True)
class Paginated(Generic[T]):
    """One page of results. Fetching another page means calling the method again."""

    items: Tuple[T, ...]
    page: int
    per_page: int
    total_pages: int
    total_items: int

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    def as_list(self) -> List[T]:
        return list(self.items)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.has_next_page else None


def _read_int(container: Mapping[str, Any], *names: str) -> Optional[int]:
    for name in names:
        if name not in container or container[name] is None:
            continue
        raw = container[name]
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise MalformedResponseError(f"Pagination field {name!r} is not an integer: {raw!r}") from exc
    return None


def _as_sequence(raw: Any, item_key: str) -> Sequence[Any]:
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        # single-item lists are sometimes returned as a bare object
        return (raw,)
    if isinstance(raw, (list, tuple)):
        return raw
    raise MalformedResponseError(f"Expected a list under {item_key!r}, got {type(raw).__name__}")


def paginate(
    payload: Mapping[str, Any],
    item_key: str,
    item_parser: Optional[Callable[[Any], T]] = None,
    *,
    container_key: Optional[str] = None,
) -> Paginated[T]:
    """
    Wrap the list found in ``payload`` with its page metadata.

    Args:
        payload: Decoded success payload
        item_key: Key of the item list (``photo``, ``group``, ...)
        item_parser: Optional per-item conversion
        container_key: Key of the object holding the list and metadata
            (``photos``); when omitted, ``payload`` itself is the container

    Returns:
        A ``Paginated`` page. When ``pages`` or ``total`` is missing both read as 0.

    Raises:
        MalformedResponseError: Non-integer metadata, more items than ``perpage``,
            or a page number outside ``1..pages`` while ``total`` is positive
    """
    container: Any = payload
    if container_key is not None:
        container = payload.get(container_key)
        if container is None:
            container = {}
    if not isinstance(container, Mapping):
        raise MalformedResponseError(f"Expected an object under {container_key!r}")

    raw_items = _as_sequence(container.get(item_key), item_key)
    try:
        items = tuple(item_parser(item) for item in raw_items) if item_parser is not None else tuple(raw_items)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Could not parse {item_key!r} item: {exc.__class__.__name__}: {exc}") from exc

    page = _read_int(container, "page")
    per_page = _read_int(container, "perpage", "per_page")
    total_pages = _read_int(container, "pages")
    total_items = _read_int(container, "total")

    # totals are only meaningful as a pair
    if total_pages is None or total_items is None:
        total_pages = total_items = 0
    if page is None:
        page = 1 if items else 0
    if per_page is None:
        per_page = len(items)

    if len(items) > per_page:
        raise MalformedResponseError(f"Page holds {len(items)} {item_key!r} items but perpage is {per_page}")
    if total_items > 0 and not 0 < page <= total_pages:
        raise MalformedResponseError(f"Page {page} is outside 1..{total_pages} for {total_items} items")

    return Paginated(
        items=items,
        page=page,
        per_page=per_page,
        total_pages=total_pages,
        total_items=total_items,
    )


__all__ = ["Paginated", "paginate"]
