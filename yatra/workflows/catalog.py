"""Destination and guide catalog loading and client-side filtering."""

from __future__ import annotations

import logging
from typing import Callable, Generic, Iterable, List, Optional, Protocol, Sequence, TypeVar

from yatra.core.errors import StoreError
from yatra.core.records import SupabaseRecordStore
from yatra.schemas import Destination, GuideWithProfile

_LOGGER = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
POPULAR_LIMIT = 6


class Searchable(Protocol):
    def search_fields(self) -> List[str]: ...


ItemT = TypeVar("ItemT", bound=Searchable)


def load_destinations(store: SupabaseRecordStore) -> List[Destination]:
    return store.list_destinations()


def load_popular_destinations(store: SupabaseRecordStore, limit: int = POPULAR_LIMIT) -> List[Destination]:
    return store.list_popular_destinations(limit=limit)


def load_guides(store: SupabaseRecordStore) -> List[GuideWithProfile]:
    return store.list_available_guides()


def _matches_query(item: Searchable, needle: str) -> bool:
    return any(needle in (field or "").lower() for field in item.search_fields())


def filter_items(items: Iterable[ItemT], query: str = "", category: str = ALL_CATEGORIES) -> List[ItemT]:
    """Return ``items`` matching ``query`` and ``category``, in their original order.

    The query is a case-insensitive substring test against each item's search
    fields. Items without a ``category`` never match a specific category.
    """

    needle = (query or "").lower()
    wanted = category or ALL_CATEGORIES
    selected: List[ItemT] = []
    for item in items:
        if wanted != ALL_CATEGORIES and getattr(item, "category", None) != wanted:
            continue
        if needle and not _matches_query(item, needle):
            continue
        selected.append(item)
    return selected


def filter_destinations(
    items: Iterable[Destination],
    query: str = "",
    category: str = ALL_CATEGORIES,
) -> List[Destination]:
    return filter_items(items, query, category)


def filter_guides(items: Iterable[GuideWithProfile], query: str = "") -> List[GuideWithProfile]:
    return filter_items(items, query)


class CatalogBrowser(Generic[ItemT]):
    """Snapshot of a catalog fetch; the most recently started load wins.

    Call :meth:`begin_load` to obtain a ticket before fetching and :meth:`apply`
    with that ticket once the result arrives. Results for older tickets are
    discarded.
    """

    def __init__(self) -> None:
        self._items: List[ItemT] = []
        self._ticket = 0
        self._loading = False
        self._loaded = False
        self.error: Optional[str] = None

    @property
    def items(self) -> List[ItemT]:
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def loaded(self) -> bool:
        return self._loaded

    def begin_load(self) -> int:
        self._ticket += 1
        self._loading = True
        return self._ticket

    def apply(self, ticket: int, items: Sequence[ItemT]) -> bool:
        if ticket != self._ticket:
            _LOGGER.debug("Discarding stale catalog result %s (latest %s)", ticket, self._ticket)
            return False
        self._items = list(items)
        self._loading = False
        self._loaded = True
        self.error = None
        return True

    def fail(self, ticket: int, message: str) -> bool:
        if ticket != self._ticket:
            return False
        self._loading = False
        self._loaded = True
        self.error = message
        return True

    def refresh(self, loader: Callable[[], Sequence[ItemT]]) -> bool:
        """Run ``loader`` under a fresh ticket and record its result or error."""

        ticket = self.begin_load()
        try:
            items = loader()
        except StoreError as exc:
            return self.fail(ticket, exc.message)
        return self.apply(ticket, items)

    def filtered(self, query: str = "", category: str = ALL_CATEGORIES) -> List[ItemT]:
        return filter_items(self._items, query, category)


__all__ = [
    "ALL_CATEGORIES",
    "CatalogBrowser",
    "filter_destinations",
    "filter_guides",
    "filter_items",
    "load_destinations",
    "load_guides",
    "load_popular_destinations",
]
