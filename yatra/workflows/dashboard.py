"""Aggregates the signed-in traveller's bookings for the dashboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, TypeVar

from yatra.core.errors import StoreError
from yatra.core.records import SupabaseRecordStore
from yatra.schemas import ACTIVE_STATUSES, GuideBookingDetails, RideWithDriver

_LOGGER = logging.getLogger(__name__)

_STATUS_TONES = {
    "pending": "warning",
    "accepted": "info",
    "confirmed": "info",
    "ongoing": "active",
    "completed": "success",
    "cancelled": "error",
}

T = TypeVar("T")


@dataclass(slots=True)
class DashboardSummary:
    rides: List[RideWithDriver] = field(default_factory=list)
    guide_bookings: List[GuideBookingDetails] = field(default_factory=list)

    @property
    def active_count(self) -> int:
        return active_count(self)


def active_count(summary: DashboardSummary) -> int:
    """Number of rides and guide bookings that are still in progress."""

    statuses: Iterable[str] = [ride.status for ride in summary.rides] + [
        booking.status for booking in summary.guide_bookings
    ]
    return sum(1 for status in statuses if status in ACTIVE_STATUSES)


def status_tone(status: str) -> str:
    """Badge tone used when rendering ``status``."""

    return _STATUS_TONES.get(status, "neutral")


def _fetch_or_empty(label: str, identity: str, fetch: Callable[[str], List[T]]) -> List[T]:
    try:
        return fetch(identity)
    except StoreError as exc:
        _LOGGER.warning("Dashboard could not load %s for %s: %s", label, identity, exc)
        return []


class DashboardAggregator:
    """Loads bookings per identity and reloads after :meth:`invalidate`."""

    def __init__(self, store: SupabaseRecordStore) -> None:
        self._store = store
        self._summary: Optional[DashboardSummary] = None
        self._identity: Optional[str] = None

    def load_summary(self, identity: str) -> DashboardSummary:
        """Fetch rides and guide bookings independently; a failed fetch stays empty."""

        summary = DashboardSummary(
            rides=_fetch_or_empty("rides", identity, self._store.list_rides),
            guide_bookings=_fetch_or_empty("guide bookings", identity, self._store.list_guide_bookings),
        )
        self._summary = summary
        self._identity = identity
        return summary

    def current(self, identity: str) -> DashboardSummary:
        if self._summary is None or self._identity != identity:
            return self.load_summary(identity)
        return self._summary

    def invalidate(self, *_: object) -> None:
        self._summary = None
        self._identity = None


__all__ = ["DashboardAggregator", "DashboardSummary", "active_count", "status_tone"]
