"""Typed access to the Supabase collections used by Yatra."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from yatra.core.errors import NetworkError, StoreError
from yatra.core.supabase_api import SupabaseClient, SupabaseError
from yatra.schemas import (
    Destination,
    Driver,
    GuideBooking,
    GuideBookingDetails,
    GuideWithProfile,
    RideBooking,
    RideWithDriver,
)

_LOGGER = logging.getLogger(__name__)

DESTINATIONS_TABLE = "destinations"
DRIVERS_TABLE = "drivers"
GUIDES_TABLE = "guides"
RIDES_TABLE = "rides"
GUIDE_BOOKINGS_TABLE = "guide_bookings"

GUIDE_SELECT = "*,profiles:user_id(full_name,avatar_url)"
RIDE_SELECT = "*,drivers:driver_id(vehicle_type,vehicle_number,rating)"
GUIDE_BOOKING_SELECT = (
    "*,guides:guide_id(id,hourly_rate,rating,profiles:user_id(full_name)),"
    "destinations:destination_id(name)"
)
BY_RATING = "rating.desc"
NEWEST_FIRST = "created_at.desc"

ModelT = TypeVar("ModelT", bound=BaseModel)


@contextmanager
def _store_errors(action: str) -> Generator[None, None, None]:
    """Translate client failures into store errors for ``action``."""

    try:
        yield
    except SupabaseError as exc:
        _LOGGER.warning("Record store failed to %s: %s", action, exc)
        if exc.is_network_error:
            raise NetworkError() from exc
        raise StoreError() from exc


def _parse_rows(model: Type[ModelT], rows: Sequence[Mapping[str, Any]], table: str) -> List[ModelT]:
    try:
        return [model.model_validate(row) for row in rows]
    except SchemaValidationError as exc:
        _LOGGER.warning("Unexpected %s payload: %s", table, exc)
        raise StoreError() from exc


class SupabaseRecordStore:
    """Reads and inserts against the remote record store.

    ``token_source`` returns the bearer token for each request; the session
    provider supplies the user's access token, or the anon key when signed out.
    """

    def __init__(self, client: SupabaseClient, token_source: Callable[[], str]) -> None:
        self._client = client
        self._token_source = token_source

    def _select(
        self,
        table: str,
        model: Type[ModelT],
        *,
        filters: Optional[Mapping[str, Any]] = None,
        select: str = "*",
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        with _store_errors(f"read {table}"):
            rows = self._client.select(
                table,
                access_token=self._token_source(),
                filters=filters,
                select=select,
                order=order,
                limit=limit,
            )
        return _parse_rows(model, rows, table)

    def _insert_one(self, table: str, model: Type[ModelT], payload: Mapping[str, Any]) -> ModelT:
        with _store_errors(f"insert into {table}"):
            rows = self._client.insert(table, [payload], access_token=self._token_source())
        if not rows:
            raise StoreError()
        return _parse_rows(model, rows[:1], table)[0]

    def list_destinations(self) -> List[Destination]:
        return self._select(DESTINATIONS_TABLE, Destination, order=BY_RATING)

    def list_popular_destinations(self, limit: int = 6) -> List[Destination]:
        return self._select(
            DESTINATIONS_TABLE,
            Destination,
            filters={"popular": "eq.true"},
            limit=limit,
        )

    def list_available_guides(
        self,
        *,
        specialization: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[GuideWithProfile]:
        filters: Dict[str, Any] = {"available": "eq.true"}
        if specialization:
            filters["specialization"] = f"cs.{{{specialization}}}"
        return self._select(
            GUIDES_TABLE,
            GuideWithProfile,
            filters=filters,
            select=GUIDE_SELECT,
            order=BY_RATING,
            limit=limit,
        )

    def list_available_drivers(self, vehicle_type: str, *, limit: int = 3) -> List[Driver]:
        return self._select(
            DRIVERS_TABLE,
            Driver,
            filters={"vehicle_type": f"eq.{vehicle_type}", "available": "eq.true"},
            order=BY_RATING,
            limit=limit,
        )

    def insert_ride(self, payload: Mapping[str, Any]) -> RideBooking:
        return self._insert_one(RIDES_TABLE, RideBooking, payload)

    def insert_guide_booking(self, payload: Mapping[str, Any]) -> GuideBooking:
        return self._insert_one(GUIDE_BOOKINGS_TABLE, GuideBooking, payload)

    def list_rides(self, tourist_id: str) -> List[RideWithDriver]:
        return self._select(
            RIDES_TABLE,
            RideWithDriver,
            filters={"tourist_id": f"eq.{tourist_id}"},
            select=RIDE_SELECT,
            order=NEWEST_FIRST,
        )

    def list_guide_bookings(self, tourist_id: str) -> List[GuideBookingDetails]:
        return self._select(
            GUIDE_BOOKINGS_TABLE,
            GuideBookingDetails,
            filters={"tourist_id": f"eq.{tourist_id}"},
            select=GUIDE_BOOKING_SELECT,
            order=NEWEST_FIRST,
        )


__all__ = [
    "DESTINATIONS_TABLE",
    "DRIVERS_TABLE",
    "GUIDES_TABLE",
    "GUIDE_BOOKINGS_TABLE",
    "RIDES_TABLE",
    "SupabaseRecordStore",
]
