"""Ride and guide booking workflows.

Each workflow instance tracks one booking attempt through the states in
:class:`BookingState`::

    IDLE -> CANDIDATES_LOADED -> SELECTED -> SUBMITTING -> SUCCEEDED | FAILED

Candidates are the drivers or guides eligible for the attempt, ranked by rating.
Submission checks the signed-in identity first, then the selected candidate,
then the form. Nothing is inserted unless all three pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from yatra.core.config import REDIRECT_DELAY_SECONDS
from yatra.core.errors import StateError, StoreError, ValidationError
from yatra.core.records import SupabaseRecordStore
from yatra.core.session import SessionProvider
from yatra.schemas import (
    MAX_GUIDE_HOURS,
    MIN_GUIDE_HOURS,
    Driver,
    GuideBooking,
    GuideBookingRequest,
    GuideWithProfile,
    RideBooking,
    RideRequest,
)
from yatra.workflows.router import Page, Router

_LOGGER = logging.getLogger(__name__)

CANDIDATE_LIMIT = 3
DEFAULT_VEHICLE_TYPE = "sedan"


class BookingState(str, Enum):
    IDLE = "idle"
    CANDIDATES_LOADED = "candidates_loaded"
    SELECTED = "selected"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


CandidateT = TypeVar("CandidateT", Driver, GuideWithProfile)
BookingT = TypeVar("BookingT", RideBooking, GuideBooking)
RequestT = TypeVar("RequestT", RideRequest, GuideBookingRequest)

BookingListener = Callable[[], None]


@dataclass(frozen=True, slots=True)
class BookingOutcome:
    """Result of a submission attempt as shown to the user."""

    state: BookingState
    booking: Optional[Any] = None
    error: Optional[str] = None
    reason: Optional[str] = None
    redirect_to: Optional[Page] = None

    @property
    def succeeded(self) -> bool:
        return self.state is BookingState.SUCCEEDED


def guide_total_cost(hourly_rate: float, duration_hours: int) -> float:
    """Return the cost of booking a guide for ``duration_hours``."""

    if not MIN_GUIDE_HOURS <= duration_hours <= MAX_GUIDE_HOURS:
        raise ValidationError(
            f"Duration must be between {MIN_GUIDE_HOURS} and {MAX_GUIDE_HOURS} hours"
        )
    return hourly_rate * duration_hours


def _field_label(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc if not isinstance(part, int)]
    return " ".join(parts).replace("_", " ").capitalize() if parts else "Input"


def _first_error(exc: SchemaValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    error = errors[0]
    message = str(error.get("msg", "")).removeprefix("Value error, ")
    if error.get("type") == "value_error":
        return message
    return f"{_field_label(error.get('loc', ()))}: {message}"


class BookingWorkflow(Generic[CandidateT, BookingT, RequestT]):
    """Shared candidate handling and submission for one booking attempt."""

    noun = "booking"
    request_model: type[BaseModel]

    def __init__(
        self,
        store: SupabaseRecordStore,
        session: SessionProvider,
        router: Router,
        *,
        on_booked: Iterable[BookingListener] = (),
        redirect_delay: float = REDIRECT_DELAY_SECONDS,
    ) -> None:
        self._store = store
        self._session = session
        self._router = router
        self._listeners: List[BookingListener] = list(on_booked)
        self._redirect_delay = redirect_delay
        self._ticket = 0
        self.state = BookingState.IDLE
        self.candidates: List[CandidateT] = []
        self.selected: Optional[CandidateT] = None
        self.booking: Optional[BookingT] = None
        self.error: Optional[str] = None
        self.failure_reason: Optional[str] = None

    # Candidates -------------------------------------------------------
    def _fetch_candidates(self, **criteria: Any) -> List[CandidateT]:
        raise NotImplementedError

    def begin_load(self) -> int:
        self._ticket += 1
        return self._ticket

    def apply_candidates(self, ticket: int, candidates: Iterable[CandidateT]) -> bool:
        """Install ``candidates`` unless a newer load has started since ``ticket``."""

        if ticket != self._ticket:
            _LOGGER.debug("Discarding stale %s candidates %s (latest %s)", self.noun, ticket, self._ticket)
            return False
        self.candidates = list(candidates)
        self.selected = self.candidates[0] if self.candidates else None
        self.state = BookingState.SELECTED if self.selected else BookingState.CANDIDATES_LOADED
        self.error = None
        self.failure_reason = None
        return True

    def load_candidates(self, **criteria: Any) -> List[CandidateT]:
        ticket = self.begin_load()
        try:
            candidates = self._fetch_candidates(**criteria)
        except StoreError as exc:
            if ticket == self._ticket:
                self.apply_candidates(ticket, [])
                self.error = exc.message
            return []
        self.apply_candidates(ticket, candidates)
        return list(self.candidates)

    def select(self, candidate: Union[CandidateT, str]) -> CandidateT:
        """Choose the candidate to book, by object or by id."""

        if self.state in (BookingState.SUBMITTING, BookingState.SUCCEEDED):
            raise StateError("already_submitted", f"This {self.noun} has already been submitted.")
        if isinstance(candidate, str):
            match = next((item for item in self.candidates if item.id == candidate), None)
            if match is None:
                raise StateError(StateError.NO_CANDIDATE, f"That {self.noun} option is no longer available.")
            candidate = match
        self.selected = candidate
        self.state = BookingState.SELECTED
        self.error = None
        self.failure_reason = None
        return candidate

    # Submission -------------------------------------------------------
    @property
    def can_submit(self) -> bool:
        return self.selected is not None and self.state in (BookingState.SELECTED, BookingState.FAILED) and (
            self.failure_reason != StateError.UNAUTHENTICATED
        )

    def _unauthenticated_message(self) -> str:
        return f"Please sign in to book a {self.noun}"

    def _no_candidate_message(self) -> str:
        return f"No {self.noun} options are available right now"

    def _failure_message(self) -> str:
        return f"Failed to book {self.noun}. Please try again."

    def _validate(self, form: Mapping[str, Any]) -> RequestT:
        try:
            return self.request_model.model_validate(dict(form))  # type: ignore[return-value]
        except SchemaValidationError as exc:
            raise ValidationError(_first_error(exc)) from exc

    def _payload(self, tourist_id: str, candidate: CandidateT, request: RequestT) -> Dict[str, Any]:
        raise NotImplementedError

    def _insert(self, payload: Mapping[str, Any]) -> BookingT:
        raise NotImplementedError

    def _fail(self, message: str, reason: Optional[str] = None, redirect_to: Optional[Page] = None) -> BookingOutcome:
        self.state = BookingState.FAILED
        self.error = message
        self.failure_reason = reason
        if redirect_to is not None:
            self._router.schedule(redirect_to, self._redirect_delay)
        return BookingOutcome(self.state, error=message, reason=reason, redirect_to=redirect_to)

    def submit(self, **form: Any) -> BookingOutcome:
        """Validate and persist the booking for the signed-in traveller."""

        if self.state is BookingState.SUCCEEDED:
            raise StateError("already_submitted", f"This {self.noun} has already been submitted.")
        self.state = BookingState.SUBMITTING
        self.error = None
        self.failure_reason = None

        if not self._session.refresh_if_needed() or not self._session.user_id:
            return self._fail(self._unauthenticated_message(), StateError.UNAUTHENTICATED, Page.SIGN_IN)
        tourist_id = self._session.user_id
        candidate = self.selected
        if candidate is None:
            return self._fail(self._no_candidate_message(), StateError.NO_CANDIDATE)

        try:
            request = self._validate(form)
            payload = self._payload(tourist_id, candidate, request)
            booking = self._insert(payload)
        except ValidationError as exc:
            return self._fail(exc.message, "invalid")
        except StoreError as exc:
            _LOGGER.warning("Creating %s booking for %s failed: %s", self.noun, tourist_id, exc)
            return self._fail(self._failure_message(), "store")

        self.booking = booking
        self.state = BookingState.SUCCEEDED
        _LOGGER.info("Created %s booking %s for %s", self.noun, booking.id, tourist_id)
        for listener in list(self._listeners):
            listener()
        self._router.schedule(Page.DASHBOARD, self._redirect_delay)
        return BookingOutcome(self.state, booking=booking, redirect_to=Page.DASHBOARD)

    def reset(self) -> None:
        """Start a new attempt, keeping the loaded candidates."""

        self.booking = None
        self.error = None
        self.failure_reason = None
        if self.selected is not None:
            self.state = BookingState.SELECTED
        elif self.candidates or self._ticket:
            self.state = BookingState.CANDIDATES_LOADED
        else:
            self.state = BookingState.IDLE


class RideBookingWorkflow(BookingWorkflow[Driver, RideBooking, RideRequest]):
    """Books a ride with one of the top-rated available drivers."""

    noun = "ride"
    request_model = RideRequest

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.vehicle_type = DEFAULT_VEHICLE_TYPE

    def _no_candidate_message(self) -> str:
        return "No drivers available for the selected vehicle type"

    def _fetch_candidates(self, **criteria: Any) -> List[Driver]:
        return self._store.list_available_drivers(self.vehicle_type, limit=CANDIDATE_LIMIT)

    def load_candidates(self, vehicle_type: Optional[str] = None, **criteria: Any) -> List[Driver]:
        if vehicle_type:
            self.vehicle_type = vehicle_type
        return super().load_candidates(**criteria)

    def submit(self, **form: Any) -> BookingOutcome:
        form.setdefault("vehicle_type", self.vehicle_type)
        return super().submit(**form)

    def _payload(self, tourist_id: str, candidate: Driver, request: RideRequest) -> Dict[str, Any]:
        # Fare stays unset; it is assigned outside this application.
        return {
            "tourist_id": tourist_id,
            "driver_id": candidate.id,
            "pickup_location": request.pickup_location,
            "dropoff_location": request.dropoff_location,
            "pickup_time": request.pickup_time.isoformat(),
            "passengers": request.passengers,
            "vehicle_preference": request.vehicle_type,
            "status": "pending",
        }

    def _insert(self, payload: Mapping[str, Any]) -> RideBooking:
        return self._store.insert_ride(payload)


class GuideBookingWorkflow(BookingWorkflow[GuideWithProfile, GuideBooking, GuideBookingRequest]):
    """Books an hourly session with a local guide."""

    noun = "guide"
    request_model = GuideBookingRequest

    def _fetch_candidates(self, specialization: Optional[str] = None, **criteria: Any) -> List[GuideWithProfile]:
        return self._store.list_available_guides(specialization=specialization, limit=CANDIDATE_LIMIT)

    def estimate(self, duration_hours: int) -> Optional[float]:
        """Return the cost shown before confirming, if a guide is selected."""

        if self.selected is None:
            return None
        return guide_total_cost(self.selected.hourly_rate, duration_hours)

    def _payload(self, tourist_id: str, candidate: GuideWithProfile, request: GuideBookingRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "tourist_id": tourist_id,
            "guide_id": candidate.id,
            "booking_date": request.booking_date.isoformat(),
            "duration_hours": request.duration_hours,
            "total_cost": guide_total_cost(candidate.hourly_rate, request.duration_hours),
            "status": "pending",
        }
        if request.destination_id:
            payload["destination_id"] = request.destination_id
        return payload

    def _insert(self, payload: Mapping[str, Any]) -> GuideBooking:
        return self._store.insert_guide_booking(payload)


__all__ = [
    "BookingOutcome",
    "BookingState",
    "BookingWorkflow",
    "CANDIDATE_LIMIT",
    "GuideBookingWorkflow",
    "RideBookingWorkflow",
    "guide_total_cost",
]
