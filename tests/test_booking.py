from __future__ import annotations

from datetime import date, datetime
from typing import List

import pytest

from yatra.core.errors import StateError, ValidationError
from yatra.core.supabase_api import SupabaseError
from yatra.workflows.booking import (
    BookingState,
    GuideBookingWorkflow,
    RideBookingWorkflow,
    guide_total_cost,
)
from yatra.workflows.router import Page

RIDE_FORM = {
    "pickup_location": "MG Road, Bengaluru",
    "dropoff_location": "Kempegowda Airport",
    "pickup_time": datetime(2024, 5, 1, 9, 30),
    "passengers": 2,
}


def _ride_workflow(store, session, router, listener_calls: List[str] | None = None) -> RideBookingWorkflow:
    listeners = [lambda: listener_calls.append("booked")] if listener_calls is not None else []
    return RideBookingWorkflow(store, session, router, on_booked=listeners)


def test_sedan_candidates_are_top_three_by_rating(fake_client, store, session, router) -> None:
    workflow = _ride_workflow(store, session, router)

    candidates = workflow.load_candidates("sedan")

    assert [driver.rating for driver in candidates] == [4.9, 4.7, 4.5]
    assert workflow.selected is not None and workflow.selected.rating == 4.9
    assert workflow.state is BookingState.SELECTED
    select_call = fake_client.calls_of("select")[-1]
    assert select_call[2] == {"vehicle_type": "eq.sedan", "available": "eq.true"}
    assert select_call[3:5] == ("rating.desc", 3)


def test_empty_candidate_list_has_no_selection(fake_client, store, signed_in, router) -> None:
    workflow = _ride_workflow(store, signed_in, router)

    assert workflow.load_candidates("luxury") == []
    assert workflow.state is BookingState.CANDIDATES_LOADED
    assert workflow.selected is None
    assert workflow.can_submit is False

    outcome = workflow.submit(**RIDE_FORM)

    assert outcome.state is BookingState.FAILED
    assert outcome.reason == StateError.NO_CANDIDATE
    assert outcome.error == "No drivers available for the selected vehicle type"
    assert [call for call in fake_client.calls_of("insert") if call[1] == "rides"] == []


def test_changing_vehicle_type_reloads_and_reselects(store, session, router) -> None:
    workflow = _ride_workflow(store, session, router)
    workflow.load_candidates("sedan")
    workflow.select("drv-sedan-45")

    workflow.load_candidates("suv")

    assert workflow.vehicle_type == "suv"
    assert [driver.id for driver in workflow.candidates] == ["drv-suv-48"]
    assert workflow.selected is not None and workflow.selected.id == "drv-suv-48"


def test_stale_candidate_result_is_discarded(store, session, router) -> None:
    workflow = _ride_workflow(store, session, router)
    first = workflow.begin_load()
    second = workflow.begin_load()
    newer = store.list_available_drivers("suv")
    older = store.list_available_drivers("sedan")

    assert workflow.apply_candidates(second, newer) is True
    assert workflow.apply_candidates(first, older) is False
    assert [driver.id for driver in workflow.candidates] == ["drv-suv-48"]


def test_unauthenticated_submit_redirects_without_insert(fake_client, store, session, router, clock) -> None:
    workflow = _ride_workflow(store, session, router)
    workflow.load_candidates("sedan")

    outcome = workflow.submit(**RIDE_FORM)

    assert outcome.state is BookingState.FAILED
    assert outcome.reason == StateError.UNAUTHENTICATED
    assert outcome.error == "Please sign in to book a ride"
    assert outcome.redirect_to is Page.SIGN_IN
    assert fake_client.calls_of("insert") == []
    assert workflow.can_submit is False

    assert router.due_redirect() is None
    clock.advance(2)
    assert router.due_redirect() is Page.SIGN_IN
    assert router.current is Page.SIGN_IN


def test_unauthenticated_check_precedes_candidate_check(fake_client, store, session, router) -> None:
    workflow = GuideBookingWorkflow(store, session, router)

    outcome = workflow.submit(booking_date=date(2024, 6, 1), duration_hours=2)

    assert outcome.reason == StateError.UNAUTHENTICATED
    assert router.pending is not None and router.pending.page is Page.SIGN_IN
    assert fake_client.calls_of("insert") == []


def test_ride_submission_persists_pending_ride_without_fare(fake_client, store, signed_in, router, clock) -> None:
    listener_calls: List[str] = []
    workflow = _ride_workflow(store, signed_in, router, listener_calls)
    workflow.load_candidates("sedan")
    workflow.select("drv-sedan-47")

    outcome = workflow.submit(**RIDE_FORM)

    assert outcome.succeeded
    assert workflow.state is BookingState.SUCCEEDED
    _, table, rows, token = fake_client.calls_of("insert")[-1]
    assert table == "rides"
    assert token == signed_in.access_token
    row = rows[0]
    assert row["tourist_id"] == signed_in.user_id
    assert row["driver_id"] == "drv-sedan-47"
    assert row["status"] == "pending"
    assert row["vehicle_preference"] == "sedan"
    assert row["pickup_time"] == "2024-05-01T09:30:00"
    assert "fare" not in row
    assert outcome.booking.fare is None
    assert listener_calls == ["booked"]

    clock.advance(2)
    assert router.due_redirect() is Page.DASHBOARD


@pytest.mark.parametrize(
    "override, expected",
    [
        ({"pickup_location": "   "}, "Pickup location is required"),
        ({"dropoff_location": ""}, "Dropoff location is required"),
        ({"passengers": 13}, "Passengers: Input should be less than or equal to 12"),
        ({"passengers": 0}, "Passengers: Input should be greater than or equal to 1"),
    ],
)
def test_invalid_ride_form_is_rejected_locally(fake_client, store, signed_in, router, override, expected) -> None:
    workflow = _ride_workflow(store, signed_in, router)
    workflow.load_candidates("sedan")
    inserts_before = len(fake_client.calls_of("insert"))

    outcome = workflow.submit(**{**RIDE_FORM, **override})

    assert outcome.state is BookingState.FAILED
    assert outcome.error == expected
    assert len(fake_client.calls_of("insert")) == inserts_before
    assert workflow.can_submit is True


def test_store_failure_is_generic_and_resubmittable(fake_client, store, signed_in, router) -> None:
    workflow = _ride_workflow(store, signed_in, router)
    workflow.load_candidates("sedan")
    fake_client.failures["rides"] = SupabaseError("boom", status_code=500, payload={"message": "relation broke"})

    outcome = workflow.submit(**RIDE_FORM)

    assert outcome.error == "Failed to book ride. Please try again."
    assert "relation broke" not in outcome.error
    assert router.pending is None
    assert workflow.can_submit is True

    del fake_client.failures["rides"]
    retry = workflow.submit(**RIDE_FORM)
    assert retry.succeeded


def test_select_unknown_candidate_raises_state_error(store, session, router) -> None:
    workflow = _ride_workflow(store, session, router)
    workflow.load_candidates("sedan")

    with pytest.raises(StateError) as excinfo:
        workflow.select("drv-missing")

    assert excinfo.value.reason == StateError.NO_CANDIDATE


def test_guide_booking_total_cost_is_rate_times_hours(fake_client, store, signed_in, router) -> None:
    workflow = GuideBookingWorkflow(store, signed_in, router)
    guide = next(guide for guide in store.list_available_guides() if guide.id == "gd-1")
    workflow.select(guide)

    outcome = workflow.submit(booking_date=date(2024, 6, 1), duration_hours=4)

    assert outcome.succeeded
    row = fake_client.calls_of("insert")[-1][2][0]
    assert row["guide_id"] == "gd-1"
    assert row["total_cost"] == 2000
    assert row["duration_hours"] == 4
    assert row["booking_date"] == "2024-06-01"
    assert row["status"] == "pending"
    assert "destination_id" not in row
    assert outcome.booking.total_cost == 2000


@pytest.mark.parametrize("hours", [1, 5, 12])
def test_guide_total_cost_matches_for_allowed_durations(hours: int) -> None:
    assert guide_total_cost(650, hours) == 650 * hours


@pytest.mark.parametrize("hours", [0, 13])
def test_guide_total_cost_rejects_out_of_range_durations(hours: int) -> None:
    with pytest.raises(ValidationError):
        guide_total_cost(650, hours)


def test_guide_candidates_auto_select_top_rated(store, session, router) -> None:
    workflow = GuideBookingWorkflow(store, session, router)

    candidates = workflow.load_candidates()

    assert [guide.id for guide in candidates] == ["gd-2", "gd-1", "gd-4"]
    assert workflow.selected is not None and workflow.selected.display_name == "Ravi Kumar"
    assert workflow.estimate(3) == 2250


def test_guide_booking_out_of_range_duration_makes_no_insert(fake_client, store, signed_in, router) -> None:
    workflow = GuideBookingWorkflow(store, signed_in, router)
    workflow.load_candidates()
    inserts_before = len(fake_client.calls_of("insert"))

    outcome = workflow.submit(booking_date=date(2024, 6, 1), duration_hours=13, destination_id="dst-1")

    assert outcome.state is BookingState.FAILED
    assert outcome.error.startswith("Duration hours:")
    assert len(fake_client.calls_of("insert")) == inserts_before


def test_guide_booking_keeps_destination_reference(fake_client, store, signed_in, router) -> None:
    workflow = GuideBookingWorkflow(store, signed_in, router)
    workflow.load_candidates(specialization="Wildlife")

    outcome = workflow.submit(booking_date="2024-06-01", duration_hours=2, destination_id="dst-1")

    assert outcome.succeeded
    row = fake_client.calls_of("insert")[-1][2][0]
    assert row["destination_id"] == "dst-1"
    assert row["total_cost"] == 1500


def test_succeeded_attempt_cannot_be_resubmitted_until_reset(store, signed_in, router) -> None:
    workflow = _ride_workflow(store, signed_in, router)
    workflow.load_candidates("sedan")
    workflow.submit(**RIDE_FORM)

    with pytest.raises(StateError):
        workflow.submit(**RIDE_FORM)

    workflow.reset()
    assert workflow.state is BookingState.SELECTED
    assert workflow.submit(**RIDE_FORM).succeeded
