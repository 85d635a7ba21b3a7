"""Ride booking page."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Dict, Optional

import streamlit as st

from yatra.schemas import MAX_PASSENGERS, MIN_PASSENGERS, VEHICLE_OPTIONS, Driver
from yatra.ui.context import AppContext
from yatra.ui.feedback import settle_workflow, stars
from yatra.workflows.booking import BookingState

VEHICLE_KEY = "ride_vehicle_type"
DRIVER_KEY = "ride_driver_id"

_VEHICLE_LABELS: Dict[str, str] = {
    option.value: f"{option.label} · {option.capacity} seats · {option.price_label}"
    for option in VEHICLE_OPTIONS
}


def _driver_label(driver: Driver) -> str:
    return (
        f"Driver #{driver.short_id} · {driver.vehicle_type.upper()} {driver.vehicle_number} · "
        f"{stars(driver.rating)} · {driver.total_rides} rides"
    )


def render_rides_page(context: AppContext) -> None:
    workflow = context.rides
    settle_workflow(workflow, context.router)

    st.header("Book Your Ride")
    st.caption("Safe, comfortable, and reliable transportation to your destination.")

    if workflow.state is BookingState.SUCCEEDED:
        st.success("Ride Booked! Your ride has been successfully booked. Redirecting to dashboard...")
        return

    if workflow.error:
        st.error(workflow.error)

    vehicle_type = st.radio(
        "Select Vehicle Type",
        options=list(_VEHICLE_LABELS),
        format_func=lambda value: _VEHICLE_LABELS[value],
        horizontal=True,
        key=VEHICLE_KEY,
    )
    if workflow.state is BookingState.IDLE or vehicle_type != workflow.vehicle_type:
        with st.spinner("Finding available drivers..."):
            workflow.load_candidates(vehicle_type)

    drivers = {driver.id: driver for driver in workflow.candidates}
    with st.form("ride_booking_form", clear_on_submit=False):
        pickup_col, dropoff_col = st.columns(2)
        pickup_location = pickup_col.text_input("Pickup Location", placeholder="Enter pickup location")
        dropoff_location = dropoff_col.text_input("Dropoff Location", placeholder="Enter dropoff location")

        date_col, time_col, passengers_col = st.columns(3)
        pickup_day: date = date_col.date_input("Pickup Date", min_value=date.today())
        default_time = (datetime.now() + timedelta(hours=1)).time().replace(second=0, microsecond=0)
        pickup_clock: time = time_col.time_input("Pickup Time", value=default_time)
        passengers = passengers_col.number_input(
            "Number of Passengers",
            min_value=MIN_PASSENGERS,
            max_value=MAX_PASSENGERS,
            value=MIN_PASSENGERS,
            step=1,
        )

        chosen_id: Optional[str] = None
        if drivers:
            driver_ids = list(drivers)
            selected_id = workflow.selected.id if workflow.selected else driver_ids[0]
            chosen_id = st.radio(
                f"Available Drivers ({len(driver_ids)})",
                options=driver_ids,
                index=driver_ids.index(selected_id) if selected_id in drivers else 0,
                format_func=lambda driver_id: _driver_label(drivers[driver_id]),
                key=DRIVER_KEY,
            )
        else:
            st.info("No drivers available for this vehicle type right now.")

        submitted = st.form_submit_button(
            "Confirm Booking",
            disabled=not workflow.can_submit,
            type="primary",
            use_container_width=True,
        )

    if submitted:
        if chosen_id and (workflow.selected is None or workflow.selected.id != chosen_id):
            workflow.select(chosen_id)
        with st.spinner("Booking..."):
            workflow.submit(
                pickup_location=pickup_location,
                dropoff_location=dropoff_location,
                pickup_time=datetime.combine(pickup_day, pickup_clock),
                passengers=int(passengers),
            )
        st.rerun()


__all__ = ["render_rides_page"]
