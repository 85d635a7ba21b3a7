"""Traveller dashboard listing rides and guide bookings."""

from __future__ import annotations

import streamlit as st

from yatra.schemas import GuideBookingDetails, RideWithDriver
from yatra.ui.context import AppContext
from yatra.ui.feedback import stars
from yatra.workflows.dashboard import status_tone
from yatra.workflows.router import Page

_TONE_COLORS = {
    "warning": "orange",
    "info": "blue",
    "active": "violet",
    "success": "green",
    "error": "red",
    "neutral": "gray",
}


def _badge(status: str) -> str:
    color = _TONE_COLORS[status_tone(status)]
    return f":{color}[{status}]"


def _render_ride(ride: RideWithDriver) -> None:
    with st.container(border=True):
        st.markdown(f"**{ride.vehicle_label.upper()}** · {_badge(ride.status)}")
        st.caption(f"{ride.pickup_location} → {ride.dropoff_location}")
        st.caption(f"{ride.pickup_time:%d %b %Y, %H:%M} · {ride.passengers} passengers")
        if ride.drivers:
            st.caption(f"{ride.drivers.vehicle_number} · {stars(ride.drivers.rating)}")
        if ride.fare is not None:
            st.caption(f"Fare: ₹{ride.fare:,.0f}")


def _render_guide_booking(booking: GuideBookingDetails) -> None:
    with st.container(border=True):
        st.markdown(f"**{booking.guide_name}** · {_badge(booking.status)}")
        if booking.destinations:
            st.caption(booking.destinations.name)
        st.caption(
            f"{booking.booking_date:%d %b %Y} · {booking.duration_hours} hours · ₹{booking.total_cost:,.0f}"
        )


def render_dashboard_page(context: AppContext) -> None:
    session = context.session
    router = context.router
    if not session.is_authenticated or not session.user_id:
        st.header("Dashboard")
        st.info("Please sign in to view your dashboard.")
        st.button("Sign In", key="dashboard_sign_in", on_click=router.navigate, args=(Page.SIGN_IN,))
        return

    profile = session.profile
    header_col, refresh_col = st.columns([4, 1])
    with header_col:
        name = profile.full_name if profile and profile.full_name else "Traveller"
        st.header(f"Welcome, {name}")
        if profile:
            st.caption(profile.user_type.capitalize())
    refresh_col.button("Refresh", key="dashboard_refresh", on_click=context.dashboard.invalidate)

    with st.spinner("Loading your bookings..."):
        summary = context.dashboard.current(session.user_id)

    metric_cols = st.columns(3)
    metric_cols[0].metric("Total Rides", len(summary.rides))
    metric_cols[1].metric("Guide Bookings", len(summary.guide_bookings))
    metric_cols[2].metric("Active Bookings", summary.active_count)

    rides_col, guides_col = st.columns(2)
    with rides_col:
        st.subheader("My Rides")
        st.button("Book Ride", key="dashboard_book_ride", on_click=router.navigate, args=(Page.RIDES,))
        if not summary.rides:
            st.info("No rides booked yet.")
        for ride in summary.rides:
            _render_ride(ride)
    with guides_col:
        st.subheader("Guide Bookings")
        st.button("Book Guide", key="dashboard_book_guide", on_click=router.navigate, args=(Page.GUIDES,))
        if not summary.guide_bookings:
            st.info("No guide bookings yet.")
        for booking in summary.guide_bookings:
            _render_guide_booking(booking)


__all__ = ["render_dashboard_page"]
