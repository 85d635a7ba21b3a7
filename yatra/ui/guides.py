"""Guide catalog and guide booking page."""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

import streamlit as st

from yatra.core.errors import YatraError
from yatra.schemas import MAX_GUIDE_HOURS, MIN_GUIDE_HOURS, Destination, GuideWithProfile
from yatra.ui.context import AppContext
from yatra.ui.feedback import format_error, settle_workflow, stars
from yatra.workflows.booking import BookingState
from yatra.workflows.catalog import load_destinations, load_guides

SEARCH_KEY = "guides_search"
BOOKING_OPEN_KEY = "_guide_booking_open"
DURATION_KEY = "guide_booking_duration"
DEFAULT_DURATION_HOURS = 4


def _open_booking(context: AppContext, guide: GuideWithProfile) -> None:
    try:
        context.guide_booking.select(guide)
    except YatraError as exc:
        context.guide_booking.error = format_error(exc)
        return
    st.session_state[BOOKING_OPEN_KEY] = True


def _close_booking() -> None:
    st.session_state[BOOKING_OPEN_KEY] = False


def _render_guide_card(context: AppContext, guide: GuideWithProfile, *, key_prefix: str) -> None:
    with st.container(border=True):
        st.markdown(f"**{guide.display_name}**")
        st.caption(f"{stars(guide.rating)} · {guide.experience_years} years · {guide.total_bookings} bookings")
        if guide.specialization:
            st.caption("Specialization: " + ", ".join(guide.specialization))
        if guide.languages:
            st.caption("Languages: " + ", ".join(guide.languages))
        if guide.bio:
            st.write(guide.bio)
        st.markdown(f"**₹{guide.hourly_rate:,.0f}/hour**")
        st.button(
            "Book Now",
            key=f"{key_prefix}_{guide.id}",
            on_click=_open_booking,
            args=(context, guide),
            use_container_width=True,
        )


def _destination_choices(context: AppContext) -> Dict[str, Destination]:
    browser = context.destinations
    if not browser.loaded:
        browser.refresh(lambda: load_destinations(context.store))
    return {destination.id: destination for destination in browser.items}


def _render_booking_form(context: AppContext) -> None:
    workflow = context.guide_booking
    guide = workflow.selected
    if guide is None:
        return

    st.subheader(f"Book {guide.display_name}")
    if workflow.error:
        st.error(workflow.error)

    destinations = _destination_choices(context)
    with st.form("guide_booking_form", clear_on_submit=False):
        booking_date: date = st.date_input("Booking Date", min_value=date.today())
        duration = st.number_input(
            "Duration (hours)",
            min_value=MIN_GUIDE_HOURS,
            max_value=MAX_GUIDE_HOURS,
            value=DEFAULT_DURATION_HOURS,
            step=1,
            key=DURATION_KEY,
        )
        destination_id: Optional[str] = st.selectbox(
            "Destination (optional)",
            options=[None, *destinations],
            format_func=lambda value: "No specific destination" if value is None else destinations[value].name,
        )
        estimate = workflow.estimate(int(duration))
        if estimate is not None:
            st.caption(f"Estimated total: ₹{estimate:,.0f} ({guide.hourly_rate:,.0f} × {int(duration)} hours)")
        confirm_col, cancel_col = st.columns(2)
        confirmed = confirm_col.form_submit_button(
            "Confirm",
            disabled=not workflow.can_submit,
            type="primary",
            use_container_width=True,
        )
        cancelled = cancel_col.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        _close_booking()
        st.rerun()
    if confirmed:
        with st.spinner("Booking..."):
            outcome = workflow.submit(
                booking_date=booking_date,
                duration_hours=int(duration),
                destination_id=destination_id,
            )
        if outcome.succeeded:
            _close_booking()
        st.rerun()


def render_guides_page(context: AppContext) -> None:
    workflow = context.guide_booking
    settle_workflow(workflow, context.router)

    st.header("Hire a Local Guide")
    st.caption("Experienced guides who know every story behind every stone.")

    if workflow.state is BookingState.SUCCEEDED:
        st.success("Guide Booked! Your guide booking request has been sent. Redirecting to dashboard...")
        return

    if st.session_state.get(BOOKING_OPEN_KEY):
        _render_booking_form(context)
        st.divider()
    elif workflow.error:
        st.error(workflow.error)

    if workflow.state is BookingState.IDLE:
        workflow.load_candidates()
    if workflow.candidates:
        st.subheader("Top rated")
        top_columns = st.columns(len(workflow.candidates))
        for column, guide in zip(top_columns, workflow.candidates):
            with column:
                _render_guide_card(context, guide, key_prefix="guide_top")

    query = st.text_input("Search", placeholder="Search by name, specialization, or language...", key=SEARCH_KEY)
    browser = context.guides
    if not browser.loaded:
        with st.spinner("Loading guides..."):
            browser.refresh(lambda: load_guides(context.store))
    if browser.error:
        st.error(browser.error)
        return

    results = browser.filtered(query)
    if not results:
        st.info("No guides found. Try a different search.")
        return

    st.subheader("All guides")
    columns = st.columns(2)
    for index, guide in enumerate(results):
        with columns[index % 2]:
            _render_guide_card(context, guide, key_prefix="guide_book")


__all__ = ["render_guides_page"]
