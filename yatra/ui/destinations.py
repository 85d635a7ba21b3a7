"""Destination catalog page."""

from __future__ import annotations

import streamlit as st

from yatra.schemas import DESTINATION_CATEGORIES
from yatra.ui.context import AppContext
from yatra.ui.feedback import stars
from yatra.workflows.catalog import ALL_CATEGORIES, load_destinations

SEARCH_KEY = "destinations_search"
CATEGORY_KEY = "destinations_category"

_CATEGORY_OPTIONS = (ALL_CATEGORIES, *DESTINATION_CATEGORIES)


def render_destinations_page(context: AppContext) -> None:
    st.header("Explore Destinations")
    st.caption("From ancient forts to quiet beaches, find your next stop.")

    search_col, category_col = st.columns([3, 1])
    query = search_col.text_input("Search", placeholder="Search by name, city, or state...", key=SEARCH_KEY)
    category = category_col.selectbox(
        "Category",
        options=_CATEGORY_OPTIONS,
        format_func=str.capitalize,
        key=CATEGORY_KEY,
    )

    browser = context.destinations
    if not browser.loaded:
        with st.spinner("Loading destinations..."):
            browser.refresh(lambda: load_destinations(context.store))
    if browser.error:
        st.error(browser.error)
        st.button("Retry", key="destinations_retry", on_click=browser.refresh, args=(lambda: load_destinations(context.store),))
        return

    results = browser.filtered(query, category)
    if not results:
        st.info("No destinations found. Try a different search or category.")
        return

    st.caption(f"{len(results)} destinations")
    columns = st.columns(3)
    for index, destination in enumerate(results):
        with columns[index % 3]:
            with st.container(border=True):
                if destination.image_url:
                    st.image(destination.image_url, use_container_width=True)
                badges = [destination.category.capitalize()]
                if destination.popular:
                    badges.append("Popular")
                st.caption(" · ".join(badges))
                st.markdown(f"**{destination.name}**")
                st.caption(f"{destination.city}, {destination.state} · {stars(destination.rating)}")
                if destination.description:
                    st.write(destination.description)


__all__ = ["render_destinations_page"]
