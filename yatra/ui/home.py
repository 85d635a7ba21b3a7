"""Landing page with popular destinations."""

from __future__ import annotations

import streamlit as st

from yatra.ui.context import AppContext
from yatra.ui.feedback import stars
from yatra.workflows.catalog import load_popular_destinations
from yatra.workflows.router import Page

_FEATURES = (
    ("Verified drivers", "Sedans, SUVs, luxury cars and tempo travellers from rated local drivers."),
    ("Local guides", "Hire experienced guides who speak your language, by the hour."),
    ("Curated places", "Heritage sites, beaches, hill stations and pilgrim routes in one place."),
)


def render_home_page(context: AppContext) -> None:
    router = context.router
    st.title("Explore India your way")
    st.write("Discover destinations, book a ride, and travel with a trusted local guide.")

    cta_cols = st.columns(2)
    cta_cols[0].button("Book a Ride", key="home_book_ride", on_click=router.navigate, args=(Page.RIDES,), type="primary")
    cta_cols[1].button("Explore Destinations", key="home_explore", on_click=router.navigate, args=(Page.DESTINATIONS,))

    feature_cols = st.columns(len(_FEATURES))
    for column, (title, description) in zip(feature_cols, _FEATURES):
        with column:
            st.markdown(f"**{title}**")
            st.caption(description)

    st.subheader("Popular destinations")
    popular = context.popular
    if not popular.loaded:
        with st.spinner("Loading destinations..."):
            popular.refresh(lambda: load_popular_destinations(context.store))
    if popular.error:
        st.error(popular.error)
    elif not popular.items:
        st.info("No popular destinations yet.")
    else:
        columns = st.columns(3)
        for index, destination in enumerate(popular.items):
            with columns[index % 3]:
                if destination.image_url:
                    st.image(destination.image_url, use_container_width=True)
                st.markdown(f"**{destination.name}**")
                st.caption(f"{destination.city}, {destination.state} · {stars(destination.rating)}")
                st.button(
                    "View",
                    key=f"home_destination_{destination.id}",
                    on_click=router.navigate,
                    args=(Page.DESTINATIONS,),
                )
        st.button("View all destinations", key="home_view_all", on_click=router.navigate, args=(Page.DESTINATIONS,))

    if not context.session.is_authenticated:
        st.divider()
        st.markdown("#### Ready to start your journey?")
        st.button("Create your account", key="home_signup", on_click=router.navigate, args=(Page.SIGN_UP,))


__all__ = ["render_home_page"]
