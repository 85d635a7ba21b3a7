"""Navigation bar and footer."""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

import streamlit as st

from yatra.core.errors import AuthError
from yatra.ui.context import AppContext
from yatra.workflows.router import Page

_LOGGER = logging.getLogger(__name__)

NAV_STATUS_KEY = "_nav_status"

_PUBLIC_LINKS: Sequence[Tuple[str, Page]] = (
    ("Home", Page.HOME),
    ("Destinations", Page.DESTINATIONS),
    ("Book Ride", Page.RIDES),
    ("Hire Guide", Page.GUIDES),
)


def _sign_out(context: AppContext) -> None:
    try:
        context.session.end_session()
    except AuthError as exc:
        _LOGGER.warning("Sign-out did not reach the auth service: %s", exc)
        st.session_state[NAV_STATUS_KEY] = exc.message
    context.router.navigate(Page.HOME)


def render_navbar(context: AppContext) -> None:
    """Render the top navigation; buttons replace the current page."""

    router = context.router
    session = context.session
    account_links = 2
    columns = st.columns(len(_PUBLIC_LINKS) + account_links)
    for column, (label, page) in zip(columns, _PUBLIC_LINKS):
        column.button(
            label,
            key=f"nav_{page.value}",
            on_click=router.navigate,
            args=(page,),
            type="primary" if router.current is page else "secondary",
            use_container_width=True,
        )

    account_columns = columns[len(_PUBLIC_LINKS):]
    if session.is_authenticated:
        name = session.profile.full_name if session.profile and session.profile.full_name else "Dashboard"
        account_columns[0].button(
            name,
            key="nav_dashboard",
            on_click=router.navigate,
            args=(Page.DASHBOARD,),
            use_container_width=True,
        )
        account_columns[1].button(
            "Sign Out",
            key="nav_sign_out",
            on_click=_sign_out,
            args=(context,),
            use_container_width=True,
        )
    else:
        account_columns[0].button(
            "Sign In",
            key="nav_signin",
            on_click=router.navigate,
            args=(Page.SIGN_IN,),
            use_container_width=True,
        )
        account_columns[1].button(
            "Sign Up",
            key="nav_signup",
            on_click=router.navigate,
            args=(Page.SIGN_UP,),
            type="primary",
            use_container_width=True,
        )

    status = st.session_state.pop(NAV_STATUS_KEY, None)
    if status:
        st.warning(status)


def render_footer() -> None:
    st.divider()
    st.caption(
        "Yatra · Discover destinations, book rides and hire local guides across India. "
        "Support: support@yatra.example"
    )


__all__ = ["NAV_STATUS_KEY", "render_footer", "render_navbar"]
