"""Yatra Streamlit UI helpers."""

from __future__ import annotations

from typing import Callable, Dict

from yatra.workflows.router import Page

from .auth import render_sign_in_page, render_sign_up_page
from .context import APP_CONTEXT_KEY, AppContext, get_context
from .dashboard import render_dashboard_page
from .destinations import render_destinations_page
from .guides import render_guides_page
from .home import render_home_page
from .navigation import render_footer, render_navbar
from .rides import render_rides_page

PAGE_RENDERERS: Dict[Page, Callable[[AppContext], None]] = {
    Page.HOME: render_home_page,
    Page.SIGN_IN: render_sign_in_page,
    Page.SIGN_UP: render_sign_up_page,
    Page.DESTINATIONS: render_destinations_page,
    Page.RIDES: render_rides_page,
    Page.GUIDES: render_guides_page,
    Page.DASHBOARD: render_dashboard_page,
}


def render_page(context: AppContext) -> None:
    """Render whichever page the router currently points at."""

    renderer = PAGE_RENDERERS.get(context.router.current, render_home_page)
    renderer(context)


__all__ = [
    "APP_CONTEXT_KEY",
    "AppContext",
    "PAGE_RENDERERS",
    "get_context",
    "render_dashboard_page",
    "render_destinations_page",
    "render_footer",
    "render_guides_page",
    "render_home_page",
    "render_navbar",
    "render_page",
    "render_rides_page",
    "render_sign_in_page",
    "render_sign_up_page",
]
