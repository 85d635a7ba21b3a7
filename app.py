"""Streamlit entry point for the Yatra application."""
from __future__ import annotations

import logging
import time

import streamlit as st

from yatra.core.config import Settings, load_settings
from yatra.core.errors import ConfigurationError
from yatra.ui import get_context, render_footer, render_navbar, render_page
from yatra.ui.context import AppContext

_LOGGER = logging.getLogger(__name__)


def configure() -> Settings:
    """Configure global Streamlit settings and load the Supabase connection settings.

    Missing settings stop the script; nothing else can render without them.
    """

    st.set_page_config(page_title="Yatra", page_icon="🧭", layout="wide")
    try:
        return load_settings()
    except ConfigurationError as exc:
        _LOGGER.error("Startup failed: %s", exc)
        st.error(f"{exc.message}. Set SUPABASE_URL and SUPABASE_ANON_KEY and restart the app.")
        st.stop()
        raise


def _follow_redirect(context: AppContext) -> None:
    """Wait out a scheduled redirect, then rerun on the new page."""

    remaining = context.router.seconds_until_redirect()
    if remaining is None:
        return
    time.sleep(remaining)
    if context.router.due_redirect() is not None:
        st.rerun()


def render(settings: Settings) -> None:
    """Render the Yatra shell: navigation, current page and footer."""

    context = get_context(settings)
    context.session.refresh_if_needed()

    st.title("🧭 Yatra")
    render_navbar(context)
    render_page(context)
    if context.router.show_footer:
        render_footer()
    _follow_redirect(context)


if __name__ == "__main__":
    render(configure())
