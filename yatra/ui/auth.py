"""Sign-in and sign-up pages."""

from __future__ import annotations

import logging

import streamlit as st

from yatra.core.config import SIGNUP_REDIRECT_DELAY_SECONDS
from yatra.core.errors import YatraError
from yatra.schemas import USER_TYPES
from yatra.ui.context import AppContext
from yatra.ui.feedback import format_error
from yatra.workflows.router import Page

_LOGGER = logging.getLogger(__name__)

AUTH_ERROR_KEY = "_auth_error"
SIGNUP_SUCCESS_KEY = "_signup_success"

_ROLE_LABELS = {
    "tourist": "Tourist",
    "driver": "Driver",
    "guide": "Guide",
}


def _show_error() -> None:
    message = st.session_state.pop(AUTH_ERROR_KEY, None)
    if message:
        st.error(message)


def render_sign_in_page(context: AppContext) -> None:
    st.header("Welcome back")
    st.caption("Sign in to manage your rides and guide bookings.")
    _show_error()

    with st.form("sign_in_form", clear_on_submit=False):
        email = st.text_input("Email", key="sign_in_email")
        password = st.text_input("Password", type="password", key="sign_in_password")
        submitted = st.form_submit_button("Sign In", use_container_width=True)

    if submitted:
        try:
            context.session.authenticate(email, password)
        except YatraError as exc:
            _LOGGER.info("Sign-in rejected: %s", exc)
            st.session_state[AUTH_ERROR_KEY] = format_error(exc)
        else:
            context.router.navigate(Page.DASHBOARD)
        st.rerun()

    st.button("Don't have an account? Sign up", key="sign_in_to_signup", on_click=context.router.navigate, args=(Page.SIGN_UP,))


def render_sign_up_page(context: AppContext) -> None:
    st.header("Create your account")
    if st.session_state.get(SIGNUP_SUCCESS_KEY) and context.router.pending is not None:
        st.success("Account created! Redirecting to your dashboard...")
        return
    st.session_state.pop(SIGNUP_SUCCESS_KEY, None)
    _show_error()

    with st.form("sign_up_form", clear_on_submit=False):
        full_name = st.text_input("Full Name", key="sign_up_full_name")
        email = st.text_input("Email", key="sign_up_email")
        password = st.text_input(
            "Password",
            type="password",
            key="sign_up_password",
            help="At least 6 characters.",
        )
        role = st.radio(
            "I am a",
            options=list(USER_TYPES),
            format_func=lambda value: _ROLE_LABELS.get(value, value),
            horizontal=True,
            key="sign_up_role",
        )
        submitted = st.form_submit_button("Sign Up", use_container_width=True)

    if submitted:
        try:
            context.session.register(email, password, full_name, role)
        except YatraError as exc:
            _LOGGER.info("Sign-up rejected: %s", exc)
            st.session_state[AUTH_ERROR_KEY] = format_error(exc)
        else:
            st.session_state[SIGNUP_SUCCESS_KEY] = True
            context.router.schedule(Page.DASHBOARD, SIGNUP_REDIRECT_DELAY_SECONDS)
        st.rerun()

    st.button("Already have an account? Sign in", key="sign_up_to_signin", on_click=context.router.navigate, args=(Page.SIGN_IN,))


__all__ = ["render_sign_in_page", "render_sign_up_page"]
