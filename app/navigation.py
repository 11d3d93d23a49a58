# app/navigation.py

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping

import streamlit as st

from categories import FIXED_CATEGORIES

HOME = "Home"
SERVICES = "Services"
BOOKING = "Book a Service"
SIGN_IN = "Sign In"
ADMIN = "Admin"

CATEGORY_PAGES: Dict[str, str] = {c.default_title: c.key for c in FIXED_CATEGORIES}

PAGES: List[str] = [HOME, SERVICES, *CATEGORY_PAGES, BOOKING, SIGN_IN, ADMIN]

# Confirmation of the last submitted booking, shown until the visitor moves on.
BOOKING_RESULT_KEY = "booking_result"


def prepare_navigation(session: MutableMapping[str, Any], page: str) -> None:
    session["pending_nav"] = page
    if page == BOOKING:
        # A fresh trip to the booking page always starts with an empty form.
        session.pop(BOOKING_RESULT_KEY, None)


def go_to(page: str, **params: str) -> None:
    """Switch page on the next run. Widgets keyed "nav_page" can't be set mid-run."""
    prepare_navigation(st.session_state, page)
    st.query_params.clear()
    for key, value in params.items():
        st.query_params[key] = value
    st.rerun()


def on_sidebar_change() -> None:
    st.session_state.pop(BOOKING_RESULT_KEY, None)


def apply_pending_navigation() -> None:
    if "pending_nav" in st.session_state:
        st.session_state.nav_page = st.session_state.pop("pending_nav")


def flash(level: str, message: str) -> None:
    st.session_state.flash = (level, message)


def show_flash() -> None:
    if "flash" not in st.session_state:
        return
    level, message = st.session_state.pop("flash")
    icon = {"error": "🚫", "success": "✅"}.get(level, "ℹ️")
    st.toast(message, icon=icon)
