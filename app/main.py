from __future__ import annotations

import sys
import os
import logging

# --- Add project root to sys.path ---
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import streamlit as st

# IMPORTS
from config import configure_logging, load_config
from db.database import get_supabase_client
from admin_dashboard import render_admin_dashboard
from auth import current_user
from navigation import (
    ADMIN,
    BOOKING,
    CATEGORY_PAGES,
    HOME,
    PAGES,
    SERVICES,
    SIGN_IN,
    apply_pending_navigation,
    on_sidebar_change,
    show_flash,
)
from public_pages import (
    render_auth_page,
    render_booking_page,
    render_category_page,
    render_contact_panel,
    render_home,
    render_services_index,
)

logger = logging.getLogger(__name__)


# --- CSS STYLING ---
def inject_custom_css():
    st.markdown("""
    <style>
        /* --- Maroon & gold theme accents --- */
        h1, h2, h3 { color: #8B1538; font-family: Georgia, serif; }

        div.stButton > button[kind="primary"] {
            background: linear-gradient(135deg, #8B1538 0%, #D4AF37 100%);
            border: none;
        }

        /* --- Hide Streamlit footer for clean look --- */
        footer {visibility: hidden;}
    </style>
    """, unsafe_allow_html=True)


def main():
    cfg = load_config()
    configure_logging(cfg.log_level)

    st.set_page_config(
        page_title=cfg.site_name,
        page_icon="🪔",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    inject_custom_css()
    # Shared booking links (?service=...) open straight on the booking form.
    if "nav_page" not in st.session_state and st.query_params.get("service"):
        st.session_state.nav_page = BOOKING
    apply_pending_navigation()
    show_flash()

    supabase = get_supabase_client()

    # --- SIDEBAR NAVIGATION ---
    with st.sidebar:
        st.title(cfg.site_name)
        page = st.radio("Go to", PAGES, key="nav_page", on_change=on_sidebar_change)
        user = current_user(st.session_state)
        if user:
            st.caption(f"👤 {user['email']}")
        st.divider()
        render_contact_panel(supabase)

    if page == HOME:
        render_home(supabase, cfg)
    elif page == SERVICES:
        render_services_index(supabase)
    elif page in CATEGORY_PAGES:
        render_category_page(supabase, CATEGORY_PAGES[page])
    elif page == BOOKING:
        render_booking_page(supabase, cfg)
    elif page == SIGN_IN:
        render_auth_page(supabase)
    elif page == ADMIN:
        render_admin_dashboard(supabase)
    else:
        logger.warning("Unknown page %r", page)
        st.error("Page not found.")


if __name__ == "__main__":
    main()
