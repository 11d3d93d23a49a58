from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Dict, List, Optional

import streamlit as st

from auth import AuthFailed, current_user, sign_in, sign_out, sign_up
from booking_flow import BookingForm, submit_booking
from categories import (
    EVENT_KINDS,
    FIXED_BY_KEY,
    FIXED_CATEGORIES,
    booking_link,
    custom_sections,
    load_category_displays,
    load_custom_categories,
)
from config import AppConfig
from db.repository import BackendError, list_services
from navigation import BOOKING, BOOKING_RESULT_KEY, CATEGORY_PAGES, HOME, SERVICES, flash, go_to
from notifier import whatsapp_link
from site_settings import CONTACT_KEYS, load_site_settings

logger = logging.getLogger(__name__)

FEATURES = [
    ("🏛️ Premium Mandaps", "Exquisite traditional and modern mandap designs for your wedding ceremony."),
    ("💡 Stunning Lighting", "Professional LED and decorative lighting to create the perfect ambiance."),
    ("✨ Complete Solutions", "From drums to driving services, we handle all your event needs."),
]


def page_header(title: str, subtitle: Optional[str] = None):
    st.title(title)
    if subtitle:
        st.caption(subtitle)
    st.divider()


def service_card(service: Dict[str, Any], key_prefix: str):
    with st.container(border=True):
        if service.get("image_url"):
            st.image(service["image_url"], use_container_width=True)
        st.subheader(service["name"])
        if service.get("description"):
            st.write(service["description"])
        if service.get("price"):
            st.markdown(f"**{service['price']}**")
        if st.button("Book Now", key=f"{key_prefix}_{service['id']}"):
            go_to(BOOKING, **booking_link(service["name"], service.get("category")))


def _grid(items: List[Any], columns: int = 3):
    cols = st.columns(columns)
    for i, item in enumerate(items):
        yield cols[i % columns], item


# ---------------------- HOME ----------------------

def render_home(supabase, cfg: AppConfig):
    try:
        settings = load_site_settings(supabase, ["site_title", "about_text", "contact_phone"])
    except BackendError as e:
        logger.warning("Home page settings unavailable: %s", e)
        settings = None

    title = (settings and settings.site_title) or cfg.site_name
    st.title(f"🙏 {title}")
    st.subheader("Wedding & Event Solutions")
    st.write(
        (settings and settings.about_text)
        or "Creating magical moments for your special day with premium mandaps, "
        "stunning lighting, and complete event solutions."
    )

    c1, c2 = st.columns(2)
    if c1.button("Explore Services", type="primary"):
        go_to(SERVICES)
    if settings and settings.contact_phone:
        c2.link_button("📞 Call Us Now", f"tel:{settings.contact_phone}")

    st.divider()
    for col, (heading, text) in _grid(FEATURES):
        with col:
            st.markdown(f"#### {heading}")
            st.write(text)


# ---------------------- SERVICES ----------------------

def render_services_index(supabase):
    page_header(
        "Our Services",
        "Comprehensive wedding and event solutions to make your special day unforgettable",
    )

    try:
        displays = load_category_displays(supabase)
        custom = load_custom_categories(supabase)
        active = list_services(supabase, active_only=True)
    except BackendError as e:
        st.error(f"Could not load services: {e.message}")
        return

    for col, cfg in _grid(FIXED_CATEGORIES):
        display = displays[cfg.key]
        with col, st.container(border=True):
            st.image(display.image, use_container_width=True)
            st.subheader(display.title)
            st.write(display.description)
            if st.button("View Varieties", key=f"cat_{cfg.key}"):
                go_to(display_page_for(cfg.key))

    for name, services in custom_sections(custom, active).items():
        st.header(name)
        for col, service in _grid(services):
            with col:
                service_card(service, f"custom_{name}")


def display_page_for(category_key: str) -> str:
    return next(page for page, key in CATEGORY_PAGES.items() if key == category_key)


def render_category_page(supabase, category_key: str):
    cfg = FIXED_BY_KEY[category_key]
    page_header(cfg.page_title, cfg.page_subtitle)

    try:
        services = list_services(supabase, category=category_key, active_only=True)
    except BackendError as e:
        st.error(f"Could not load services: {e.message}")
        return

    if not services:
        st.info("New varieties are coming soon. Please check back or contact us.")
        return

    for col, service in _grid(services):
        with col:
            service_card(service, category_key)


# ---------------------- BOOKING ----------------------

def _booking_success(service_name: str):
    st.success("Booking Successful!")
    st.write(
        f"Your booking for **{service_name}** has been received. "
        "Our team will contact you shortly to confirm availability."
    )
    if st.button("Browse More Services"):
        st.session_state.pop(BOOKING_RESULT_KEY, None)
        go_to(SERVICES)


def render_booking_page(supabase, cfg: AppConfig):
    service_name = st.query_params.get("service", "")
    category = st.query_params.get("category") or None

    if st.button("← Back to Services"):
        go_to(SERVICES)

    page_header("Book Your Service")

    done = st.session_state.get(BOOKING_RESULT_KEY)
    if done and done["service_name"] == service_name:
        _booking_success(service_name)
        return

    if not service_name:
        st.info("Please choose a service first.")
        return

    form = BookingForm(service_name=service_name, category=category)
    kind = form.kind

    with st.form("booking_form"):
        st.text_input("Service", value=service_name, disabled=True)
        form.customer_name = st.text_input("Your Name", placeholder="Enter your full name")
        form.mobile = st.text_input("Mobile Number", placeholder="Enter your mobile number")
        c1, c2 = st.columns(2)
        event_date = c1.date_input("Event Date", value=None, min_value=date.today())
        event_time = c2.time_input("Event Time", value=None, step=900)

        if kind == "driving":
            form.pickup = st.text_input("Pickup Location *", placeholder="Where should the driver pick you up?")
            form.drop = st.text_input("Drop Location *", placeholder="Where are you going?")
        elif kind in EVENT_KINDS:
            form.venue = st.text_input("Venue (optional)", placeholder="Event venue or address")
            guests = st.number_input("Expected Guests (optional)", min_value=0, step=10, value=0)
            form.guests = str(guests) if guests else ""

        form.additional_notes = st.text_area("Additional Notes (optional)")
        submitted = st.form_submit_button("Confirm Booking", type="primary")

    st.caption("Our team will contact you within 24 hours to confirm your booking")

    if not submitted:
        return

    form.event_date = event_date.isoformat() if isinstance(event_date, date) else ""
    form.event_time = event_time.strftime("%H:%M") if isinstance(event_time, time) else ""

    result = submit_booking(supabase, cfg.email, form)
    if result["field_errors"]:
        st.error("Please fill all fields. All fields are required to complete your booking.")
        for msg in result["field_errors"].values():
            st.warning(msg)
        return
    if not result["success"]:
        st.error(f"Booking failed: {result['error']}")
        return

    st.session_state[BOOKING_RESULT_KEY] = {"service_name": service_name, **result}
    st.toast("Booking Confirmed! ✅ Our team will check availability and confirm shortly.")
    st.rerun()


# ---------------------- AUTH ----------------------

def render_auth_page(supabase):
    user = current_user(st.session_state)
    if user:
        st.success(f"Signed in as {user['email']}")
        if st.button("Sign Out"):
            sign_out(supabase, st.session_state)
            go_to(HOME)
        return

    mode = st.radio("Account", ["Sign In", "Create Account"], horizontal=True, label_visibility="collapsed")
    creating = mode == "Create Account"
    page_header(
        "Create Account" if creating else "Welcome Back",
        "Sign up to book our services" if creating else "Sign in to your account",
    )

    with st.form("auth_form"):
        full_name = st.text_input("Full Name", placeholder="Your full name") if creating else ""
        email = st.text_input("Email Address", placeholder="you@example.com")
        password = st.text_input("Password", type="password", placeholder="Enter your password")
        submitted = st.form_submit_button("Create Account" if creating else "Sign In")

    if not submitted:
        return

    try:
        if creating:
            sign_up(supabase, email, password, full_name)
            st.success("Account Created! You can now sign in with your credentials.")
        else:
            sign_in(supabase, st.session_state, email, password)
            flash("success", "Welcome back! You have successfully signed in.")
            go_to(HOME)
    except AuthFailed as e:
        st.error(f"{'Signup' if creating else 'Login'} Failed: {e.message}")


# ---------------------- CONTACT ----------------------

def render_contact_panel(supabase):
    try:
        settings = load_site_settings(supabase, CONTACT_KEYS)
    except BackendError as e:
        logger.warning("Contact settings unavailable: %s", e)
        st.caption("Contact details are unavailable right now.")
        return

    st.markdown("### Contact Us")
    if settings.contact_phone:
        st.markdown(f"📞 [{settings.contact_phone}](tel:{settings.contact_phone})")
    if settings.contact_email:
        st.markdown(f"✉️ [{settings.contact_email}](mailto:{settings.contact_email})")
    if settings.contact_address:
        st.markdown(f"📍 {settings.contact_address}")
    if settings.whatsapp_number:
        st.link_button("💬 Chat on WhatsApp", whatsapp_link(settings.whatsapp_number))
