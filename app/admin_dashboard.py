from __future__ import annotations

from typing import Any, Dict, List, Optional

import plotly.express as px
import streamlit as st
from pydantic import ValidationError

from admin_actions import (
    apply_booking_edit,
    booking_stats,
    bookings_frame,
    form_display_order,
    image_upload_path,
    orders_after_move,
    resolve_category_choice,
    validate_image_upload,
)
from auth import AuthFailed, admin_access, current_user, sign_in, sign_out
from categories import (
    FIXED_BY_KEY,
    FIXED_CATEGORIES,
    OTHER_OPTION,
    STARTER_SERVICES,
    CategoryDisplay,
    add_custom_category,
    category_label,
    category_options,
    load_category_displays,
    load_custom_categories,
    remove_custom_category,
    reset_category_display,
    save_category_display,
)
from db.models import BOOKING_STATUSES, Service
from db.repository import (
    BackendError,
    create_service,
    delete_booking,
    delete_service,
    insert_services,
    list_bookings,
    list_services,
    set_display_orders,
    set_service_active,
    update_service,
    upload_image,
)
from navigation import HOME, flash, go_to
from site_settings import (
    SETTING_FIELDS,
    SettingsValidationError,
    SiteSettings,
    load_site_settings,
    save_site_settings,
)


def _notice_error(title: str, e: Exception) -> None:
    st.toast(f"{title}: {getattr(e, 'message', e)}", icon="⚠️")


# ---------------------- BOOKINGS ----------------------

@st.dialog("Delete Booking")
def _confirm_delete_booking(supabase, booking: Dict[str, Any]):
    st.write(
        f"Are you sure you want to delete this booking for **{booking['customer_name']}**? "
        "This action cannot be undone."
    )
    c1, c2 = st.columns(2)
    if c1.button("Cancel"):
        st.rerun()
    if c2.button("Delete", type="primary"):
        try:
            delete_booking(supabase, booking["id"])
            st.toast("Booking Deleted", icon="🗑️")
            st.rerun()
        except BackendError as e:
            st.error(f"Error deleting booking: {e.message}")


def render_bookings_manager(supabase):
    f1, f2 = st.columns([4, 1])
    status_filter = f1.radio(
        "Filter by Status",
        ["all"] + BOOKING_STATUSES,
        format_func=str.capitalize,
        horizontal=True,
        key="booking_status_filter",
    )
    if f2.button("🔄 Refresh", key="refresh_bookings"):
        st.rerun()

    try:
        bookings = list_bookings(supabase, status_filter)
    except BackendError as e:
        st.error(f"Error fetching bookings: {e.message}")
        return

    # --- KPI Metrics ---
    stats = booking_stats(bookings)
    cols = st.columns(4)
    cols[0].metric("Total Bookings", stats["total"])
    cols[1].metric("Pending", stats["pending"])
    cols[2].metric("Confirmed", stats["confirmed"])
    cols[3].metric("Completed", stats["completed"])

    if not bookings:
        st.info("No bookings found")
        return

    df = bookings_frame(bookings)

    if status_filter == "all":
        chart_df = df["status"].value_counts().rename_axis("status").reset_index(name="count")
        st.plotly_chart(
            px.pie(chart_df, names="status", values="count", title="Bookings by Status"),
            use_container_width=True,
        )

    display_cols = [
        "service_name", "customer_name", "mobile", "event_date", "event_time", "status", "details_text",
    ]
    final_cols = [c for c in display_cols if c in df.columns]
    st.dataframe(
        df[final_cols].rename(columns={"details_text": "details"}),
        use_container_width=True,
        hide_index=True,
    )

    # --- Actions ---
    st.write("### Edit Booking")
    selected = st.selectbox(
        "Booking",
        bookings,
        format_func=lambda b: f"{b['customer_name']} · {b['service_name']} · {b['event_date']}",
        key="booking_to_edit",
    )

    with st.form(f"edit_booking_{selected['id']}"):
        status = st.selectbox(
            "Status",
            BOOKING_STATUSES,
            index=BOOKING_STATUSES.index(selected["status"]) if selected.get("status") in BOOKING_STATUSES else 0,
            format_func=str.capitalize,
        )
        notes = st.text_area("Notes", value=selected.get("notes") or "", placeholder="Add notes...")
        if st.form_submit_button("Save Changes"):
            try:
                apply_booking_edit(supabase, selected, status, notes)
                st.toast("Booking Updated", icon="✅")
                st.rerun()
            except BackendError as e:
                _notice_error("Error updating booking", e)

    c1, c2 = st.columns([1, 1])
    if c1.button("🗑️ Delete Booking", key=f"delete_booking_{selected['id']}"):
        _confirm_delete_booking(supabase, selected)

    csv = df[final_cols].to_csv(index=False).encode("utf-8")
    c2.download_button("📥 Download as CSV", csv, "bookings.csv", "text/csv", key="download-csv")


# ---------------------- SERVICES ----------------------

@st.dialog("Delete Service")
def _confirm_delete_service(supabase, service: Dict[str, Any]):
    st.write(f"Are you sure you want to delete **{service['name']}**? This action cannot be undone.")
    c1, c2 = st.columns(2)
    if c1.button("Cancel"):
        st.rerun()
    if c2.button("Delete", type="primary"):
        try:
            delete_service(supabase, service["id"])
            st.toast("Service Deleted", icon="🗑️")
            st.rerun()
        except BackendError as e:
            st.error(f"Error deleting service: {e.message}")


def _service_form(supabase, existing: Optional[Dict[str, Any]], custom: List[str], next_order: int):
    existing = existing or {}
    options = category_options(custom)
    current = existing.get("category")
    if current and current not in options:
        # Legacy free-text category that was never registered.
        options.insert(len(options) - 1, current)

    form_key = f"service_form_{existing.get('id', 'new')}"
    with st.form(form_key):
        name = st.text_input("Name *", value=existing.get("name", ""), placeholder="Service name")
        description = st.text_area("Description", value=existing.get("description") or "")
        c1, c2 = st.columns(2)
        choice = c1.selectbox(
            "Category",
            [""] + options,
            index=([""] + options).index(current) if current in options else 0,
            format_func=lambda v: category_label(v) if v else "—",
        )
        new_category = c1.text_input("New category name (when Other)")
        price = c2.text_input("Price", value=existing.get("price") or "", placeholder="e.g., ₹25,000")
        image_url = st.text_input("Image URL", value=existing.get("image_url") or "", placeholder="https://...")
        c3, c4 = st.columns(2)
        display_order = c3.number_input(
            "Display order", min_value=0, step=1, value=form_display_order(existing, next_order)
        )
        is_active = c4.checkbox("Active (visible on website)", value=existing.get("is_active", True))

        label = "Save Changes" if existing else "Create Service"
        if not st.form_submit_button(label):
            return

    if not name.strip():
        st.error("Service name is required.")
        return
    if choice == OTHER_OPTION and not new_category.strip():
        st.error("Please enter a name for the new category.")
        return

    try:
        category = resolve_category_choice(supabase, choice, new_category)
        service = Service(
            name=name,
            description=description,
            image_url=image_url,
            price=price,
            category=category,
            is_active=is_active,
            display_order=int(display_order),
        )
        if existing:
            update_service(supabase, existing["id"], service)
            st.toast("Service Updated", icon="✅")
        else:
            create_service(supabase, service)
            st.toast("Service Created", icon="✅")
        st.session_state.pop("editing_service", None)
        st.rerun()
    except (BackendError, ValueError, ValidationError) as e:
        _notice_error("Error saving service", e)


def render_services_manager(supabase):
    try:
        services = list_services(supabase)
        custom = load_custom_categories(supabase)
    except BackendError as e:
        st.error(f"Error fetching services: {e.message}")
        return

    top1, top2 = st.columns([3, 1])
    top1.subheader("Services")
    if top2.button("➕ Add Service"):
        st.session_state.editing_service = "new"

    if not services:
        st.info("No services found. Add your first service!")
        if st.button("Load starter catalog"):
            try:
                count = insert_services(supabase, STARTER_SERVICES)
                st.toast(f"Added {count} services.", icon="✅")
                st.rerun()
            except BackendError as e:
                _notice_error("Error seeding services", e)

    for i, service in enumerate(services):
        with st.container(border=True):
            c_img, c_info, c_actions = st.columns([1, 4, 3])
            if service.get("image_url"):
                c_img.image(service["image_url"], use_container_width=True)
            status = "🟢 Active" if service.get("is_active") else "⚪ Hidden"
            c_info.markdown(
                f"**{service['name']}**  \n"
                f"{category_label(service.get('category'))} · {service.get('price') or '—'} · {status}"
            )
            if service.get("description"):
                c_info.caption(service["description"])

            a1, a2, a3, a4, a5 = c_actions.columns(5)
            sid = service["id"]
            if a1.button("⬆️", key=f"up_{sid}", help="Move up"):
                orders = orders_after_move(services, i, -1)
                if orders:
                    _run(lambda: set_display_orders(supabase, orders), "Error reordering services")
            if a2.button("⬇️", key=f"down_{sid}", help="Move down"):
                orders = orders_after_move(services, i, 1)
                if orders:
                    _run(lambda: set_display_orders(supabase, orders), "Error reordering services")
            toggle_label = "🙈" if service.get("is_active") else "👁️"
            if a3.button(toggle_label, key=f"toggle_{sid}", help="Hide" if service.get("is_active") else "Show"):
                _run(
                    lambda: set_service_active(supabase, sid, not service.get("is_active")),
                    "Error updating service",
                )
            if a4.button("✏️", key=f"edit_{sid}", help="Edit"):
                st.session_state.editing_service = sid
            if a5.button("🗑️", key=f"del_{sid}", help="Delete"):
                _confirm_delete_service(supabase, service)

    editing = st.session_state.get("editing_service")
    if editing:
        st.divider()
        existing = None if editing == "new" else next((s for s in services if s["id"] == editing), None)
        st.subheader("Add New Service" if existing is None else "Edit Service")
        _service_form(supabase, existing, custom, len(services))
        if st.button("Cancel", key="cancel_service_edit"):
            st.session_state.pop("editing_service", None)
            st.rerun()


def _run(action, error_title: str) -> None:
    try:
        action()
        st.rerun()
    except BackendError as e:
        _notice_error(error_title, e)


# ---------------------- CATEGORIES ----------------------

def _category_editor(supabase, display: CategoryDisplay):
    cfg = FIXED_BY_KEY[display.key]
    with st.expander(f"{display.title}  ({cfg.default_title})"):
        st.image(display.image, width=240)
        with st.form(f"category_{display.key}"):
            title = st.text_input("Title", value=display.title)
            description = st.text_area("Description", value=display.description)
            image = st.text_input("Image URL", value=display.image)
            upload = st.file_uploader("…or upload an image", type=["jpg", "jpeg", "png", "webp", "gif"])
            saved = st.form_submit_button("💾 Save")

        if saved:
            try:
                if upload is not None:
                    error = validate_image_upload(upload.type, upload.size)
                    if error:
                        st.error(error)
                        return
                    image = upload_image(supabase, image_upload_path(upload.name), upload.getvalue(), upload.type)
                save_category_display(supabase, CategoryDisplay(display.key, title, description, image))
                st.toast("Category updated", icon="✅")
                st.rerun()
            except BackendError as e:
                _notice_error("Error saving category", e)

        if st.button("↩️ Reset to default", key=f"reset_{display.key}"):
            _run(lambda: reset_category_display(supabase, display.key), "Error resetting category")


def render_categories_manager(supabase):
    try:
        displays = load_category_displays(supabase)
        custom = load_custom_categories(supabase)
    except BackendError as e:
        st.error(f"Error loading categories: {e.message}")
        return

    st.subheader("Service Categories")
    for cfg in FIXED_CATEGORIES:
        _category_editor(supabase, displays[cfg.key])

    st.subheader("Custom Categories")
    if not custom:
        st.caption("No custom categories yet.")
    for name in custom:
        c1, c2 = st.columns([4, 1])
        c1.write(name)
        if c2.button("Remove", key=f"remove_cat_{name}"):
            _run(lambda n=name: remove_custom_category(supabase, n), "Error removing category")

    with st.form("add_custom_category", clear_on_submit=True):
        new_name = st.text_input("New category")
        if st.form_submit_button("Add Category"):
            try:
                add_custom_category(supabase, new_name)
                st.rerun()
            except ValueError as e:
                st.error(str(e))
            except BackendError as e:
                _notice_error("Error adding category", e)


# ---------------------- SETTINGS ----------------------

def render_settings_manager(supabase):
    try:
        current = load_site_settings(supabase)
    except BackendError as e:
        st.error(f"Error fetching settings: {e.message}")
        return

    st.subheader("Website Settings")
    values: Dict[str, str] = {}
    with st.form("site_settings"):
        for key, field in SETTING_FIELDS.items():
            value = getattr(current, key)
            if field.kind == "textarea":
                values[key] = st.text_area(field.label, value=value, help=field.description)
            else:
                values[key] = st.text_input(field.label, value=value, help=field.description)
        submitted = st.form_submit_button("💾 Save All")

    if submitted:
        try:
            save_site_settings(supabase, SiteSettings(**values))
            st.toast("Settings Saved", icon="✅")
        except SettingsValidationError as e:
            for msg in e.errors.values():
                st.error(msg)
        except BackendError as e:
            _notice_error("Error saving settings", e)


# ---------------------- ENTRY ----------------------

def render_admin_login(supabase):
    st.title("🔐 Admin Login")
    with st.form("admin_login"):
        email = st.text_input("Email Address", placeholder="admin@example.com")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign In"):
            try:
                sign_in(supabase, st.session_state, email, password)
                st.rerun()
            except AuthFailed as e:
                st.error(f"Login Failed: {e.message}")


def render_admin_dashboard(supabase):
    access = admin_access(st.session_state)
    if access == "login":
        render_admin_login(supabase)
        return
    if access == "denied":
        flash("error", "Access Denied: you do not have admin privileges.")
        go_to(HOME)

    user = current_user(st.session_state)
    h1, h2 = st.columns([4, 1])
    h1.title("📊 Admin Dashboard")
    h1.caption(f"Signed in as {user['email']}")
    if h2.button("Sign Out"):
        sign_out(supabase, st.session_state)
        go_to(HOME)

    bookings_tab, categories_tab, services_tab, settings_tab = st.tabs(
        ["📅 Bookings", "📁 Categories", "✨ Services", "⚙️ Settings"]
    )
    with bookings_tab:
        render_bookings_manager(supabase)
    with categories_tab:
        render_categories_manager(supabase)
    with services_tab:
        render_services_manager(supabase)
    with settings_tab:
        render_settings_manager(supabase)
