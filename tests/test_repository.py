import pytest

from admin_actions import orders_after_move
from db.models import Service
from db.repository import (
    BackendError,
    create_booking,
    create_service,
    delete_booking,
    get_settings,
    has_role,
    insert_services,
    list_bookings,
    list_services,
    set_display_orders,
    set_service_active,
    update_booking,
    upload_image,
    upsert_setting,
)


def booking(**values):
    row = {
        "service_name": "Royal Mandap",
        "customer_name": "Lakshmi",
        "mobile": "9876543210",
        "event_date": "2025-06-14",
        "event_time": "18:30",
    }
    row.update(values)
    return row


def test_create_booking_defaults_to_pending(supabase):
    saved = create_booking(supabase, booking())
    assert saved["status"] == "pending"
    assert saved["created_at"]
    assert saved["id"]


def test_list_bookings_newest_first_and_filtered(supabase):
    create_booking(supabase, booking(customer_name="old", created_at="2025-01-01T00:00:00+00:00"))
    create_booking(supabase, booking(customer_name="new", created_at="2025-03-01T00:00:00+00:00", status="confirmed"))

    assert [b["customer_name"] for b in list_bookings(supabase)] == ["new", "old"]
    assert [b["customer_name"] for b in list_bookings(supabase, "all")] == ["new", "old"]
    assert [b["customer_name"] for b in list_bookings(supabase, "pending")] == ["old"]


def test_update_booking_rejects_unknown_status(supabase):
    with pytest.raises(ValueError):
        update_booking(supabase, "bookings-1", "archived", None)
    assert supabase.calls == []


def test_update_and_delete_booking(supabase):
    saved = create_booking(supabase, booking(notes="Venue: Hall"))
    update_booking(supabase, saved["id"], "confirmed", "Call first")
    [row] = supabase.tables["bookings"]
    assert row["status"] == "confirmed"
    assert row["notes"] == "Call first"
    assert row["details"] is None

    delete_booking(supabase, saved["id"])
    assert supabase.tables["bookings"] == []


def test_backend_failure_is_wrapped(supabase):
    supabase.fail("bookings", "select", "JWT expired")
    with pytest.raises(BackendError) as excinfo:
        list_bookings(supabase)
    assert excinfo.value.operation == "fetch bookings"
    assert excinfo.value.message == "JWT expired"


def test_blank_optional_service_fields_are_null(supabase):
    saved = create_service(supabase, Service(name="  Stage Lighting ", price=" ", category="lighting"))
    assert saved["name"] == "Stage Lighting"
    assert saved["price"] is None
    assert saved["description"] is None
    assert saved["is_active"] is True


def test_hidden_service_leaves_public_listing(supabase):
    saved = create_service(supabase, Service(name="Royal Mandap", category="wedding_mandap"))
    set_service_active(supabase, saved["id"], False)

    assert list_services(supabase, category="wedding_mandap", active_only=True) == []
    assert [s["name"] for s in list_services(supabase)] == ["Royal Mandap"]


def test_list_services_by_display_order(supabase):
    insert_services(supabase, [
        Service(name="B", display_order=2),
        Service(name="A", display_order=1),
    ])
    assert [s["name"] for s in list_services(supabase)] == ["A", "B"]


def test_insert_no_services(supabase):
    assert insert_services(supabase, []) == 0
    assert supabase.calls == []


def test_upsert_setting_updates_or_inserts(supabase, settings_rows):
    settings_rows(contact_phone="111")
    upsert_setting(supabase, "contact_phone", "222")
    upsert_setting(supabase, "contact_email", "hi@example.com", "Public email")

    assert get_settings(supabase) == {"contact_phone": "222", "contact_email": "hi@example.com"}
    assert len(supabase.tables["site_settings"]) == 2


def test_get_settings_null_values_are_blank(supabase, settings_rows):
    settings_rows(contact_phone=None, address="Main Road")
    assert get_settings(supabase, ["contact_phone"]) == {"contact_phone": ""}


def test_has_role(supabase):
    supabase.tables["user_roles"] = [
        {"user_id": "u1", "role": "admin"},
        {"user_id": "u2", "role": "user"},
    ]
    assert has_role(supabase, "u1") is True
    assert has_role(supabase, "u2") is False
    assert has_role(supabase, "u3") is False


def test_upload_image_returns_public_url(supabase):
    url = upload_image(supabase, "categories/1-abc.png", b"png", "image/png")
    assert url.endswith("/service-images/categories/1-abc.png")
    [(bucket, path, data, options)] = supabase.storage.uploads
    assert bucket == "service-images"
    assert options == {"content-type": "image/png"}


def test_move_up_keeps_untouched_rows_in_place(supabase):
    insert_services(supabase, [
        Service(name="A", display_order=10),
        Service(name="B", display_order=20),
        Service(name="C", display_order=30),
    ])
    services = list_services(supabase)
    set_display_orders(supabase, orders_after_move(services, 2, -1))
    assert [s["name"] for s in list_services(supabase)] == ["A", "C", "B"]
