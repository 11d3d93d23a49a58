import pytest

from booking_flow import BookingForm, build_booking_row, get_missing_fields, submit_booking


def complete_form(service_name="Royal Mandap", category=None, **extra):
    values = dict(
        customer_name="Lakshmi",
        mobile="+91 98765 43210",
        event_date="2025-06-14",
        event_time="18:30",
    )
    values.update(extra)
    return BookingForm(service_name=service_name, category=category, **values)


class RecordingNotifier:
    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result or {"success": True, "emailSent": True, "whatsappLink": None}
        self.error = error

    def __call__(self, email_cfg, payload):
        self.calls.append(payload)
        if self.error:
            raise self.error
        return self.result


@pytest.mark.parametrize("missing", ["customer_name", "mobile", "event_date", "event_time"])
def test_required_fields(supabase, missing):
    form = complete_form(**{missing: "   "})
    notify = RecordingNotifier()

    result = submit_booking(supabase, None, form, notify)

    assert result["success"] is False
    assert missing in result["field_errors"]
    assert supabase.calls == []
    assert notify.calls == []


def test_driving_requires_pickup_and_drop_before_persisting(supabase):
    form = complete_form("Wedding Car Driving", pickup="Airport")
    result = submit_booking(supabase, None, form, RecordingNotifier())

    assert result["success"] is False
    assert list(result["field_errors"]) == ["drop"]
    assert supabase.calls_to("bookings", "insert") == []


def test_mandap_does_not_require_venue():
    assert get_missing_fields(complete_form("Royal Mandap")) == []


def test_ambiguous_name_skips_conditional_checks():
    assert get_missing_fields(complete_form("Photo Booth")) == []


def test_explicit_category_triggers_driving_rules():
    form = complete_form("Family Transport", category="driving_services")
    assert get_missing_fields(form) == ["pickup", "drop"]


def test_row_for_driving_booking():
    form = complete_form("Wedding Car Driving", pickup="Airport", drop="Hotel", additional_notes="2 bags")
    row = build_booking_row(form)
    assert row["status"] == "pending"
    assert row["notes"] == "Pickup: Airport | Drop: Hotel | Notes: 2 bags"
    assert row["details"] == {"kind": "driving_trip", "pickup": "Airport", "drop": "Hotel", "notes": "2 bags"}


def test_row_without_details_has_null_notes():
    row = build_booking_row(complete_form("Royal Mandap"))
    assert row["notes"] is None
    assert row["details"] is None


def test_row_ignores_fields_of_other_categories():
    form = complete_form("Royal Mandap", pickup="Somewhere", venue="Town Hall", guests="150")
    assert build_booking_row(form)["notes"] == "Venue: Town Hall | Guests: 150"


def test_complete_booking_persists_pending_and_notifies_once(supabase, settings_rows):
    settings_rows(notification_email="owner@example.com", notification_whatsapp="+91 98765-43210")
    notify = RecordingNotifier()

    result = submit_booking(supabase, None, complete_form(venue="Town Hall"), notify)

    assert result["success"] is True
    assert result["booking_id"]
    [booking] = supabase.tables["bookings"]
    assert booking["status"] == "pending"
    assert booking["notes"] == "Venue: Town Hall"

    [payload] = notify.calls
    assert payload.admin_email == "owner@example.com"
    assert payload.admin_whatsapp == "+91 98765-43210"
    assert payload.service_name == "Royal Mandap"
    assert payload.notes == "Venue: Town Hall"


def test_notifier_failure_does_not_block_confirmation(supabase, settings_rows):
    settings_rows(notification_email="owner@example.com")
    notify = RecordingNotifier(error=RuntimeError("smtp exploded"))

    result = submit_booking(supabase, None, complete_form(), notify)

    assert result["success"] is True
    assert result["notification"] is None
    assert len(notify.calls) == 1
    assert len(supabase.tables["bookings"]) == 1


def test_no_notification_channel_skips_notifier(supabase):
    notify = RecordingNotifier()
    result = submit_booking(supabase, None, complete_form(), notify)
    assert result["success"] is True
    assert notify.calls == []


def test_whatsapp_only_still_builds_link(supabase, settings_rows):
    settings_rows(notification_whatsapp="+91 98765 43210")

    result = submit_booking(supabase, None, complete_form())

    assert result["success"] is True
    notification = result["notification"]
    assert notification["emailSent"] is False
    assert "emailError" not in notification
    assert notification["whatsappLink"].startswith("https://wa.me/919876543210?text=")


def test_unreadable_settings_do_not_block_confirmation(supabase):
    supabase.fail("site_settings", "select")
    notify = RecordingNotifier()
    result = submit_booking(supabase, None, complete_form(), notify)
    assert result["success"] is True
    assert notify.calls == []


def test_backend_failure_reports_error(supabase, settings_rows):
    settings_rows(notification_email="owner@example.com")
    supabase.fail("bookings", "insert", "permission denied")
    notify = RecordingNotifier()

    result = submit_booking(supabase, None, complete_form(), notify)

    assert result["success"] is False
    assert result["error"] == "permission denied"
    assert notify.calls == []
