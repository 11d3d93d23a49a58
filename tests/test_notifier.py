import smtplib

from config import EmailConfig
from notifier import (
    NotificationPayload,
    build_email,
    format_event_date,
    send_booking_notification,
    whatsapp_link,
)

EMAIL_CFG = EmailConfig(
    smtp_host="smtp.example.com",
    smtp_port=587,
    smtp_user="bookings@example.com",
    smtp_password="secret",
    from_email="bookings@example.com",
    from_name="Anjaneya Services",
)


def payload(**values):
    data = {
        "customerName": "Lakshmi",
        "mobile": "9876543210",
        "serviceName": "Royal Mandap",
        "eventDate": "2025-06-14",
        "eventTime": "18:30",
        "notes": "Venue: Town Hall | Guests: 150",
        "adminEmail": "owner@example.com",
        "adminWhatsApp": "+91 98765-43210",
    }
    data.update(values)
    return NotificationPayload(**data)


class FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.actions = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.actions.append("starttls")

    def login(self, user, password):
        self.actions.append(("login", user))

    def send_message(self, msg):
        self.actions.append("send")
        FakeSMTP.sent.append((self, msg))


class BrokenSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


def test_whatsapp_link_strips_non_digits():
    assert whatsapp_link("+91 98765-43210") == "https://wa.me/919876543210"


def test_whatsapp_link_encodes_message():
    link = whatsapp_link("919876543210", "Hi *there*\nDate: 14/06 & time")
    assert link == "https://wa.me/919876543210?text=Hi%20*there*%0ADate%3A%2014%2F06%20%26%20time"


def test_format_event_date():
    assert format_event_date("2025-06-14") == "Saturday, 14 June 2025"
    assert format_event_date("next week") == "next week"


def test_build_email_lists_each_detail():
    email = build_email(payload())
    assert email["subject"] == "🎉 New Booking: Royal Mandap by Lakshmi"
    assert "<li>Venue: Town Hall</li><li>Guests: 150</li>" in email["html"]
    assert "Saturday, 14 June 2025" in email["html"]


def test_build_email_without_notes():
    assert "<li>No additional notes</li>" in build_email(payload(notes=""))["html"]


def test_build_email_escapes_customer_input():
    html = build_email(payload(customerName="<b>Eve</b>"))["html"]
    assert "<b>Eve</b>" not in html
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html


def test_payload_accepts_field_names():
    p = NotificationPayload(
        customer_name="A", mobile="1", service_name="S", event_date="d", event_time="t", admin_email="owner@example.com"
    )
    assert p.admin_whatsapp is None
    assert p.notes == ""


def test_send_notification_email_and_whatsapp():
    FakeSMTP.sent.clear()
    result = send_booking_notification(EMAIL_CFG, payload(), smtp_factory=FakeSMTP)

    assert result["success"] is True
    assert result["emailSent"] is True
    assert "emailError" not in result
    assert result["whatsappLink"].startswith("https://wa.me/919876543210?text=")

    [(server, msg)] = FakeSMTP.sent
    assert server.host == "smtp.example.com"
    assert server.actions == ["starttls", ("login", "bookings@example.com"), "send"]
    assert msg["To"] == "owner@example.com"
    assert msg["From"] == "Anjaneya Services <bookings@example.com>"


def test_email_failure_keeps_whatsapp_link():
    result = send_booking_notification(EMAIL_CFG, payload(), smtp_factory=BrokenSMTP)
    assert result["success"] is True
    assert result["emailSent"] is False
    assert "bad credentials" in result["emailError"]
    assert result["whatsappLink"]


def test_unconfigured_email_is_reported():
    result = send_booking_notification(None, payload(adminWhatsApp=None))
    assert result["emailSent"] is False
    assert result["emailError"] == "Email is not configured."
    assert result["whatsappLink"] is None


def test_whatsapp_only_skips_email():
    FakeSMTP.sent.clear()
    result = send_booking_notification(EMAIL_CFG, payload(adminEmail=None), smtp_factory=FakeSMTP)
    assert FakeSMTP.sent == []
    assert result["emailSent"] is False
    assert "emailError" not in result
    assert result["whatsappLink"].startswith("https://wa.me/919876543210?text=")
