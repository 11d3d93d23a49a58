from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from categories import EVENT_KINDS, BookingKind, resolve_booking_kind
from config import EmailConfig
from db.repository import BackendError, create_booking, get_settings
from notes_codec import (
    BookingDetailsVariant,
    DrivingTrip,
    EventVenue,
    GeneralRequest,
    encode,
    variant_to_json,
)
from notifier import NotificationPayload, send_booking_notification
from site_settings import NOTIFICATION_KEYS

logger = logging.getLogger(__name__)


BOOKING_FIELDS = [
    "customer_name",
    "mobile",
    "event_date",
    "event_time",
]

DRIVING_FIELDS = ["pickup", "drop"]

FIELD_ERRORS = {
    "customer_name": "Please enter your full name.",
    "mobile": "Please enter your mobile number.",
    "event_date": "Please choose the event date.",
    "event_time": "Please choose the event time.",
    "pickup": "Please enter the pickup location.",
    "drop": "Please enter the drop location.",
}


@dataclass
class BookingForm:
    service_name: str
    category: Optional[str] = None

    customer_name: str = ""
    mobile: str = ""
    event_date: str = ""
    event_time: str = ""

    # category-specific
    pickup: str = ""
    drop: str = ""
    venue: str = ""
    guests: str = ""
    additional_notes: str = ""

    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def kind(self) -> BookingKind:
        return resolve_booking_kind(self.service_name, self.category)


# ----------------- VALIDATION ------------------------

def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def get_missing_fields(form: BookingForm) -> List[str]:
    required = list(BOOKING_FIELDS)
    if form.kind == "driving":
        required += DRIVING_FIELDS
    return [f for f in required if _blank(getattr(form, f, None))]


def validate_booking(form: BookingForm) -> Dict[str, str]:
    form.errors = {f: FIELD_ERRORS[f] for f in get_missing_fields(form)}
    return form.errors


# ----------------- DETAILS ------------------------

def _text(value: Any) -> Optional[str]:
    return None if _blank(value) else str(value).strip()


def build_details(form: BookingForm) -> BookingDetailsVariant:
    kind = form.kind
    if kind == "driving":
        return DrivingTrip(pickup=_text(form.pickup), drop=_text(form.drop), notes=_text(form.additional_notes))
    if kind in EVENT_KINDS:
        return EventVenue(venue=_text(form.venue), guests=_text(form.guests), notes=_text(form.additional_notes))
    return GeneralRequest(notes=_text(form.additional_notes))


def build_booking_row(form: BookingForm) -> Dict[str, Any]:
    details = build_details(form)
    notes = encode(details.to_details())
    return {
        "service_name": form.service_name,
        "customer_name": form.customer_name.strip(),
        "mobile": form.mobile.strip(),
        "event_date": str(form.event_date),
        "event_time": str(form.event_time),
        "status": "pending",
        "notes": notes or None,
        "details": variant_to_json(details),
    }


# ----------------- SUBMISSION ------------------------

def notify_new_booking(
    supabase,
    email_cfg: Optional[EmailConfig],
    row: Dict[str, Any],
    notify: Callable[..., Dict[str, Any]] = send_booking_notification,
) -> Optional[Dict[str, Any]]:
    """Best effort; every failure is logged and swallowed here."""
    try:
        settings = get_settings(supabase, NOTIFICATION_KEYS)
    except BackendError as e:
        logger.warning("Could not read notification settings: %s", e)
        return None

    admin_email = settings.get("notification_email") or None
    admin_whatsapp = settings.get("notification_whatsapp") or None
    if not (admin_email or admin_whatsapp):
        logger.info("No notification channel configured; skipping booking notification.")
        return None

    try:
        payload = NotificationPayload(
            customer_name=row["customer_name"],
            mobile=row["mobile"],
            service_name=row["service_name"],
            event_date=row["event_date"],
            event_time=row["event_time"],
            notes=row.get("notes") or "",
            admin_email=admin_email,
            admin_whatsapp=admin_whatsapp,
        )
        result = notify(email_cfg, payload)
    except Exception:
        logger.exception("Booking notification failed")
        return None

    if admin_email and not result.get("emailSent"):
        logger.warning("Booking email not sent: %s", result.get("emailError"))
    return result


def submit_booking(
    supabase,
    email_cfg: Optional[EmailConfig],
    form: BookingForm,
    notify: Callable[..., Dict[str, Any]] = send_booking_notification,
) -> Dict[str, Any]:
    if validate_booking(form):
        return {
            "success": False,
            "booking_id": None,
            "error": "Please fill all required fields.",
            "field_errors": dict(form.errors),
            "notification": None,
        }

    row = build_booking_row(form)
    try:
        saved = create_booking(supabase, row)
    except BackendError as e:
        return {
            "success": False,
            "booking_id": None,
            "error": e.message,
            "field_errors": {},
            "notification": None,
        }

    notification = notify_new_booking(supabase, email_cfg, row, notify)

    return {
        "success": True,
        "booking_id": saved.get("id"),
        "error": None,
        "field_errors": {},
        "notification": notification,
    }
