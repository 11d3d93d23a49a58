# app/admin_actions.py
"""Non-UI helpers behind the admin screens."""

from __future__ import annotations

import secrets
import time
from typing import Any, Dict, List, Optional

import pandas as pd

from categories import OTHER_OPTION, add_custom_category
from db.models import BOOKING_STATUSES
from db.repository import update_booking
from notes_codec import read_booking_details

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif"]
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def booking_stats(bookings: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = {"total": len(bookings)}
    for status in BOOKING_STATUSES:
        counts[status] = sum(1 for b in bookings if b.get("status") == status)
    return counts


def details_summary(booking: Dict[str, Any]) -> str:
    d = read_booking_details(booking)
    parts = []
    if d.pickup:
        parts.append(f"From: {d.pickup}")
    if d.drop:
        parts.append(f"To: {d.drop}")
    if d.venue:
        parts.append(f"Venue: {d.venue}")
    if d.guests:
        parts.append(f"Guests: {d.guests}")
    if d.additional_notes:
        parts.append(d.additional_notes)
    return " · ".join(parts) or "-"


def bookings_frame(bookings: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(bookings)
    if df.empty:
        return df
    df["details_text"] = [details_summary(b) for b in bookings]
    return df


def apply_booking_edit(supabase, booking: Dict[str, Any], status: str, notes: str) -> None:
    """Replace-on-save of status and notes."""
    notes = (notes or "").strip() or None
    details = booking.get("details")
    if notes != booking.get("notes"):
        # Hand-edited text becomes the source of truth for the details.
        details = None
    update_booking(supabase, booking["id"], status, notes, details)


def validate_image_upload(content_type: str, size: int) -> Optional[str]:
    if content_type not in ALLOWED_IMAGE_TYPES:
        return "Please upload a JPG, PNG, WebP, or GIF image."
    if size > MAX_IMAGE_BYTES:
        return "Please upload an image smaller than 5MB."
    return None


def image_upload_path(filename: str, folder: str = "categories") -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"{folder}/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


def orders_after_move(
    services: List[Dict[str, Any]], index: int, direction: int
) -> Optional[Dict[str, int]]:
    """
    New display_order values after moving services[index] up (-1) or down (+1).

    `services` is the full list as displayed. The moved list is renumbered
    0..n-1 and only rows whose stored order changes are returned, as
    {service_id: display_order}. None when the move runs off either end.
    """
    other = index + direction
    if other < 0 or other >= len(services):
        return None

    ordered = list(services)
    ordered[index], ordered[other] = ordered[other], ordered[index]
    return {
        s["id"]: position
        for position, s in enumerate(ordered)
        if s.get("display_order") != position
    }


def resolve_category_choice(supabase, choice: Optional[str], new_name: str = "") -> Optional[str]:
    """The "Other" choice registers `new_name` as a custom category and returns it."""
    if choice == OTHER_OPTION:
        add_custom_category(supabase, new_name)
        return new_name.strip()
    return choice or None


def form_display_order(existing: Dict[str, Any], next_order: int) -> int:
    """Order shown in the service form; rows without one go to the end."""
    order = existing.get("display_order")
    return next_order if order is None else int(order)
