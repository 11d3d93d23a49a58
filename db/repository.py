# db/repository.py
"""
CRUD operations against the Supabase tables.

Every function takes the Supabase client as its first argument and raises
BackendError when the request fails, so screens can show a notice and keep
their current state.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from db.models import BOOKING_STATUSES, Booking, Service, SiteSetting

logger = logging.getLogger(__name__)

BOOKINGS = "bookings"
SERVICES = "services"
SITE_SETTINGS = "site_settings"
USER_ROLES = "user_roles"
IMAGE_BUCKET = "service-images"


class BackendError(Exception):
    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


@contextmanager
def _backend_call(operation: str):
    try:
        yield
    except BackendError:
        raise
    except Exception as e:
        error_msg = str(e)
        if getattr(e, "message", None):
            error_msg = e.message
        elif getattr(e, "details", None):
            error_msg = e.details
        logger.error("Backend operation %r failed: %s", operation, error_msg)
        raise BackendError(operation, error_msg) from e


# --- BOOKINGS ---------------------------------------------------------------

def list_bookings(supabase, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """Newest first; status "all" or None disables the filter."""
    with _backend_call("fetch bookings"):
        query = supabase.table(BOOKINGS).select("*").order("created_at", desc=True)
        if status and status != "all":
            query = query.eq("status", status)
        return query.execute().data or []


def create_booking(supabase, row: Dict[str, Any]) -> Dict[str, Any]:
    row = Booking(**row).model_dump(exclude={"id"})
    if not row["created_at"]:
        row["created_at"] = datetime.now(timezone.utc).isoformat()

    with _backend_call("create booking"):
        booking_insert = supabase.table(BOOKINGS).insert(row).execute()

    if not booking_insert.data:
        raise BackendError("create booking", "No data returned.")
    return booking_insert.data[0]


def update_booking(
    supabase,
    booking_id: str,
    status: str,
    notes: Optional[str],
    details: Optional[Dict[str, Any]] = None,
) -> None:
    if status not in BOOKING_STATUSES:
        raise ValueError(f"Invalid status: {status}")

    with _backend_call("update booking"):
        (
            supabase.table(BOOKINGS)
            .update({"status": status, "notes": notes, "details": details})
            .eq("id", booking_id)
            .execute()
        )


def delete_booking(supabase, booking_id: str) -> None:
    with _backend_call("delete booking"):
        supabase.table(BOOKINGS).delete().eq("id", booking_id).execute()


# --- SERVICES ---------------------------------------------------------------

def list_services(
    supabase,
    category: Optional[str] = None,
    active_only: bool = False,
) -> List[Dict[str, Any]]:
    with _backend_call("fetch services"):
        query = supabase.table(SERVICES).select("*").order("display_order")
        if category:
            query = query.eq("category", category)
        if active_only:
            query = query.eq("is_active", True)
        return query.execute().data or []


def _service_row(service: Service) -> Dict[str, Any]:
    # Blank optional text fields are stored as NULL.
    row = service.model_dump(exclude={"id"})
    for key in ("description", "image_url", "price", "category"):
        if not (row.get(key) or "").strip():
            row[key] = None
    row["name"] = row["name"].strip()
    return row


def create_service(supabase, service: Service) -> Dict[str, Any]:
    with _backend_call("create service"):
        res = supabase.table(SERVICES).insert(_service_row(service)).execute()
    return res.data[0] if res.data else {}


def update_service(supabase, service_id: str, service: Service) -> None:
    with _backend_call("update service"):
        supabase.table(SERVICES).update(_service_row(service)).eq("id", service_id).execute()


def delete_service(supabase, service_id: str) -> None:
    with _backend_call("delete service"):
        supabase.table(SERVICES).delete().eq("id", service_id).execute()


def set_service_active(supabase, service_id: str, is_active: bool) -> None:
    with _backend_call("update service"):
        supabase.table(SERVICES).update({"is_active": is_active}).eq("id", service_id).execute()


def set_display_orders(supabase, orders: Dict[str, int]) -> None:
    """Writes {service_id: display_order}, one update per service."""
    with _backend_call("reorder services"):
        for service_id, display_order in orders.items():
            (
                supabase.table(SERVICES)
                .update({"display_order": display_order})
                .eq("id", service_id)
                .execute()
            )


def insert_services(supabase, services: Iterable[Service]) -> int:
    rows = [_service_row(s) for s in services]
    if not rows:
        return 0
    with _backend_call("seed services"):
        supabase.table(SERVICES).insert(rows).execute()
    return len(rows)


# --- SITE SETTINGS ----------------------------------------------------------

def get_settings(supabase, keys: Optional[List[str]] = None) -> Dict[str, str]:
    """Returns {setting_key: setting_value}; NULL values come back as ""."""
    with _backend_call("fetch settings"):
        query = supabase.table(SITE_SETTINGS).select("setting_key, setting_value")
        if keys:
            query = query.in_("setting_key", keys)
        rows = query.execute().data or []
    return {r["setting_key"]: r.get("setting_value") or "" for r in rows}


def list_setting_rows(supabase, prefix: Optional[str] = None) -> List[Dict[str, Any]]:
    with _backend_call("fetch settings"):
        query = supabase.table(SITE_SETTINGS).select("*")
        if prefix:
            query = query.like("setting_key", f"{prefix}%")
        return query.order("setting_key").execute().data or []


def upsert_setting(supabase, key: str, value: Optional[str], description: Optional[str] = None) -> None:
    """Updates the row for `key` if it exists, otherwise inserts it."""
    with _backend_call("save setting"):
        existing = (
            supabase.table(SITE_SETTINGS).select("id").eq("setting_key", key).execute()
        )
        if existing.data:
            (
                supabase.table(SITE_SETTINGS)
                .update({"setting_value": value})
                .eq("setting_key", key)
                .execute()
            )
        else:
            setting = SiteSetting(setting_key=key, setting_value=value, description=description)
            supabase.table(SITE_SETTINGS).insert(setting.model_dump(exclude={"id"})).execute()


def delete_settings(supabase, keys: Iterable[str]) -> None:
    with _backend_call("delete setting"):
        for key in keys:
            supabase.table(SITE_SETTINGS).delete().eq("setting_key", key).execute()


# --- ROLES & STORAGE --------------------------------------------------------

def has_role(supabase, user_id: str, role: str = "admin") -> bool:
    with _backend_call("check role"):
        res = (
            supabase.table(USER_ROLES)
            .select("role")
            .eq("user_id", user_id)
            .eq("role", role)
            .execute()
        )
    return bool(res.data)


def upload_image(supabase, path: str, data: bytes, content_type: str) -> str:
    """Uploads to the public images bucket and returns the public URL."""
    with _backend_call("upload image"):
        bucket = supabase.storage.from_(IMAGE_BUCKET)
        bucket.upload(path, data, {"content-type": content_type})
        return bucket.get_public_url(path)
