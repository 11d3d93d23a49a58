# app/site_settings.py

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from email_validator import EmailNotValidError, validate_email as _validate_email
from pydantic import BaseModel

from db.repository import get_settings, upsert_setting


@dataclass
class SettingField:
    label: str
    kind: str  # text | textarea | tel | email
    description: Optional[str] = None


SETTING_FIELDS: Dict[str, SettingField] = {
    "site_title": SettingField("Website Title", "text"),
    "contact_phone": SettingField("Contact Phone", "tel"),
    "contact_email": SettingField("Contact Email", "email"),
    "contact_address": SettingField("Business Address", "textarea"),
    "whatsapp_number": SettingField("WhatsApp Number", "tel"),
    "about_text": SettingField("About Section Text", "textarea"),
    "notification_email": SettingField(
        "Notification Email", "email", "Email address to receive booking notifications"
    ),
    "notification_whatsapp": SettingField(
        "Notification WhatsApp",
        "tel",
        "WhatsApp number to receive booking alerts (with country code, e.g., 919876543210)",
    ),
}

CONTACT_KEYS = ["contact_phone", "contact_email", "contact_address", "whatsapp_number"]
NOTIFICATION_KEYS = ["notification_email", "notification_whatsapp"]


class SiteSettings(BaseModel):
    site_title: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    contact_address: str = ""
    whatsapp_number: str = ""
    about_text: str = ""
    notification_email: str = ""
    notification_whatsapp: str = ""

    @classmethod
    def from_rows(cls, values: Dict[str, str]) -> "SiteSettings":
        return cls(**{k: (values.get(k) or "") for k in SETTING_FIELDS})


class SettingsValidationError(ValueError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def is_valid_email(email: str) -> bool:
    try:
        _validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def digits_only(number: str) -> str:
    return re.sub(r"\D", "", number or "")


def validate_settings(settings: SiteSettings) -> Dict[str, str]:
    """Blank values are allowed; filled ones must be well formed."""
    errors: Dict[str, str] = {}
    for key, field in SETTING_FIELDS.items():
        value = getattr(settings, key).strip()
        if not value:
            continue
        if field.kind == "email" and not is_valid_email(value):
            errors[key] = f"{field.label} is not a valid email address."
        elif field.kind == "tel" and not 10 <= len(digits_only(value)) <= 15:
            errors[key] = f"{field.label} must contain 10 to 15 digits."
    return errors


def load_site_settings(supabase, keys: Optional[List[str]] = None) -> SiteSettings:
    return SiteSettings.from_rows(get_settings(supabase, keys or list(SETTING_FIELDS)))


def save_site_settings(supabase, settings: SiteSettings) -> None:
    errors = validate_settings(settings)
    if errors:
        raise SettingsValidationError(errors)

    for key, field in SETTING_FIELDS.items():
        upsert_setting(supabase, key, getattr(settings, key).strip(), field.description)
