# app/notes_codec.py
"""
Booking detail sub-fields (pickup/drop, venue, guests, free-form notes).

Bookings carry their details two ways:

* ``notes``: a single text column of labeled segments, e.g.
  ``"Pickup: Airport | Drop: Hotel | Notes: 2 bags"``. Older rows hold plain
  free text with no labels at all.
* ``details``: a JSON object written from one of the typed variants below
  (``DrivingTrip``, ``EventVenue``, ``GeneralRequest``).

Readers should go through ``read_booking_details`` which prefers the
structured column and falls back to decoding the text.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Optional, Union

SEPARATOR = " | "
LEGACY_JOINER = "; "
VALUE_JOINER = " / "

# Order matters: encode emits segments in this order and decode tries the
# prefixes in this order.
LABELS = [
    ("pickup", "Pickup: "),
    ("drop", "Drop: "),
    ("venue", "Venue: "),
    ("guests", "Guests: "),
    ("additional_notes", "Notes: "),
]

WIRE_NAMES = {
    "pickup": "pickup",
    "drop": "drop",
    "venue": "venue",
    "guests": "guests",
    "additional_notes": "additionalNotes",
}


@dataclass
class BookingDetails:
    pickup: Optional[str] = None
    drop: Optional[str] = None
    venue: Optional[str] = None
    guests: Optional[str] = None
    additional_notes: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Populated fields only, keyed by their wire names."""
        return {
            WIRE_NAMES[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }

    def is_empty(self) -> bool:
        return not self.to_dict()


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def encode(details: BookingDetails) -> str:
    values = {name: _clean(getattr(details, name)) for name, _ in LABELS}
    for name, value in values.items():
        if value and SEPARATOR in value:
            # A separator inside a value would split it into two segments.
            joiner = LEGACY_JOINER if name == "additional_notes" else VALUE_JOINER
            values[name] = value.replace(SEPARATOR, joiner)

    # A trip is only meaningful with both ends.
    if not (values["pickup"] and values["drop"]):
        values["pickup"] = values["drop"] = None

    return SEPARATOR.join(
        f"{label}{values[name]}" for name, label in LABELS if values[name]
    )


def _match_label(part: str):
    for name, label in LABELS:
        if part.startswith(label):
            return name, part[len(label):]
    return None, part


def decode(text: Optional[str]) -> BookingDetails:
    details = BookingDetails()
    if not text:
        return details

    for part in text.split(SEPARATOR):
        name, value = _match_label(part.strip())
        value = value.strip()
        if not value:
            continue
        if name is None or name == "additional_notes":
            # Labeled notes and unlabeled legacy text both accumulate in order.
            if details.additional_notes:
                details.additional_notes += LEGACY_JOINER + value
            else:
                details.additional_notes = value
        else:
            setattr(details, name, value)

    return details


# ---------------------- TYPED VARIANTS ----------------------

@dataclass
class DrivingTrip:
    kind: ClassVar[str] = "driving_trip"

    pickup: Optional[str] = None
    drop: Optional[str] = None
    notes: Optional[str] = None

    def to_details(self) -> BookingDetails:
        return BookingDetails(pickup=self.pickup, drop=self.drop, additional_notes=self.notes)


@dataclass
class EventVenue:
    kind: ClassVar[str] = "event_venue"

    venue: Optional[str] = None
    guests: Optional[str] = None
    notes: Optional[str] = None

    def to_details(self) -> BookingDetails:
        return BookingDetails(venue=self.venue, guests=self.guests, additional_notes=self.notes)


@dataclass
class GeneralRequest:
    kind: ClassVar[str] = "general"

    notes: Optional[str] = None

    def to_details(self) -> BookingDetails:
        return BookingDetails(additional_notes=self.notes)


BookingDetailsVariant = Union[DrivingTrip, EventVenue, GeneralRequest]

_VARIANTS = {cls.kind: cls for cls in (DrivingTrip, EventVenue, GeneralRequest)}


def variant_to_json(variant: BookingDetailsVariant) -> Optional[Dict[str, Any]]:
    payload = {f.name: _clean(getattr(variant, f.name)) for f in fields(variant)}
    payload = {k: v for k, v in payload.items() if v}
    if not payload:
        return None
    return {"kind": variant.kind, **payload}


def variant_from_json(data: Optional[Dict[str, Any]]) -> Optional[BookingDetailsVariant]:
    if not data:
        return None
    cls = _VARIANTS.get(data.get("kind"))
    if cls is None:
        return None
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


def read_booking_details(row: Dict[str, Any]) -> BookingDetails:
    variant = variant_from_json(row.get("details"))
    if variant is not None:
        return variant.to_details()
    return decode(row.get("notes"))
