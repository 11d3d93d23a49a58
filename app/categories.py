# app/categories.py

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional

from db.models import Service
from db.repository import delete_settings, get_settings, list_setting_rows, upsert_setting

# Coarse tag that decides which extra booking fields apply.
BookingKind = Literal["driving", "mandap", "lighting", "drums", "wedding_shop", "other"]

CUSTOM_CATEGORIES_KEY = "custom_categories"
OTHER_OPTION = "Other"


@dataclass
class CategoryConfig:
    key: str
    default_title: str
    default_description: str
    default_image: str
    page_title: str
    page_subtitle: str
    booking_kind: BookingKind


@dataclass
class CategoryDisplay:
    key: str
    title: str
    description: str
    image: str


FIXED_CATEGORIES: List[CategoryConfig] = [
    CategoryConfig(
        key="wedding_mandap",
        default_title="Wedding Mandap",
        default_description="Beautiful mandap setups for traditional and modern weddings",
        default_image="https://i.pinimg.com/originals/59/0c/da/590cda3575908c87e1f14804ae46e155.jpg",
        page_title="Wedding Mandap Varieties",
        page_subtitle="Choose from our exquisite collection of mandap designs",
        booking_kind="mandap",
    ),
    CategoryConfig(
        key="lighting",
        default_title="Lighting",
        default_description="Professional decorative lighting for all occasions",
        default_image="https://tse2.mm.bing.net/th/id/OIP.yTLhRdw3xUgVkU82r98kwAHaEn?pid=Api&P=0&h=180",
        page_title="Lighting Varieties",
        page_subtitle="Set the mood with our decorative and stage lighting",
        booking_kind="lighting",
    ),
    CategoryConfig(
        key="wedding_shop",
        default_title="Wedding Shop",
        default_description="Garlands, decorations & wedding accessories",
        default_image="https://tse2.mm.bing.net/th?id=OIF.9bdzH5sI%2fOHHuOQR9qMWOQ&pid=Api&P=0&h=180",
        page_title="Wedding Shop",
        page_subtitle="Garlands, decorations and everything in between",
        booking_kind="wedding_shop",
    ),
    CategoryConfig(
        key="drums",
        default_title="Drums",
        default_description="Traditional & wedding drums for ceremonies",
        default_image="https://tastysnack.in/wp-content/uploads/2022/12/Kerala-Bride-Played-Drum-During-Wedding-Gone-Viral-4-1120x728.jpg",
        page_title="Drum Varieties",
        page_subtitle="Traditional rhythms for every ceremony",
        booking_kind="drums",
    ),
    CategoryConfig(
        key="driving_services",
        default_title="Driving Services",
        default_description="Professional drivers for your events",
        default_image="https://tse2.mm.bing.net/th/id/OIP.BekLeG_3xl_3aZb-GfAXOAHaE7?pid=Api&P=0&h=180",
        page_title="Driving Services",
        page_subtitle="Professional drivers for your guests and family",
        booking_kind="driving",
    ),
]

FIXED_BY_KEY: Dict[str, CategoryConfig] = {c.key: c for c in FIXED_CATEGORIES}

# Venue and guest count are offered for these kinds.
EVENT_KINDS = ("mandap", "lighting", "drums")

# Checked in order; first hit wins.
_NAME_RULES = [
    (("driving", "driver"), "driving"),
    (("mandap",), "mandap"),
    (("lighting", "light"), "lighting"),
    (("drum",), "drums"),
    (("wedding shop", "garland", "decoration"), "wedding_shop"),
]

_OVERRIDE_KEY = re.compile(r"^category_(.+)_(title|description|image)$")


def classify_service_name(service_name: Optional[str]) -> BookingKind:
    """Best-effort guess from the service name; ambiguous names fall to "other"."""
    name = (service_name or "").lower()
    for needles, kind in _NAME_RULES:
        if any(n in name for n in needles):
            return kind
    return "other"


def resolve_booking_kind(service_name: Optional[str], category: Optional[str] = None) -> BookingKind:
    """
    Uses the category carried with the service link when there is one,
    falling back to the name heuristic for old links.
    """
    if category:
        if category in FIXED_BY_KEY:
            return FIXED_BY_KEY[category].booking_kind
        if category in ("driving", "mandap", "lighting", "drums", "wedding_shop"):
            return category
        return "other"
    return classify_service_name(service_name)


def booking_link(service_name: str, category: Optional[str] = None) -> Dict[str, str]:
    """Query params for the booking page."""
    params = {"service": service_name}
    if category:
        params["category"] = category
    return params


# ---------------------- DISPLAY OVERRIDES ----------------------

def override_keys(key: str) -> List[str]:
    return [f"category_{key}_{field}" for field in ("title", "description", "image")]


def load_category_displays(supabase) -> Dict[str, CategoryDisplay]:
    displays = {
        c.key: CategoryDisplay(c.key, c.default_title, c.default_description, c.default_image)
        for c in FIXED_CATEGORIES
    }

    for row in list_setting_rows(supabase, prefix="category_"):
        match = _OVERRIDE_KEY.match(row["setting_key"])
        if not match:
            continue
        cat_key, field = match.groups()
        if cat_key in displays and row.get("setting_value"):
            setattr(displays[cat_key], field, row["setting_value"])

    return displays


def save_category_display(supabase, display: CategoryDisplay) -> None:
    if display.key not in FIXED_BY_KEY:
        raise KeyError(display.key)
    title_key, description_key, image_key = override_keys(display.key)
    upsert_setting(supabase, title_key, display.title, f"Title for {display.key} category")
    upsert_setting(supabase, description_key, display.description, f"Description for {display.key} category")
    upsert_setting(supabase, image_key, display.image, f"Image for {display.key} category")


def reset_category_display(supabase, key: str) -> CategoryDisplay:
    cfg = FIXED_BY_KEY[key]
    delete_settings(supabase, override_keys(key))
    return CategoryDisplay(cfg.key, cfg.default_title, cfg.default_description, cfg.default_image)


# ---------------------- CUSTOM CATEGORIES ----------------------

def load_custom_categories(supabase) -> List[str]:
    raw = get_settings(supabase, [CUSTOM_CATEGORIES_KEY]).get(CUSTOM_CATEGORIES_KEY)
    if not raw:
        return []
    try:
        names = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(names, list):
        return []
    return [n for n in names if isinstance(n, str) and n.strip()]


def _save_custom_categories(supabase, names: List[str]) -> None:
    upsert_setting(
        supabase,
        CUSTOM_CATEGORIES_KEY,
        json.dumps(names),
        "Admin-defined service categories",
    )


def add_custom_category(supabase, name: str) -> List[str]:
    name = name.strip()
    if not name:
        raise ValueError("Category name is required.")
    if name == OTHER_OPTION or name in FIXED_BY_KEY:
        raise ValueError(f"'{name}' is reserved.")

    names = load_custom_categories(supabase)
    if name.lower() not in (n.lower() for n in names):
        names.append(name)
        _save_custom_categories(supabase, names)
    return names


def remove_custom_category(supabase, name: str) -> List[str]:
    names = [n for n in load_custom_categories(supabase) if n != name]
    _save_custom_categories(supabase, names)
    return names


def category_options(custom: List[str]) -> List[str]:
    """Picker values: fixed keys, custom names, then "Other" for a new one."""
    return [c.key for c in FIXED_CATEGORIES] + list(custom) + [OTHER_OPTION]


def category_label(value: Optional[str]) -> str:
    if not value:
        return "Uncategorised"
    if value in FIXED_BY_KEY:
        return FIXED_BY_KEY[value].default_title
    return value


def custom_sections(custom: List[str], active_services: List[Dict]) -> Dict[str, List[Dict]]:
    """
    Active services grouped under non-fixed categories for the services
    index. Registered custom categories come first, then any unregistered
    category values found on services. Empty groups are left out.
    """
    sections: Dict[str, List[Dict]] = {name: [] for name in custom}
    for service in active_services:
        cat = service.get("category")
        if not cat or cat in FIXED_BY_KEY:
            continue
        sections.setdefault(cat, []).append(service)
    return {name: items for name, items in sections.items() if items}


# ---------------------- STARTER CATALOG ----------------------

STARTER_SERVICES: List[Service] = [
    Service(name="Traditional Mandap", description="Classic wooden mandap with beautiful floral décor",
            image_url="https://i.pinimg.com/originals/66/c9/34/66c934ac7feb88115ac1fad19b79311b.jpg",
            price="₹25,000", category="wedding_mandap", display_order=0),
    Service(name="Modern Mandap", description="LED based modern wedding mandap with contemporary design",
            image_url="https://tse1.mm.bing.net/th/id/OIP.pvBhvHWiXFoQCJz_XisZ1gHaHa?pid=Api&P=0&h=180",
            price="₹35,000", category="wedding_mandap", display_order=1),
    Service(name="Royal Mandap", description="Premium royal style grand mandap for luxury weddings",
            image_url="https://i.pinimg.com/originals/3d/a4/23/3da42361d3cf2f7f3655e83ce3cbdcdf.jpg",
            price="₹50,000", category="wedding_mandap", display_order=2),
    Service(name="LED Decoration", description="Colorful LED lighting for events and celebrations",
            price="₹15,000", category="lighting", display_order=3),
    Service(name="Stage Lighting", description="Professional stage lighting setup for performances",
            price="₹20,000", category="lighting", display_order=4),
    Service(name="Premium Wedding Lights", description="Luxury lighting solutions for grand weddings",
            price="₹30,000", category="lighting", display_order=5),
    Service(name="Flower Garlands", description="Fresh garlands for the couple and guests",
            category="wedding_shop", display_order=6),
    Service(name="Traditional Drums", description="Traditional drum ensemble for ceremonies",
            category="drums", display_order=7),
    Service(name="Wedding Car Driver", description="Professional driver for the wedding day",
            category="driving_services", display_order=8),
]
