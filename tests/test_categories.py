import json

import pytest

from categories import (
    CUSTOM_CATEGORIES_KEY,
    OTHER_OPTION,
    CategoryDisplay,
    add_custom_category,
    booking_link,
    category_label,
    category_options,
    classify_service_name,
    custom_sections,
    load_category_displays,
    load_custom_categories,
    remove_custom_category,
    reset_category_display,
    resolve_booking_kind,
    save_category_display,
)


@pytest.mark.parametrize(
    "name, kind",
    [
        ("Wedding Car Driving", "driving"),
        ("Personal Driver", "driving"),
        ("Royal Mandap", "mandap"),
        ("Stage Lighting", "lighting"),
        ("Premium Wedding Lights", "lighting"),
        ("Traditional Drums", "drums"),
        ("Wedding Shop Combo", "wedding_shop"),
        ("Rose Garland", "wedding_shop"),
        ("LED Decoration", "wedding_shop"),
        ("Photography", "other"),
        ("", "other"),
        (None, "other"),
    ],
)
def test_classify_service_name(name, kind):
    assert classify_service_name(name) == kind


def test_explicit_category_wins_over_name():
    assert resolve_booking_kind("Photo Booth", "driving_services") == "driving"
    assert resolve_booking_kind("Mandap Lights", "wedding_mandap") == "mandap"


def test_custom_category_skips_conditional_fields():
    assert resolve_booking_kind("Driver Snacks", "Catering") == "other"


def test_missing_category_falls_back_to_name():
    assert resolve_booking_kind("Traditional Mandap", None) == "mandap"


def test_booking_link_params():
    assert booking_link("Royal Mandap", "wedding_mandap") == {"service": "Royal Mandap", "category": "wedding_mandap"}
    assert booking_link("Royal Mandap") == {"service": "Royal Mandap"}


def test_category_displays_default_then_override(supabase, settings_rows):
    settings_rows(category_lighting_title="Lights & More", category_lighting_image="")
    displays = load_category_displays(supabase)
    assert displays["lighting"].title == "Lights & More"
    # blank overrides keep the default
    assert displays["lighting"].image.startswith("https://")
    assert displays["drums"].title == "Drums"


def test_save_and_reset_category_display(supabase):
    save_category_display(supabase, CategoryDisplay("drums", "Dhol", "Loud", "https://img/dhol.png"))
    keys = {r["setting_key"]: r["setting_value"] for r in supabase.tables["site_settings"]}
    assert keys == {
        "category_drums_title": "Dhol",
        "category_drums_description": "Loud",
        "category_drums_image": "https://img/dhol.png",
    }

    save_category_display(supabase, CategoryDisplay("drums", "Dhol Tasha", "Loud", "https://img/dhol.png"))
    assert len(supabase.tables["site_settings"]) == 3

    default = reset_category_display(supabase, "drums")
    assert default.title == "Drums"
    assert supabase.tables["site_settings"] == []


def test_save_unknown_category_rejected(supabase):
    with pytest.raises(KeyError):
        save_category_display(supabase, CategoryDisplay("catering", "t", "d", "i"))


def test_custom_categories_lifecycle(supabase):
    assert load_custom_categories(supabase) == []
    add_custom_category(supabase, " Catering ")
    add_custom_category(supabase, "catering")
    assert add_custom_category(supabase, "Photography") == ["Catering", "Photography"]

    stored = supabase.tables["site_settings"][0]
    assert stored["setting_key"] == CUSTOM_CATEGORIES_KEY
    assert json.loads(stored["setting_value"]) == ["Catering", "Photography"]

    assert remove_custom_category(supabase, "Catering") == ["Photography"]


@pytest.mark.parametrize("name", ["", "   ", OTHER_OPTION, "lighting"])
def test_custom_category_rejects_reserved_names(supabase, name):
    with pytest.raises(ValueError):
        add_custom_category(supabase, name)


def test_corrupt_custom_category_setting(supabase, settings_rows):
    settings_rows(custom_categories="not json")
    assert load_custom_categories(supabase) == []


def test_category_options_end_with_other():
    options = category_options(["Catering"])
    assert options[0] == "wedding_mandap"
    assert options[-2:] == ["Catering", OTHER_OPTION]


def test_category_label():
    assert category_label("driving_services") == "Driving Services"
    assert category_label("Catering") == "Catering"
    assert category_label(None) == "Uncategorised"


def test_custom_sections_groups_active_services():
    services = [
        {"id": 1, "name": "Royal Mandap", "category": "wedding_mandap"},
        {"id": 2, "name": "Buffet", "category": "Catering"},
        {"id": 3, "name": "Henna", "category": "Mehendi"},
        {"id": 4, "name": "Loose", "category": None},
    ]
    sections = custom_sections(["Photography", "Catering"], services)
    assert list(sections) == ["Catering", "Mehendi"]
    assert [s["name"] for s in sections["Catering"]] == ["Buffet"]
