import pytest

from fakes import FakeSupabase


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def settings_rows(supabase):
    def _add(**values):
        for key, value in values.items():
            supabase.tables.setdefault("site_settings", []).append(
                {"id": f"setting-{key}", "setting_key": key, "setting_value": value, "description": None}
            )
    return _add
