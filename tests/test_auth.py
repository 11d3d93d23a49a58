import pytest

from auth import AuthFailed, USER_KEY, admin_access, current_user, sign_in, sign_out, sign_up


@pytest.fixture
def users(supabase):
    supabase.auth.add_user("admin@example.com", "secret123", "u-admin")
    supabase.auth.add_user("guest@example.com", "secret123", "u-guest")
    supabase.tables["user_roles"] = [{"user_id": "u-admin", "role": "admin"}]
    return supabase


def test_admin_sign_in(users):
    session = {}
    user = sign_in(users, session, "admin@example.com", "secret123")
    assert user == {"id": "u-admin", "email": "admin@example.com", "is_admin": True}
    assert admin_access(session) == "ok"


def test_non_admin_is_denied(users):
    session = {}
    sign_in(users, session, "guest@example.com", "secret123")
    assert current_user(session)["is_admin"] is False
    assert admin_access(session) == "denied"


def test_signed_out_must_log_in():
    assert admin_access({}) == "login"


def test_wrong_password(users):
    session = {}
    with pytest.raises(AuthFailed) as excinfo:
        sign_in(users, session, "admin@example.com", "wrong-password")
    assert excinfo.value.message == "Invalid login credentials"
    assert USER_KEY not in session


@pytest.mark.parametrize("email, password", [("not-an-email", "secret123"), ("admin@example.com", "123")])
def test_credentials_checked_before_backend(users, email, password):
    with pytest.raises(AuthFailed):
        sign_in(users, {}, email, password)


def test_unreadable_roles_mean_not_admin(users):
    users.fail("user_roles", "select")
    session = {}
    sign_in(users, session, "admin@example.com", "secret123")
    assert admin_access(session) == "denied"


def test_sign_up_sends_full_name(supabase):
    sign_up(supabase, "new@example.com", "secret123", " Ravi Kumar ")
    [request] = supabase.auth.sign_ups
    assert request["options"]["data"]["full_name"] == "Ravi Kumar"


def test_sign_up_requires_name(supabase):
    with pytest.raises(AuthFailed):
        sign_up(supabase, "new@example.com", "secret123", "  ")


def test_sign_up_existing_user(users):
    with pytest.raises(AuthFailed) as excinfo:
        sign_up(users, "admin@example.com", "secret123", "Admin")
    assert excinfo.value.message == "User already registered"


def test_sign_out_clears_session(users):
    session = {}
    sign_in(users, session, "admin@example.com", "secret123")
    sign_out(users, session)
    assert current_user(session) is None
    assert users.auth.signed_out is True
