# app/auth.py

from __future__ import annotations

import logging
from typing import Any, Dict, MutableMapping, Optional

from db.repository import BackendError, has_role
from site_settings import is_valid_email

logger = logging.getLogger(__name__)

USER_KEY = "auth_user"
MIN_PASSWORD_LENGTH = 6


class AuthFailed(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _auth_message(e: Exception) -> str:
    return getattr(e, "message", None) or str(e) or "Authentication failed."


def _check_credentials(email: str, password: str) -> None:
    if not is_valid_email(email or ""):
        raise AuthFailed("Please enter a valid email address.")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")


def sign_in(supabase, session: MutableMapping[str, Any], email: str, password: str) -> Dict[str, Any]:
    _check_credentials(email, password)
    try:
        res = supabase.auth.sign_in_with_password({"email": email.strip(), "password": password})
    except Exception as e:
        raise AuthFailed(_auth_message(e)) from e

    if res.user is None:
        raise AuthFailed("Invalid login credentials.")

    try:
        is_admin = has_role(supabase, res.user.id, "admin")
    except BackendError as e:
        # Treat an unreadable role table as "not admin" rather than failing sign-in.
        logger.warning("Role lookup failed for %s: %s", res.user.id, e)
        is_admin = False

    user = {"id": res.user.id, "email": res.user.email, "is_admin": is_admin}
    session[USER_KEY] = user
    logger.info("User %s signed in (admin=%s)", user["email"], is_admin)
    return user


def sign_up(supabase, email: str, password: str, full_name: str) -> None:
    _check_credentials(email, password)
    if not (full_name or "").strip():
        raise AuthFailed("Please enter your full name.")
    try:
        supabase.auth.sign_up(
            {
                "email": email.strip(),
                "password": password,
                "options": {"data": {"full_name": full_name.strip()}},
            }
        )
    except Exception as e:
        raise AuthFailed(_auth_message(e)) from e


def sign_out(supabase, session: MutableMapping[str, Any]) -> None:
    session.pop(USER_KEY, None)
    try:
        supabase.auth.sign_out()
    except Exception as e:
        # The local session is already cleared.
        logger.warning("Remote sign out failed: %s", e)


def current_user(session: MutableMapping[str, Any]) -> Optional[Dict[str, Any]]:
    return session.get(USER_KEY)


def admin_access(session: MutableMapping[str, Any]) -> str:
    """Returns "login" when signed out, "denied" for non-admins, "ok" otherwise."""
    user = current_user(session)
    if user is None:
        return "login"
    if not user.get("is_admin"):
        return "denied"
    return "ok"
