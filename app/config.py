from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import streamlit as st


# ---------------------- DATA CLASSES ----------------------

@dataclass
class EmailConfig:
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    from_email: str
    from_name: str


@dataclass
class SupabaseConfig:
    url: str
    anon_key: str
    service_key: Optional[str] = None


@dataclass
class AppConfig:
    supabase: SupabaseConfig
    email: Optional[EmailConfig]
    site_name: str = "Anjaneya Services"
    log_level: str = "INFO"


# ---------------------- LOADING ----------------------

def _email_from(section: Mapping[str, Any]) -> Optional[EmailConfig]:
    if not section or not section.get("smtp_host"):
        return None
    # ports often arrive as strings from TOML or the environment
    return EmailConfig(
        smtp_host=section["smtp_host"],
        smtp_port=int(section.get("smtp_port", 587)),
        smtp_user=section.get("smtp_user", ""),
        smtp_password=section.get("smtp_password", ""),
        from_email=section["from_email"],
        from_name=section.get("from_name", "Bookings"),
    )


def load_config(secrets: Optional[Mapping[str, Any]] = None) -> AppConfig:
    if secrets is None:
        secrets = st.secrets

    # --- Supabase ---
    # anon_key is the public client key; older secrets files only had service_key
    sb = secrets["supabase"]
    supabase_cfg = SupabaseConfig(
        url=sb["url"],
        anon_key=sb.get("anon_key") or sb.get("service_key", ""),
        service_key=sb.get("service_key"),
    )

    # --- Email (optional) ---
    email_cfg = _email_from(secrets.get("email", {}))

    # --- App ---
    app_section = secrets.get("app", {})

    return AppConfig(
        supabase=supabase_cfg,
        email=email_cfg,
        site_name=app_section.get("site_name", "Anjaneya Services"),
        log_level=app_section.get("log_level", "INFO"),
    )


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Same settings for processes that run outside Streamlit."""
    env = os.environ if environ is None else environ

    email_section = {
        "smtp_host": env.get("SMTP_HOST"),
        "smtp_port": env.get("SMTP_PORT", "587"),
        "smtp_user": env.get("SMTP_USER", ""),
        "smtp_password": env.get("SMTP_PASSWORD", ""),
        "from_email": env.get("SMTP_FROM_EMAIL", ""),
        "from_name": env.get("SMTP_FROM_NAME", "Bookings"),
    }

    return AppConfig(
        supabase=SupabaseConfig(
            url=env.get("SUPABASE_URL", ""),
            anon_key=env.get("SUPABASE_ANON_KEY", ""),
            service_key=env.get("SUPABASE_SERVICE_KEY"),
        ),
        email=_email_from(email_section),
        site_name=env.get("SITE_NAME", "Anjaneya Services"),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Reduce verbosity of third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
