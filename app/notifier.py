"""
Booking notifications for the site owner: an email and a WhatsApp deep link.

The two channels are independent. A failed email is reported in the result
and never raised; the WhatsApp link is built whenever a number is given.
"""

from __future__ import annotations

import html
import logging
import smtplib
from datetime import datetime
from email.mime.text import MIMEText
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from config import EmailConfig
from notes_codec import SEPARATOR
from site_settings import digits_only

logger = logging.getLogger(__name__)

# Left unescaped by JavaScript's encodeURIComponent, besides -_.~
_URI_SAFE = "!~*'()"


class NotificationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName")
    mobile: str
    service_name: str = Field(..., alias="serviceName")
    event_date: str = Field(..., alias="eventDate")
    event_time: str = Field(..., alias="eventTime")
    notes: Optional[str] = ""
    admin_email: Optional[EmailStr] = Field(None, alias="adminEmail")
    admin_whatsapp: Optional[str] = Field(None, alias="adminWhatsApp")


def format_event_date(event_date: str) -> str:
    """'2025-06-14' -> 'Saturday, 14 June 2025'; unparseable input is returned as-is."""
    try:
        d = datetime.strptime(event_date.strip()[:10], "%Y-%m-%d")
    except ValueError:
        return event_date
    return f"{d:%A}, {d.day} {d:%B %Y}"


def build_email(payload: NotificationPayload) -> Dict[str, str]:
    e = html.escape
    formatted_date = format_event_date(payload.event_date)

    if payload.notes:
        notes_html = "".join(f"<li>{e(n)}</li>" for n in payload.notes.split(SEPARATOR))
    else:
        notes_html = "<li>No additional notes</li>"

    rows = [
        ("📋 Service:", e(payload.service_name)),
        ("👤 Customer:", e(payload.customer_name)),
        ("📱 Mobile:", f'<a href="tel:{e(payload.mobile)}">{e(payload.mobile)}</a>'),
        ("📅 Date:", e(formatted_date)),
        ("🕐 Time:", e(payload.event_time)),
        ("📝 Details:", f"<ul>{notes_html}</ul>"),
    ]
    rows_html = "".join(
        f'<div class="detail-row"><span class="label">{label}</span>'
        f'<span class="value">{value}</span></div>'
        for label, value in rows
    )

    body = f"""<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: #8B1538; color: white; padding: 20px; border-radius: 10px 10px 0 0; }}
    .content {{ background: #f9f9f9; padding: 20px; border: 1px solid #ddd; }}
    .footer {{ background: #333; color: white; padding: 15px; border-radius: 0 0 10px 10px; text-align: center; }}
    .detail-row {{ display: flex; padding: 10px 0; border-bottom: 1px solid #eee; }}
    .label {{ font-weight: bold; width: 150px; color: #8B1538; }}
    .value {{ flex: 1; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1 style="margin: 0;">🎊 New Booking Received!</h1></div>
    <div class="content">{rows_html}</div>
    <div class="footer"><p style="margin: 0;">Please respond to this booking promptly!</p></div>
  </div>
</body>
</html>"""

    return {
        "subject": f"🎉 New Booking: {payload.service_name} by {payload.customer_name}",
        "html": body,
    }


def build_whatsapp_message(payload: NotificationPayload) -> str:
    return (
        "🎉 *New Booking Alert!*\n\n"
        f"📋 *Service:* {payload.service_name}\n"
        f"👤 *Customer:* {payload.customer_name}\n"
        f"📱 *Mobile:* {payload.mobile}\n"
        f"📅 *Date:* {format_event_date(payload.event_date)}\n"
        f"🕐 *Time:* {payload.event_time}\n"
        f"📝 *Details:* {payload.notes or 'None'}"
    )


def whatsapp_link(number: str, message: str = "") -> str:
    link = f"https://wa.me/{digits_only(number)}"
    if message:
        link += "?text=" + quote(message, safe=_URI_SAFE)
    return link


# --- EMAIL TOOL -------------------------------------------------------------

def email_tool(
    cfg: Optional[EmailConfig],
    to_email: str,
    subject: str,
    body: str,
    smtp_factory: Callable[..., Any] = smtplib.SMTP,
) -> Dict[str, Any]:
    if not cfg or not cfg.smtp_host:
        logger.info("Email skipped: no SMTP config provided.")
        return {"success": False, "error": "Email is not configured."}

    msg = MIMEText(body, "html", "utf-8")
    msg["Subject"] = subject
    msg["From"] = f"{cfg.from_name} <{cfg.from_email}>"
    msg["To"] = to_email

    try:
        with smtp_factory(cfg.smtp_host, cfg.smtp_port) as server:
            server.starttls()
            if cfg.smtp_user:
                server.login(cfg.smtp_user, cfg.smtp_password)
            server.send_message(msg)
        return {"success": True, "error": None}

    except (smtplib.SMTPException, OSError) as e:
        logger.warning("Booking email to %s failed: %s", to_email, e)
        return {"success": False, "error": str(e)}


def send_booking_notification(
    cfg: Optional[EmailConfig],
    payload: NotificationPayload,
    smtp_factory: Callable[..., Any] = smtplib.SMTP,
) -> Dict[str, Any]:
    email_result: Dict[str, Any] = {"success": False, "error": None}
    if payload.admin_email:
        email = build_email(payload)
        email_result = email_tool(cfg, payload.admin_email, email["subject"], email["html"], smtp_factory)

    link = None
    if payload.admin_whatsapp:
        link = whatsapp_link(payload.admin_whatsapp, build_whatsapp_message(payload))

    result: Dict[str, Any] = {
        "success": True,
        "emailSent": email_result["success"],
        "whatsappLink": link,
    }
    if email_result["error"]:
        result["emailError"] = email_result["error"]
    return result
