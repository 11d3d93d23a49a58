"""
HTTP endpoint for booking notifications.

    uvicorn notify_api:app --app-dir app

POST /send-booking-notification with the camelCase payload
{customerName, mobile, serviceName, eventDate, eventTime, notes, adminEmail?,
adminWhatsApp?} and get back {success, emailSent, emailError?, whatsappLink}.
"""

import logging
import os
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import EmailConfig, configure_logging, load_config_from_env
from notifier import NotificationPayload, send_booking_notification

logger = logging.getLogger(__name__)

CONFIG = load_config_from_env()
configure_logging(CONFIG.log_level)

app = FastAPI(title="Booking Notification API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


def get_email_config() -> Optional[EmailConfig]:
    return CONFIG.email


def get_notifier() -> Callable[..., Dict[str, Any]]:
    return send_booking_notification


@app.get("/")
def read_root():
    return {"message": "Booking notification API running"}


@app.post("/send-booking-notification")
def send_notification(
    payload: NotificationPayload,
    email_cfg: Optional[EmailConfig] = Depends(get_email_config),
    notify: Callable[..., Dict[str, Any]] = Depends(get_notifier),
):
    try:
        return notify(email_cfg, payload)
    except Exception as e:
        logger.exception("Error in send-booking-notification")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
