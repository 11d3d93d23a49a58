# db/models.py
"""
Row schemas for the Supabase tables used by the site.

Tables created in the Supabase dashboard:

Table: bookings
- id (uuid, PK)
- service_name (text)
- customer_name (text)
- mobile (text)
- event_date (date)
- event_time (text)
- status (text: pending | confirmed | cancelled | completed)
- notes (text, nullable)      -- "Pickup: A | Drop: B" style segments
- details (jsonb, nullable)   -- structured booking details
- created_at (timestamptz)

Table: services
- id (uuid, PK)
- name, description, image_url, price, category (text)
- is_active (bool)
- display_order (int)

Table: site_settings
- id (uuid, PK)
- setting_key (text, unique)
- setting_value (text)
- description (text)

Table: user_roles
- user_id (uuid, FK -> auth.users)
- role (text)
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]

BOOKING_STATUSES = ["pending", "confirmed", "cancelled", "completed"]


class Booking(BaseModel):
    """
    Customer booking requests
    Table: "bookings"
    """
    id: Optional[str] = None
    service_name: str = Field(..., description="Booked service")
    customer_name: str = Field(..., description="Customer full name")
    mobile: str = Field(..., description="Contact number")
    event_date: str = Field(..., description="Event date (YYYY-MM-DD)")
    event_time: str = Field(..., description="Event time (HH:MM)")
    status: BookingStatus = Field("pending", description="Booking status")
    notes: Optional[str] = Field(None, description="Encoded booking details")
    details: Optional[Dict[str, Any]] = Field(None, description="Structured booking details")
    created_at: Optional[str] = None


class Service(BaseModel):
    """
    Services catalog
    Table: "services"
    """
    id: Optional[str] = None
    name: str = Field(..., min_length=1, description="Service name")
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[str] = Field(None, description="Display price, e.g. ₹25,000")
    category: Optional[str] = Field(None, description="Fixed category key or custom category name")
    is_active: bool = Field(True, description="Whether the service is shown on public pages")
    display_order: int = Field(0, ge=0)


class SiteSetting(BaseModel):
    """
    Key-value site configuration
    Table: "site_settings"
    """
    id: Optional[str] = None
    setting_key: str
    setting_value: Optional[str] = None
    description: Optional[str] = None
