# Practice Settings Feature - Models

from typing import Optional
from beanie import Document
from wellness.shared.models import TimestampMixin


class PracticeSettings(Document, TimestampMixin):
    """Practice contact details and branding. The collection holds a single document."""

    name: str
    address: str
    city: str
    state: str
    zip_code: str
    phone: str
    email: str
    website: Optional[str] = None
    tax_id: Optional[str] = None
    npi: Optional[str] = None
    logo_url: Optional[str] = None

    class Settings:
        name = "practice_settings"
        use_state_management = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Healthcare Wellness Center",
                "address": "123 Medical Drive",
                "city": "Healthville",
                "state": "CA",
                "zip_code": "90210",
                "phone": "(555) 123-4567",
                "email": "info@healthcarewellness.com",
                "website": "www.healthcarewellness.com",
            }
        }
