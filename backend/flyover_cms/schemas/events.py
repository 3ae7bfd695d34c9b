from datetime import datetime
from typing import Literal, Optional

from pydantic import BeforeValidator, Field
from typing_extensions import Annotated

from flyover_cms.utils.dates import parse_datetime

from .base import EmailStr, HttpUrlStr, RequiredStr, Schema, optional_str, required_str

EventStatus = Literal["draft", "published", "cancelled", "completed"]
RegistrationStatus = Literal["pending", "confirmed", "cancelled", "attended", "no-show"]
PaymentStatus = Literal["pending", "paid", "refunded", "failed"]

FlexibleDatetime = Annotated[datetime, BeforeValidator(parse_datetime)]
NonNegative = Annotated[float, Field(ge=0)]


class EventSchema(Schema):
    title: required_str(200)
    date: RequiredStr
    time: RequiredStr
    location: required_str(200)
    description: required_str(2000)
    image: HttpUrlStr
    venue: Optional[optional_str(200)] = None
    city: Optional[optional_str(100)] = None
    registration_deadline: Optional[FlexibleDatetime] = None
    status: EventStatus = "draft"
    capacity: Annotated[int, Field(ge=0)] = 0
    is_free: bool = True
    price: NonNegative = 0


class EmergencyContact(Schema):
    name: required_str(100)
    phone: required_str(20)
    relationship: required_str(50)


class RegistrationSchema(Schema):
    """Fields an attendee submits from the public registration form."""

    event_id: RequiredStr
    full_name: required_str(100)
    email: EmailStr
    phone: required_str(20)
    company: Optional[optional_str(100)] = None
    job_title: Optional[optional_str(100)] = None
    country: Optional[optional_str(50)] = None
    city: Optional[optional_str(50)] = None
    dietary_requirements: Optional[optional_str(200)] = None
    accessibility_needs: Optional[optional_str(200)] = None
    emergency_contact: Optional[EmergencyContact] = None
    how_did_you_hear: Optional[optional_str(100)] = None
    expectations: Optional[optional_str(500)] = None
    questions: Optional[optional_str(500)] = None


class RegistrationAdminSchema(Schema):
    """Fields an admin may edit on an existing registration."""

    status: RegistrationStatus
    payment_status: PaymentStatus
    payment_amount: NonNegative
    payment_method: optional_str(100)
    payment_reference: optional_str(100)
    checked_in_at: FlexibleDatetime
    checked_in_by: optional_str(100)
    notes: optional_str(1000)
    full_name: required_str(100)
    phone: required_str(20)
    company: optional_str(100)
    job_title: optional_str(100)
    country: optional_str(50)
    city: optional_str(50)
    dietary_requirements: optional_str(200)
    accessibility_needs: optional_str(200)
    emergency_contact: EmergencyContact
    how_did_you_hear: optional_str(100)
    expectations: optional_str(500)
    questions: optional_str(500)
