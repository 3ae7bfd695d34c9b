# Public information pages: destinations, services, team and testimonials.
from datetime import datetime
from typing import List, Optional

from pydantic import BeforeValidator, Field
from typing_extensions import Annotated

from flyover_cms.utils.dates import parse_datetime

from .base import EmailStr, HttpUrlStr, RequiredStr, Schema, optional_str, required_str

Count = Annotated[int, Field(ge=0)]
Order = Annotated[int, Field(ge=0)]


class Faq(Schema):
    question: RequiredStr
    answer: RequiredStr


class DestinationSchema(Schema):
    country: required_str(100)
    name: Optional[optional_str(100)] = None
    flag: optional_str(20) = ""
    universities: Count = 0
    students: Count = 0
    hero: Optional[optional_str(500)] = None
    overview_md: Optional[str] = Field(None, alias="overviewMD")
    costs_md: Optional[str] = Field(None, alias="costsMD")
    intakes_md: Optional[str] = Field(None, alias="intakesMD")
    visa_md: Optional[str] = Field(None, alias="visaMD")
    scholarships_md: Optional[str] = Field(None, alias="scholarshipsMD")
    popular_courses: List[RequiredStr] = []
    faqs: List[Faq] = []


class ServiceFeature(Schema):
    icon: optional_str(100) = ""
    title: required_str(100)
    description: required_str(500)


class ProcessStep(Schema):
    step: RequiredStr
    title: required_str(100)
    description: required_str(500)


class ServiceSchema(Schema):
    name: required_str(200)
    title: required_str(200)
    subtitle: required_str(300)
    description: required_str(1000)
    image: RequiredStr
    sections_md: List[RequiredStr] = Field(..., min_length=1, alias="sectionsMD")
    features: List[ServiceFeature] = Field(..., min_length=1, max_length=10)
    benefits: List[RequiredStr] = Field(..., min_length=1)
    process: List[ProcessStep] = Field(..., min_length=1)
    cta_label: required_str(50)
    cta_text: required_str(100)
    popular: bool = False


class TeamMemberSchema(Schema):
    name: required_str(100)
    role: required_str(100)
    image: RequiredStr
    bio: RequiredStr
    expertise: List[RequiredStr] = Field(..., min_length=1)
    email: EmailStr
    linkedin: optional_str(300) = ""
    phone: required_str(30)
    is_active: bool = True
    order: Optional[Order] = None


class TestimonialSchema(Schema):
    author: required_str(100)
    quote: required_str(2000)
    source: Optional[optional_str(200)] = None
    avatar_url: Optional[HttpUrlStr] = None
    published_at: Optional[Annotated[datetime, BeforeValidator(parse_datetime)]] = None
