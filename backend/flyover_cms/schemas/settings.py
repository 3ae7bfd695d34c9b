from typing import List

from pydantic import BeforeValidator, Field
from typing_extensions import Annotated

from .base import EmailStr, Schema, optional_str, required_str


def _split_types(value):
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class SettingsSchema(Schema):
    site_name: required_str(200)
    site_description: optional_str(1000) = ""
    admin_email: EmailStr
    max_file_size: Annotated[int, Field(ge=1, le=100)] = 10
    allowed_file_types: Annotated[List[str], BeforeValidator(_split_types)] = []
    enable_registration: bool = False
    enable_email_verification: bool = True
    maintenance_mode: bool = False
    smtp_host: optional_str(255) = ""
    smtp_port: Annotated[int, Field(ge=1, le=65535)] = 587
    smtp_user: optional_str(255) = ""
