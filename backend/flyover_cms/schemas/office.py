from typing import Optional

from .base import EmailStr, Schema, optional_str, required_str


class OfficeSchema(Schema):
    city: required_str(100)
    phone: required_str(30)
    email: Optional[EmailStr] = None
    map_embed_url: Optional[optional_str(2000)] = None
