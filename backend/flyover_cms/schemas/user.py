from datetime import datetime
from typing import Literal, Optional

from pydantic import BeforeValidator
from typing_extensions import Annotated

from flyover_cms.utils.dates import parse_datetime

from .base import EmailStr, HttpUrlStr, Schema, optional_str, required_str

ROLES = ("USER", "SUPPORT", "ADMIN")

Role = Literal["USER", "SUPPORT", "ADMIN"]


def _upper(value):
    return value.upper() if isinstance(value, str) else value


class UserSchema(Schema):
    name: required_str(100)
    email: EmailStr
    phone: Optional[optional_str(30)] = None
    role: Annotated[Role, BeforeValidator(_upper)] = "USER"
    email_verified: Optional[Annotated[datetime, BeforeValidator(parse_datetime)]] = None
    image: Optional[HttpUrlStr] = None
    is_active: bool = True
