# Home page sections: partners, awards, study-abroad steps,
# why-choose-us features and hero slides.
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator
from typing_extensions import Annotated

from .base import (
    HexColor,
    HttpUrlStr,
    Schema,
    UrlOrLabel,
    optional_str,
    required_str,
)

Order = Annotated[int, Field(ge=0)]


def _max_award_year() -> int:
    return datetime.now().year + 10


def _check_award_year(value: int) -> int:
    if value < 1900 or value > _max_award_year():
        raise ValueError(f"must be between 1900 and {_max_award_year()}")
    return value


class PartnerSchema(Schema):
    name: required_str(200)
    category: required_str(100)
    country: required_str(100)
    logo: UrlOrLabel
    brand_color: HexColor = "#1e3a8a"
    order: Optional[Order] = None


class AwardSchema(Schema):
    title: required_str(300)
    image: UrlOrLabel
    year: int
    order: Optional[Order] = None

    @field_validator("year")
    @classmethod
    def validate_year(cls, value):
        if value is None:
            return value
        return _check_award_year(value)


class StepSchema(Schema):
    icon: required_str(100)
    title: required_str(200)
    description: required_str(1000)
    order: Optional[Order] = None


class FeatureSchema(StepSchema):
    pass


class ButtonAction(Schema):
    label: required_str(100)
    href: Optional[optional_str(500)] = None
    is_modal: bool = False

    @model_validator(mode="after")
    def check_target(self):
        if not self.href and not self.is_modal:
            raise ValueError("Button action must have either href or isModal set to true")
        if self.href and self.is_modal:
            raise ValueError("Button action cannot have both href and isModal set")
        return self


class SlideSchema(Schema):
    image: HttpUrlStr
    headline: required_str(200)
    sub: required_str(500)
    primary: ButtonAction
    secondary: ButtonAction
    order: Optional[Order] = None
    active: bool = True
