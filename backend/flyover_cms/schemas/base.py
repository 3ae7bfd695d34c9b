# flyover_cms/schemas/base.py
from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional, Type, Union

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    create_model,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from flyover_cms.domain.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
_HTTP_URL = TypeAdapter(AnyHttpUrl)


class Schema(BaseModel):
    """Base for every request schema: camelCase on the wire, unknown keys dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# -------------------------------------------------
# Field types
# -------------------------------------------------
def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _require_text(value: str) -> str:
    if not value:
        raise ValueError("must not be empty")
    return value


def _check_url(value: str) -> str:
    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError:
        raise ValueError("must be a valid http(s) URL")
    return value


def _check_email(value: str) -> str:
    if not _EMAIL_RE.match(value):
        raise ValueError("must be a valid email address")
    return value


def _check_hex_color(value: str) -> str:
    if not _HEX_COLOR_RE.match(value):
        raise ValueError("must be a hex colour such as #1a2b3c")
    return value


def _lower(value):
    return value.lower() if isinstance(value, str) else value


def required_str(max_length: Optional[int] = None):
    return Annotated[
        str,
        BeforeValidator(_strip),
        Field(max_length=max_length),
        AfterValidator(_require_text),
    ]


def optional_str(max_length: Optional[int] = None):
    return Annotated[str, BeforeValidator(_strip), Field(max_length=max_length)]


RequiredStr = required_str()
HttpUrlStr = Annotated[str, BeforeValidator(_strip), AfterValidator(_check_url)]
EmailStr = Annotated[
    str,
    BeforeValidator(_strip),
    BeforeValidator(_lower),
    Field(max_length=100),
    AfterValidator(_check_email),
]
HexColor = Annotated[str, BeforeValidator(_strip), AfterValidator(_check_hex_color)]


# -------------------------------------------------
# URL-or-label tagged variant
# -------------------------------------------------
class UrlRef(Schema):
    kind: Literal["url"] = "url"
    value: HttpUrlStr


class LabelRef(Schema):
    kind: Literal["label"] = "label"
    value: RequiredStr


def _looks_like_url(text: str) -> bool:
    try:
        _check_url(text)
        return True
    except ValueError:
        return False


def _classify_ref(value):
    """Bare strings are tagged once here, at the boundary."""
    if isinstance(value, str):
        text = value.strip()
        return {"kind": "url" if _looks_like_url(text) else "label", "value": text}
    return value


UrlOrLabel = Annotated[
    Union[UrlRef, LabelRef],
    Field(discriminator="kind"),
    BeforeValidator(_classify_ref),
]


# -------------------------------------------------
# Validation entry points
# -------------------------------------------------
def _error_details(exc: PydanticValidationError) -> List[Dict[str, str]]:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        details.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return details


@lru_cache(maxsize=None)
def partial_model(schema: Type[Schema]) -> Type[Schema]:
    """
    Derive the edit-form variant of a schema: same field types and
    validators, every field optional and defaulting to None.
    """
    fields: Dict[str, Any] = {}
    for name, info in schema.model_fields.items():
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        # Explicit aliases such as overviewMD must survive the rebuild
        default = Field(None, alias=info.alias) if info.alias else None
        fields[name] = (Optional[annotation], default)

    return create_model(f"Partial{schema.__name__}", __base__=schema, **fields)


def validate_payload(
    schema: Type[Schema],
    payload: Any,
    *,
    partial: bool = False,
) -> Dict[str, Any]:
    """
    Validate a request payload against a resource schema.

    Returns the normalised fields keyed by their wire (camelCase) names.
    Partial validation only returns, and only checks, the fields present.
    """
    if not isinstance(payload, dict):
        raise ValidationError.for_field("body", "Request body must be a JSON object")

    model = partial_model(schema) if partial else schema

    try:
        instance = model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError("Validation failed", details=_error_details(exc)) from exc

    dumped = instance.model_dump(by_alias=True)

    if not partial:
        return dumped

    data: Dict[str, Any] = {}
    details = []
    for name in instance.model_fields_set:
        info = schema.model_fields[name]
        alias = info.alias or name
        value = dumped[alias]
        if value is None and info.is_required():
            details.append({"field": alias, "message": "must not be null"})
            continue
        data[alias] = value

    if details:
        raise ValidationError("Validation failed", details=details)

    return data
