from pydantic import Field
from typing_extensions import Annotated

from .base import RequiredStr, Schema, optional_str


class UploadSchema(Schema):
    """Metadata record written after a file has been stored."""

    filename: RequiredStr
    original_name: RequiredStr
    mime_type: RequiredStr
    size: Annotated[int, Field(ge=0)]
    url: RequiredStr
    storage_key: RequiredStr
    uploaded_by: optional_str(64) = ""
