from .base import Schema, UrlOrLabel, partial_model, validate_payload

__all__ = ["Schema", "UrlOrLabel", "partial_model", "validate_payload"]
