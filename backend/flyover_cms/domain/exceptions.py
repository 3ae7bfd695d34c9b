from typing import Any, Dict, List, Optional


class CMSError(Exception):
    """Base class for errors the API layer knows how to render."""

    status_code = 500

    def __init__(self, message: str, *, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(CMSError):
    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls("Validation failed", details=[{"field": field, "message": message}])


class InvalidTransition(ValidationError):
    def __init__(self, *, field: str, from_status: str, to_status: str):
        message = f"Illegal {field} transition: {from_status} → {to_status}"
        super().__init__(message, details=[{"field": field, "message": message}])
        self.from_status = from_status
        self.to_status = to_status


class Forbidden(CMSError):
    status_code = 403


class NotFound(CMSError):
    status_code = 404


class Conflict(CMSError):
    status_code = 409


class PersistenceError(CMSError):
    status_code = 500


class PersistenceConfigError(PersistenceError):
    pass


class DuplicateSlug(CMSError):
    """Raised while inserting when a concurrent writer took the chosen slug.

    Resolved by the resource service; never rendered to a caller.
    """

    def __init__(self, slug: str):
        super().__init__(f"Slug already taken: {slug}")
        self.slug = slug
