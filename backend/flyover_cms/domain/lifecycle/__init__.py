from .status import StatusLifecycle
from .content import (
    CONTENT_LIFECYCLE,
    EVENT_LIFECYCLE,
    REGISTRATION_LIFECYCLE,
)

__all__ = [
    "StatusLifecycle",
    "CONTENT_LIFECYCLE",
    "EVENT_LIFECYCLE",
    "REGISTRATION_LIFECYCLE",
]
