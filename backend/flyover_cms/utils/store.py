import logging
from contextlib import contextmanager

from pymongo.errors import DuplicateKeyError, PyMongoError

from flyover_cms.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def store_operation(action: str, resource: str):
    """
    Context manager for document store calls.

    Driver failures are logged with their traceback and re-raised as a
    PersistenceError carrying a generic message. Duplicate keys pass through
    untouched so callers can resolve them.
    """
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as exc:
        logger.exception("Store failure during %s on %s", action, resource)
        raise PersistenceError(f"Failed to {action} {resource}") from exc
