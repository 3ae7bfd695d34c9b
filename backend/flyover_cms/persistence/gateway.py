# flyover_cms/persistence/gateway.py
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from flyover_cms.domain.exceptions import PersistenceConfigError

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "flyover"


class MongoGateway:
    """
    Process-wide handle to the document store.

    Lifecycle:
    - Constructed once by the app factory (or injected by the caller)
    - Connects lazily on the first ``get_handle()`` call
    - Reused by every service until ``close()``
    """

    def __init__(
        self,
        uri: Optional[str],
        *,
        db_name: Optional[str] = None,
        client_factory: Callable[..., Any] = MongoClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self._client_factory = client_factory
        self._client = None
        self._db: Optional[Database] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "MongoGateway":
        return cls(config.get("MONGODB_URI"), db_name=config.get("MONGODB_DB"))

    @property
    def connected(self) -> bool:
        return self._db is not None

    def get_handle(self) -> Database:
        if self._db is not None:
            return self._db

        if not self.uri:
            raise PersistenceConfigError(
                "MONGODB_URI is not configured; set it in the environment or .env"
            )

        with self._lock:
            if self._db is None:
                client = self._client_factory(self.uri)
                if self.db_name:
                    db = client[self.db_name]
                else:
                    db = client.get_default_database(default=DEFAULT_DB_NAME)
                self._client = client
                self._db = db
                logger.info("Connected to document store database %s", db.name)

        return self._db

    def collection(self, name: str) -> Collection:
        return self.get_handle()[name]

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
            self._client = None
            self._db = None
