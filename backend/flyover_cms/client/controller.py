# flyover_cms/client/controller.py
"""
Form/table state for one admin resource, bound to the HTTP API.

Mirrors what an admin screen holds: the form being edited, the rows of the
current page, the selected item, a loading flag and a presentable error.
Every action waits for the server; nothing is applied optimistically and
nothing is retried.
"""
import copy
import logging
from typing import Any, Dict, List, Optional

import requests

from flyover_cms.application.resources.registry import response_keys

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ResourceController:
    def __init__(
        self,
        resource: str,
        base_url: str,
        *,
        token: Optional[str] = None,
        session=None,
        singular: Optional[str] = None,
        plural: Optional[str] = None,
        initial_form: Optional[Dict[str, Any]] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.resource = resource
        self.base_url = base_url.rstrip("/")
        if singular is None or plural is None:
            # Envelope keys follow the server's resource table
            try:
                known_singular, known_plural = response_keys(resource)
            except KeyError:
                raise ValueError(
                    f"Unknown resource {resource!r}: pass singular and plural explicitly"
                ) from None
            singular = singular or known_singular
            plural = plural or known_plural
        self.singular = singular
        self.plural = plural
        self.timeout = timeout

        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

        self._initial_form = dict(initial_form or {})
        self.form: Dict[str, Any] = copy.deepcopy(self._initial_form)
        self.loading = False
        self.error: Optional[str] = None
        self.items: List[Dict[str, Any]] = []
        self.item: Optional[Dict[str, Any]] = None
        self.pagination: Dict[str, Any] = {}
        self.query: Dict[str, Any] = {}

    # -------------------------------------------------
    # Form state
    # -------------------------------------------------
    def set_field(self, name: str, value: Any) -> None:
        self.form[name] = value

    def reset_form(self) -> None:
        self.form = copy.deepcopy(self._initial_form)

    # -------------------------------------------------
    # Transport
    # -------------------------------------------------
    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, "admin", self.resource, *parts])

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Request failed with status {response.status_code}"

        if not isinstance(body, dict):
            return f"Request failed with status {response.status_code}"

        message = body.get("error") or f"Request failed with status {response.status_code}"
        details = body.get("details") or []
        if details:
            fields = "; ".join(
                f"{detail.get('field')}: {detail.get('message')}" for detail in details
            )
            message = f"{message} ({fields})"
        return message

    def _send(self, method: str, url: str, **kwargs) -> Optional[Dict[str, Any]]:
        """
        One round trip. Returns the decoded body on success; on failure sets
        ``error`` and returns None, leaving form and held data untouched.
        """
        self.loading = True
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            if not response.ok:
                self.error = self._error_message(response)
                logger.info("%s %s failed: %s", method, url, self.error)
                return None
            self.error = None
            return response.json()
        except ValueError:
            self.error = "The server returned an unreadable response."
            return None
        except requests.RequestException as exc:
            logger.warning("%s %s could not reach the server: %s", method, url, exc)
            self.error = "Could not reach the server. Please try again."
            return None
        finally:
            self.loading = False

    def _replace(self, item: Dict[str, Any]) -> None:
        self.items = [item if row.get("_id") == item.get("_id") else row for row in self.items]
        if self.item and self.item.get("_id") == item.get("_id"):
            self.item = item

    # -------------------------------------------------
    # Actions
    # -------------------------------------------------
    def refresh(self, *, page: Optional[int] = None, limit: Optional[int] = None,
                search: Optional[str] = None, **filters) -> bool:
        """Reload the listing. Arguments given here stick for later refreshes."""
        if page is not None:
            self.query["page"] = page
        if limit is not None:
            self.query["limit"] = limit
        if search is not None:
            self.query["search"] = search
        self.query.update(filters)

        body = self._send("GET", self._url(), params=self.query)
        if body is None:
            return False

        self.items = body.get(self.plural, [])
        self.pagination = body.get("pagination", {})
        return True

    def load(self, item_id: str) -> bool:
        body = self._send("GET", self._url(item_id))
        if body is None:
            return False

        self.item = body.get(self.singular)
        return True

    def create(self, *, reset_form: bool = True) -> bool:
        body = self._send("POST", self._url(), json=self.form)
        if body is None:
            return False

        created = body.get(self.singular)
        self.item = created
        self.items = [created] + self.items
        if reset_form:
            self.reset_form()
        return True

    def update(self, item_id: str, changes: Optional[Dict[str, Any]] = None) -> bool:
        payload = self.form if changes is None else changes
        body = self._send("PUT", self._url(item_id), json=payload)
        if body is None:
            return False

        self._replace(body.get(self.singular))
        return True

    def set_status(self, item_id: str, status: str) -> bool:
        body = self._send("PATCH", self._url(item_id), json={"status": status})
        if body is None:
            return False

        self._replace(body.get(self.singular))
        return True

    def delete(self, item_id: str) -> bool:
        body = self._send("DELETE", self._url(item_id))
        if body is None:
            return False

        self.items = [row for row in self.items if row.get("_id") != item_id]
        if self.item and self.item.get("_id") == item_id:
            self.item = None
        return True
