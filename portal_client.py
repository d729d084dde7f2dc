"""DJ agency portal API client.

A thin wrapper around the portal's REST API built on ``requests``.  It
is what a dashboard or script uses to load the portal's collections:

* :meth:`sign_in` – obtain a bearer token and keep it for later calls.
* :meth:`list_djs`, :meth:`list_events`, :meth:`list_contracts`,
  :meth:`list_producers` – fetch the collections visible to the user.
* :meth:`create_dj`, :meth:`update_dj`, :meth:`create_event`,
  :meth:`update_event`, :meth:`delete_event`, :meth:`create_producer` –
  write operations (administrators only).
* :meth:`load_all` – fetch every collection at once, collecting
  per-collection errors instead of failing as a whole.

Every method returns a ``(data, error)`` tuple.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a dictionary
with keys ``status_code`` and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

Error = Dict[str, Any]


class PortalClient:
    """Client for the DJ agency portal API."""

    # Collections fetched by :meth:`load_all`, in order.
    COLLECTIONS = ("djs", "events", "contracts", "producers")

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the portal, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token sent in the ``Authorization``
                header.  :meth:`sign_in` replaces it.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/djs/``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{API_PREFIX}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                except ValueError:
                    message = exc.response.text
                else:
                    if isinstance(err_json, dict):
                        message = err_json.get("detail") or err_json.get("message") or str(err_json)
                    else:
                        message = str(err_json)
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": str(message)}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def sign_in(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Log in and keep the returned token for subsequent requests."""
        data, error = self._request("POST", "/users/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.api_key = data["access_token"]
        return data, None

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------
    def list_djs(self, **filters: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """List DJs; accepts ``search``, ``genre``, ``status``, ``sort_by`` and ``order``."""
        return self._list("/djs/", filters)

    def list_events(self, **filters: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/events/", filters)

    def list_contracts(self, **filters: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/contracts/", filters)

    def list_producers(self, **filters: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/producers/", filters)

    def load_all(self) -> Tuple[Dict[str, List[Dict[str, Any]]], Dict[str, Error]]:
        """Fetch every collection independently.

        A failing collection is returned empty and its error is reported
        under the collection name; the others are still loaded.
        """
        loaders = {
            "djs": self.list_djs,
            "events": self.list_events,
            "contracts": self.list_contracts,
            "producers": self.list_producers,
        }
        data: Dict[str, List[Dict[str, Any]]] = {}
        errors: Dict[str, Error] = {}
        for name in self.COLLECTIONS:
            items, error = loaders[name]()
            data[name] = items
            if error:
                logger.warning("Could not load %s: %s", name, error["message"])
                errors[name] = error
        return data, errors

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------
    def create_dj(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/djs/", json_body=payload)

    def update_dj(self, dj_id: Any, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/djs/{dj_id}", json_body=payload)

    def create_event(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/events/", json_body=payload)

    def update_event(self, event_id: Any, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/events/{event_id}", json_body=payload)

    def delete_event(self, event_id: Any) -> Tuple[bool, Optional[Error]]:
        """Delete an event.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", f"/events/{event_id}")
        if error:
            return False, error
        return True, None

    def create_producer(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/producers/", json_body=payload)
