"""
Backend Client Module for the Church Site

This module handles all communication with the managed backend: table reads
and writes over its REST interface, file uploads to object storage, and the
auth service that issues sessions. Every failed call is raised as a
RemoteError subclass.
"""

from datetime import date, datetime, time
from typing import Optional, List, Dict, Any, Sequence, Type
from urllib.parse import quote

import requests

from config import settings
from data.models import Session, User
from data.protocols import Filter, Order
from utils.exceptions import (
    RemoteError, AuthenticationError, QueryError, MutationError, StorageError
)
from utils.helpers import safe_get
from utils.logger import get_logger

logger = get_logger(__name__)

FILTER_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "in", "is"}


def _format_value(value: Any) -> str:
    """Render a Python value the way the REST filter syntax expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    return str(value)


def _filter_param(f: Filter) -> str:
    if f.op not in FILTER_OPERATORS:
        raise ValueError(f"Unsupported filter operator: {f.op}")
    if f.op == "in":
        return "in.(" + ",".join(_format_value(v) for v in f.value) + ")"
    return f"{f.op}.{_format_value(f.value)}"


def _error_message(response: requests.Response) -> str:
    """Pull the most useful message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class BackendClient:
    """Client for the managed backend's tables, object storage and auth service."""

    def __init__(self, url: str, anon_key: str, timeout: float = 15,
                 http: Optional[requests.Session] = None):
        """
        Initialize the backend client.

        Args:
            url: Base URL of the backend project.
            anon_key: Public API key sent with every request.
            timeout: Seconds before a request is abandoned.
            http: Optional requests session, mainly for tests.
        """
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.http = http or requests.Session()
        self._session: Optional[Session] = None

    @classmethod
    def from_settings(cls) -> "BackendClient":
        """Build a client from the BACKEND_* settings."""
        return cls(settings.BACKEND_URL, settings.BACKEND_ANON_KEY, settings.REQUEST_TIMEOUT)

    # =========================================================================
    # Transport
    # =========================================================================

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        token = self._session.access_token if self._session else self.anon_key
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, path: str, error_cls: Type[RemoteError] = RemoteError,
                 headers: Optional[Dict[str, str]] = None, **kwargs) -> requests.Response:
        """
        Send one request and raise `error_cls` if it fails.

        Raises:
            RemoteError: The given subclass, for transport errors and non-2xx responses.
        """
        url = f"{self.url}{path}"
        try:
            response = self.http.request(
                method, url, headers=self._headers(headers), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise error_cls(str(e)) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise error_cls(message, status_code=response.status_code)

        return response

    # =========================================================================
    # Tables
    # =========================================================================

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[Order] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Select rows from a table.

        Args:
            table: Table name.
            columns: Comma-separated column list, "*" for all.
            filters: Filters combined with AND.
            order: Sort key and direction.
            limit: Maximum number of rows.

        Returns:
            List[Dict[str, Any]]: The matching rows, possibly empty.

        Raises:
            QueryError: If the backend rejects the query.
        """
        params: List[tuple] = [("select", columns)]
        for f in filters:
            params.append((f.column, _filter_param(f)))
        if order is not None:
            params.append(("order", f"{order.column}.{'asc' if order.ascending else 'desc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))

        response = self._request("GET", f"/rest/v1/{table}", QueryError, params=params)
        rows = response.json()
        logger.debug(f"Selected {len(rows)} rows from {table}")
        return rows

    def insert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """
        Insert rows into a table.

        Raises:
            MutationError: If the insert fails.
        """
        self._request(
            "POST", f"/rest/v1/{table}", MutationError,
            headers={"Prefer": "return=minimal"}, json=rows
        )
        logger.debug(f"Inserted {len(rows)} rows into {table}")

    def update(self, table: str, patch: Dict[str, Any], match: Dict[str, Any]) -> None:
        """
        Overwrite the `patch` columns of every row equal to `match`.

        Raises:
            MutationError: If the update fails.
        """
        params = [(column, f"eq.{_format_value(value)}") for column, value in match.items()]
        self._request(
            "PATCH", f"/rest/v1/{table}", MutationError,
            headers={"Prefer": "return=minimal"}, params=params, json=patch
        )
        logger.debug(f"Updated {table} where {match}")

    def delete(self, table: str, match: Dict[str, Any]) -> None:
        """
        Delete every row equal to `match`.

        Raises:
            MutationError: If the delete fails.
        """
        if not match:
            raise ValueError("Refusing to delete without a match")
        params = [(column, f"eq.{_format_value(value)}") for column, value in match.items()]
        self._request("DELETE", f"/rest/v1/{table}", MutationError, params=params)
        logger.debug(f"Deleted from {table} where {match}")

    # =========================================================================
    # Object Storage
    # =========================================================================

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        upsert: bool = False
    ) -> Dict[str, Any]:
        """
        Upload a file to object storage.

        Args:
            bucket: Storage bucket name.
            path: Object path inside the bucket.
            data: File contents.
            content_type: MIME type of the file.
            cache_control: max-age in seconds for the stored object.
            upsert: Overwrite an existing object at the same path.

        Returns:
            Dict[str, Any]: The stored object's info, always including "path".

        Raises:
            StorageError: If the upload fails.
        """
        headers = {
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "true" if upsert else "false",
        }
        if cache_control:
            headers["Cache-Control"] = f"max-age={cache_control}"

        response = self._request(
            "POST", f"/storage/v1/object/{bucket}/{quote(path)}", StorageError,
            headers=headers, data=data
        )
        try:
            info = response.json()
        except ValueError:
            info = {}
        info.setdefault("path", path)
        logger.info(f"Uploaded {len(data)} bytes to {bucket}/{path}")
        return info

    def remove(self, bucket: str, paths: List[str]) -> None:
        """
        Remove objects from storage.

        Raises:
            StorageError: If the removal fails.
        """
        self._request(
            "DELETE", f"/storage/v1/object/{bucket}", StorageError,
            json={"prefixes": list(paths)}
        )
        logger.info(f"Removed {len(paths)} objects from {bucket}")

    def public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of an object in a public bucket."""
        return f"{self.url}/storage/v1/object/public/{bucket}/{quote(path)}"

    # =========================================================================
    # Auth
    # =========================================================================

    def sign_in(self, email: str, password: str) -> Session:
        """
        Sign in with email and password and keep the resulting session.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        response = self._request(
            "POST", "/auth/v1/token", AuthenticationError,
            params={"grant_type": "password"},
            json={"email": email, "password": password}
        )
        body = response.json()
        self._session = Session(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            user=User(id=safe_get(body, "user", "id", default=""), email=safe_get(body, "user", "email")),
        )
        logger.info(f"Signed in as {self._session.user.email}")
        return self._session

    def get_session(self) -> Optional[Session]:
        """
        Return the current session after confirming it with the auth service.

        Returns:
            Optional[Session]: The session, or None when signed out or expired.

        Raises:
            AuthenticationError: If the auth service cannot be reached.
        """
        if self._session is None:
            return None
        try:
            response = self._request("GET", "/auth/v1/user", AuthenticationError)
        except AuthenticationError as e:
            if e.status_code in (401, 403):
                logger.info("Stored session is no longer valid")
                self._session = None
                return None
            raise
        user = response.json()
        self._session.user.id = user.get("id", self._session.user.id)
        self._session.user.email = user.get("email", self._session.user.email)
        return self._session

    def sign_out(self) -> None:
        """End the current session; the local session is dropped even if the call fails."""
        if self._session is None:
            return
        try:
            self._request("POST", "/auth/v1/logout", AuthenticationError)
        finally:
            self._session = None
            logger.info("Signed out")
