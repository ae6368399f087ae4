"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for the managed backend.
These protocols enable dependency injection for backend operations,
making services testable without a real backend.

Protocols defined:
- TableStore: Interface for table reads and writes
- FileStore: Interface for object storage
- AuthStore: Interface for the auth service
- Backend: All three together, as implemented by BackendClient
"""

from dataclasses import dataclass
from typing import Protocol, Optional, List, Dict, Any, Sequence

from data.models import Session


@dataclass(frozen=True)
class Filter:
    """A single column filter, e.g. Filter("event_date", "gte", "2024-01-15")."""
    column: str
    op: str                            # eq, neq, gt, gte, lt, lte, in
    value: Any


@dataclass(frozen=True)
class Order:
    """Sort key and direction for a list call."""
    column: str
    ascending: bool = True


class TableStore(Protocol):
    """Protocol defining the interface for table operations.

    Implementations should provide methods for:
    - Selecting rows with filters, ordering and a limit
    - Inserting, updating and deleting rows matched by column values
    """

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[Order] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Select rows from a table.

        Args:
            table: Table name.
            columns: Comma-separated column list, "*" for all.
            filters: Filters combined with AND.
            order: Sort key and direction.
            limit: Maximum number of rows.

        Returns:
            The matching rows.
        """
        ...

    def insert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """Insert rows into a table."""
        ...

    def update(self, table: str, patch: Dict[str, Any], match: Dict[str, Any]) -> None:
        """Overwrite the `patch` columns of rows equal to `match`."""
        ...

    def delete(self, table: str, match: Dict[str, Any]) -> None:
        """Delete rows equal to `match`."""
        ...


class FileStore(Protocol):
    """Protocol defining the interface for object storage operations."""

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        upsert: bool = False
    ) -> Dict[str, Any]:
        """Upload bytes to `path` in `bucket` and return the stored object info."""
        ...

    def remove(self, bucket: str, paths: List[str]) -> None:
        """Remove objects from `bucket`."""
        ...

    def public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of an object."""
        ...


class AuthStore(Protocol):
    """Protocol defining the interface for the auth service."""

    def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password and keep the session."""
        ...

    def get_session(self) -> Optional[Session]:
        """Return the current session, or None when signed out."""
        ...

    def sign_out(self) -> None:
        """End the current session."""
        ...


class Backend(TableStore, FileStore, AuthStore, Protocol):
    """The managed backend: tables, object storage and auth."""
    pass
