"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the services the page
layer depends on. These protocols enable loose coupling, dependency
injection, and easier testing.

Protocols defined:
- EventSource: Interface for reading events
- NewsSource: Interface for reading news posts
- MediaSource: Interface for reading gallery media
- NotificationSink: Interface for user-facing notifications
"""

from typing import Protocol, Optional, List

from data.models import Event, NewsPost, MediaItem


class EventSource(Protocol):
    """Protocol for reading events.

    Implementations must flag each event with `is_today` against the
    current date at the time of the call.
    """

    def list_all(self) -> List[Event]:
        """Every event, earliest date first."""
        ...

    def list_upcoming(self, limit: Optional[int] = None) -> List[Event]:
        """Events dated today or later, earliest first.

        Args:
            limit: Maximum number of events, None for all.
        """
        ...


class NewsSource(Protocol):
    """Protocol for reading news posts, newest first."""

    def list_all(self) -> List[NewsPost]:
        ...

    def list_latest(self, limit: Optional[int] = None) -> List[NewsPost]:
        ...


class MediaSource(Protocol):
    """Protocol for reading gallery media, newest first."""

    def list_all(self) -> List[MediaItem]:
        ...

    def list_gallery(self, category: Optional[str] = None) -> List[MediaItem]:
        """Media in `category`; None or "All" for every item."""
        ...


class NotificationSink(Protocol):
    """Protocol for raising user-facing notifications."""

    def success(self, title: str, description: Optional[str] = None):
        ...

    def error(self, title: str, description: Optional[str] = None):
        ...
