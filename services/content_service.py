"""
Content Service Module

Repositories for the site's content tables. Each repository lists rows with
an explicit sort order, writes through the backend client, invalidates the
cached lists it affects, and reports the outcome of every mutation as a
notification.
"""

from datetime import date
from typing import Optional, List, Dict, Any, Callable, Sequence, Tuple, Type

from pydantic import BaseModel

from config import settings
from data.forms import EventForm, NewsForm, parse_form
from data.models import Event, NewsPost
from data.protocols import Backend, Filter, Order
from services.cache import QueryCache
from services.notifications import Notifier
from services.protocols import NotificationSink
from utils.exceptions import RemoteError
from utils.logger import get_logger

logger = get_logger(__name__)


class TableRepository:
    """
    Base repository for one backend table.

    Subclasses set `table`, `default_order`, the cache keys they own and
    the notification wording, and implement `_to_entity`.
    """
    table: str = ""
    default_order: Order = Order("id")
    cache_key: str = ""
    # Every cached list that shows rows of this table
    invalidates: Tuple[str, ...] = ()
    label: str = "item"                # Used in notification titles

    def __init__(self, backend: Backend, cache: Optional[QueryCache] = None,
                 notifier: Optional[NotificationSink] = None,
                 clock: Callable[[], date] = date.today):
        """
        Initialize the repository.

        Args:
            backend: Client for the managed backend.
            cache: Shared query cache; a private one is created if omitted.
            notifier: Sink for user-facing notifications.
            clock: Returns today's date; derived fields are computed against it.
        """
        self.backend = backend
        self.cache = cache if cache is not None else QueryCache()
        self.notifier = notifier if notifier is not None else Notifier()
        self.clock = clock

    def _to_entity(self, row: Dict[str, Any]):
        raise NotImplementedError

    def list(self, filters: Sequence[Filter] = (), order: Optional[Order] = None,
             limit: Optional[int] = None, cache_key: Optional[str] = None) -> List[Any]:
        """
        List rows as entities.

        Raw rows are cached under `cache_key`; entities and their derived
        fields are rebuilt on every call.

        Args:
            filters: Filters combined with AND.
            order: Sort key and direction, defaults to the table's default order.
            limit: Maximum number of rows.
            cache_key: Cache entry for this query, defaults to one derived from
                the filters, order and limit under the table's key.

        Returns:
            List of entities, empty when the table has no matching rows.

        Raises:
            RemoteError: If the backend query fails; an error notification is raised first.
        """
        order = order or self.default_order
        # Ad hoc queries get a key of their own under the table key, so invalidation still reaches them
        key = cache_key or f"{self.cache_key}:{list(filters)!r}:{order!r}:{limit}"

        def fetch() -> List[Dict[str, Any]]:
            return self.backend.select(self.table, "*", filters=filters, order=order, limit=limit)

        try:
            rows = self.cache.get_or_fetch(key, fetch)
        except RemoteError as e:
            logger.error(f"Failed to list {self.table}: {e}")
            self.notifier.error(f"Failed to load {self.table.replace('_', ' ')}")
            raise

        entities = [self._to_entity(row) for row in rows]
        return [e for e in entities if e is not None]

    def _invalidate(self) -> None:
        for key in (self.cache_key,) + tuple(self.invalidates):
            self.cache.invalidate(key)

    def _mutate(self, action: str, operation: Callable[[], None],
                success_title: Optional[str] = None, failure_title: Optional[str] = None) -> bool:
        """
        Run one backend write and report it.

        Args:
            action: Past-tense verb used in the messages ("created", "deleted").
            operation: The backend call.
            success_title: Overrides the default success message.
            failure_title: Overrides the default failure message.

        Returns:
            bool: True on success, False if the backend call failed.
        """
        verb = {"created": "create", "updated": "update", "deleted": "delete"}.get(action, action)
        try:
            operation()
        except RemoteError as e:
            logger.error(f"Failed to {verb} {self.label}: {e}")
            self.notifier.error(failure_title or f"Failed to {verb} {self.label}")
            return False

        self._invalidate()
        self.notifier.success(success_title or f"{self.label[0].upper()}{self.label[1:]} {action} successfully")
        logger.info(f"{self.table}: {self.label} {action}")
        return True

    def delete(self, item_id: str) -> bool:
        """
        Delete a row by id.

        Returns:
            bool: True if the row was deleted.
        """
        return self._mutate("deleted", lambda: self.backend.delete(self.table, {"id": item_id}))


class EditableRepository(TableRepository):
    """A repository whose rows are created and overwritten from an admin form."""
    form: Type[BaseModel] = BaseModel

    def create(self, fields: Dict[str, Any]) -> bool:
        """
        Validate the form and insert one row.

        Raises:
            ValidationError: If the form is invalid; nothing is sent.
        """
        row = parse_form(self.form, fields).to_row()
        return self._mutate("created", lambda: self.backend.insert(self.table, [row]))

    def update(self, item_id: str, fields: Dict[str, Any]) -> bool:
        """
        Validate the form and overwrite every form field of the row.

        There is no version check; the last write wins.

        Raises:
            ValidationError: If the form is invalid; nothing is sent.
        """
        row = parse_form(self.form, fields).to_row()
        return self._mutate("updated", lambda: self.backend.update(self.table, row, {"id": item_id}))


class EventRepository(EditableRepository):
    """Repository for the events table."""
    table = settings.EVENTS_TABLE
    default_order = Order("event_date", ascending=True)
    cache_key = "admin-events"
    invalidates = ("events", "upcoming-events")
    label = "event"
    form = EventForm
    _upcoming_day: Optional[date] = None

    def _to_entity(self, row: Dict[str, Any]) -> Event:
        return Event.from_row(row, today=self.clock())

    def list_all(self) -> List[Event]:
        """Every event, earliest date first."""
        return self.list(order=Order("event_date", ascending=True), cache_key="admin-events")

    def list_upcoming(self, limit: Optional[int] = None) -> List[Event]:
        """
        Events dated today or later, earliest first.

        Args:
            limit: Maximum number of events, None for all.
        """
        today = self.clock()
        if self._upcoming_day is not None and self._upcoming_day != today:
            # A new day: drop the previous day's upcoming lists
            for prefix in ("events", "upcoming-events"):
                self.cache.invalidate(prefix)
        self._upcoming_day = today
        # The date is part of the key so yesterday's "upcoming" list is never reused
        if limit is None:
            key = f"events:{today.isoformat()}"
        else:
            key = f"upcoming-events:{today.isoformat()}:{limit}"
        return self.list(
            filters=[Filter("event_date", "gte", today)],
            order=Order("event_date", ascending=True),
            limit=limit,
            cache_key=key,
        )


class NewsRepository(EditableRepository):
    """Repository for the news table."""
    table = settings.NEWS_TABLE
    default_order = Order("date_created", ascending=False)
    cache_key = "admin-news"
    invalidates = ("news", "latest-news")
    label = "news post"
    form = NewsForm

    def _to_entity(self, row: Dict[str, Any]) -> NewsPost:
        return NewsPost.from_row(row)

    def list_all(self) -> List[NewsPost]:
        """Every news post, newest first."""
        return self.list(order=Order("date_created", ascending=False), cache_key="admin-news")

    def list_latest(self, limit: Optional[int] = None) -> List[NewsPost]:
        """The newest posts for public pages."""
        key = "news" if limit is None else f"latest-news:{limit}"
        return self.list(order=Order("date_created", ascending=False), limit=limit, cache_key=key)
