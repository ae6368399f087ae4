"""
Admin Service Module

The admin dashboard: one manager per content table, reachable only with an
AdminCapability from the session.
"""

from datetime import date
from typing import Callable, Dict, Any

from data.protocols import Backend
from services.application_service import WorkerApplicationRepository
from services.auth_service import AdminCapability
from services.cache import QueryCache
from services.content_service import EventRepository, NewsRepository
from services.media_service import MediaRepository
from services.notifications import Notifier
from utils.exceptions import AccessDeniedError
from utils.logger import get_logger

logger = get_logger(__name__)


class AdminDashboard:
    """Events, news, media and application managers for a signed-in admin."""

    def __init__(self, capability: AdminCapability, backend: Backend,
                 cache: QueryCache, notifier: Notifier,
                 clock: Callable[[], date] = date.today):
        if not isinstance(capability, AdminCapability) or not capability.user.is_admin:
            raise AccessDeniedError("Admin dashboard requires an admin session")
        self.user = capability.user
        self.events = EventRepository(backend, cache, notifier, clock)
        self.news = NewsRepository(backend, cache, notifier, clock)
        self.media = MediaRepository(backend, cache, notifier, clock)
        self.applications = WorkerApplicationRepository(backend, cache, notifier, clock)
        logger.info(f"Admin dashboard opened for {self.user.email or self.user.id}")

    def overview(self) -> Dict[str, Any]:
        """
        Load every manager's list for the dashboard tabs.

        Raises:
            RemoteError: If any list query fails.
        """
        return {
            "applications": self.applications.list_all(),
            "events": self.events.list_all(),
            "news": self.news.list_all(),
            "media": self.media.list_all(),
        }
