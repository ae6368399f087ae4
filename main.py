"""
Church Site Application

This is the main entry point for the church site's content layer.
It wires the backend client, session, repositories and public views
together and maps each page route to the data that page shows.

Run `python main.py /events` to print what a route would render.
"""

import sys
import json
import argparse
import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Dict, Any, Callable

from config import settings
from data.backend import BackendClient
from data.models import DEPARTMENTS, GENDERS, GALLERY_CATEGORIES, MEDIA_CATEGORIES
from data.protocols import Backend
from services.admin_service import AdminDashboard
from services.application_service import JoinFormService, SubmissionResult
from services.auth_service import SessionState, AdminGate, AdminCapability, GateView, GateState
from services.cache import QueryCache
from services.content_service import EventRepository, NewsRepository
from services.media_service import MediaRepository
from services.notifications import Notifier
from services.public_service import PublicViews
from utils.exceptions import ChurchSiteError, RemoteError
from utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)

ROUTES = ["/", "/about", "/events", "/news", "/media", "/join", "/admin", "/auth"]


class ChurchSite:
    """
    Main application class for the church site.

    One instance holds the process-wide session, cache and notifications,
    and produces the data for every page route.
    """

    def __init__(self, backend: Optional[Backend] = None,
                 clock: Callable[[], date] = date.today):
        """
        Initialize the church site.

        Args:
            backend: Backend client; built from settings (and settings
                validated) when omitted.
            clock: Returns today's date for derived fields.
        """
        if backend is None:
            settings.validate_settings()
            backend = BackendClient.from_settings()

        self.backend = backend
        self.clock = clock
        self.cache = QueryCache()
        self.notifier = Notifier()
        self.session = SessionState(backend)

        self.public = PublicViews(
            EventRepository(backend, self.cache, self.notifier, clock),
            NewsRepository(backend, self.cache, self.notifier, clock),
            MediaRepository(backend, self.cache, self.notifier, clock),
        )
        self.join_form = JoinFormService(backend, self.notifier)
        self.gate = AdminGate(self.session, self._build_dashboard)

        self._routes: Dict[str, Callable[..., Any]] = {
            "/": self.home_page,
            "/about": self.about_page,
            "/events": self.events_page,
            "/news": self.news_page,
            "/media": self.media_page,
            "/join": self.join_page,
            "/admin": self.admin_page,
            "/auth": self.auth_page,
        }

    def _build_dashboard(self, capability: AdminCapability) -> AdminDashboard:
        return AdminDashboard(capability, self.backend, self.cache, self.notifier, self.clock)

    # =========================================================================
    # Session
    # =========================================================================

    def start(self) -> GateState:
        """Resolve the session at startup."""
        return self.session.resolve()

    def sign_in(self, email: str, password: str) -> GateState:
        return self.session.sign_in(email, password)

    def sign_out(self) -> GateView:
        """Sign out and drop every cached list."""
        view = self.gate.sign_out()
        self.cache.clear()
        return view

    # =========================================================================
    # Pages
    # =========================================================================

    def home_page(self) -> Dict[str, Any]:
        return self.public.home()

    def about_page(self) -> Dict[str, Any]:
        return {"site_name": settings.SITE_NAME, "contact_email": settings.CONTACT_EMAIL}

    def events_page(self) -> Dict[str, Any]:
        return {"events": self.public.upcoming_events()}

    def news_page(self) -> Dict[str, Any]:
        return {"news": self.public.latest_news()}

    def media_page(self, category: Optional[str] = None) -> Dict[str, Any]:
        return {
            "categories": GALLERY_CATEGORIES,
            "selected": category or GALLERY_CATEGORIES[0],
            "items": self.public.media_gallery(category),
        }

    def join_page(self) -> Dict[str, Any]:
        return {
            "departments": DEPARTMENTS,
            "genders": GENDERS,
            "age_min": settings.AGE_MIN,
            "age_max": settings.AGE_MAX,
        }

    def submit_application(self, fields: Dict[str, Any]) -> SubmissionResult:
        return self.join_form.submit(fields)

    def admin_page(self) -> Dict[str, Any]:
        view = self.gate.view()
        page: Dict[str, Any] = {"state": view.state, "redirect": view.redirect, "message": view.message}
        if view.dashboard is not None:
            page["media_categories"] = MEDIA_CATEGORIES
            page.update(view.dashboard.overview())
        return page

    def auth_page(self) -> Dict[str, Any]:
        user = self.session.user
        return {"state": self.session.state, "email": user.email if user else None}

    def render(self, route: str, **params) -> Dict[str, Any]:
        """
        Produce the data for one page route.

        Args:
            route: One of ROUTES.
            **params: Route parameters (e.g. category for /media).

        Raises:
            KeyError: For an unknown route.
            RemoteError: If a backend read fails.
        """
        if route not in self._routes:
            raise KeyError(f"Unknown route: {route}")
        page = self._routes[route](**params)
        page["notifications"] = self.notifier.drain()
        return page


def to_jsonable(value: Any) -> Any:
    """Convert page data (dataclasses, enums, dates) to JSON-compatible values."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Church Site content viewer')
    parser.add_argument('route', choices=ROUTES, help='Page route to render')
    parser.add_argument('--category', type=str, default=None, help='Gallery category for /media')
    parser.add_argument('--log-file', type=str, default='church_site.log', help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the application."""
    args = parse_arguments(argv)

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    logger.info(f"Rendering route {args.route}")

    try:
        site = ChurchSite()
        site.start()
        params = {"category": args.category} if args.route == "/media" else {}
        page = site.render(args.route, **params)
        print(json.dumps(to_jsonable(page), indent=2))
        exit_code = 0
    except RemoteError as e:
        logger.error(f"Backend error rendering {args.route}: {e}", exc_info=True)
        exit_code = 1
    except ChurchSiteError as e:
        logger.error(f"Church site error: {e}", exc_info=True)
        exit_code = 1
    except Exception as e:
        logger.error(f"Unhandled exception in church site: {e}", exc_info=True)
        exit_code = 2

    logger.info(f"Church site finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
