"""
Auth Service Module

Session handling and the admin gate. SessionState resolves the current
session into one of four states and is the only place an admin capability
can be obtained; AdminGate turns that state into what the /admin route
shows.

States:
    loading -> unauthenticated | authenticated-non-admin | authenticated-admin
    any state -> unauthenticated on sign-out
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Callable, Any

from config import settings
from data.models import Session, User
from data.protocols import Backend, Filter
from utils.exceptions import RemoteError, AccessDeniedError
from utils.logger import get_logger

logger = get_logger(__name__)


class GateState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    NON_ADMIN = "authenticated-non-admin"
    ADMIN = "authenticated-admin"


@dataclass(frozen=True)
class AdminCapability:
    """Proof that the holder resolved an admin session. Only SessionState creates one."""
    user: User


class SessionState:
    """The signed-in user for this process, resolved explicitly and torn down on sign-out."""

    def __init__(self, backend: Backend, role_table: Optional[str] = None,
                 role_name: Optional[str] = None):
        self.backend = backend
        self.role_table = role_table or settings.ADMIN_ROLE_TABLE
        self.role_name = role_name or settings.ADMIN_ROLE_NAME
        self.state = GateState.LOADING
        self.session: Optional[Session] = None

    @property
    def user(self) -> Optional[User]:
        return self.session.user if self.session else None

    @property
    def is_admin(self) -> bool:
        return self.state is GateState.ADMIN

    def _lookup_admin(self, user_id: str) -> bool:
        """Check the role table for an admin row belonging to `user_id`."""
        rows = self.backend.select(
            self.role_table,
            "role",
            filters=[Filter("user_id", "eq", user_id), Filter("role", "eq", self.role_name)],
            limit=1,
        )
        return bool(rows)

    def resolve(self) -> GateState:
        """
        Resolve the current session and its admin flag.

        A failed session lookup counts as signed out; a failed role lookup
        counts as not admin.

        Returns:
            GateState: The resolved state.
        """
        self.state = GateState.LOADING
        try:
            self.session = self.backend.get_session()
        except RemoteError as e:
            logger.error(f"Failed to resolve session: {e}")
            self.session = None

        if self.session is None:
            self.state = GateState.UNAUTHENTICATED
            return self.state

        try:
            is_admin = self._lookup_admin(self.session.user.id)
        except RemoteError as e:
            logger.error(f"Failed to look up admin role for {self.session.user.id}: {e}")
            is_admin = False

        self.session.user.is_admin = is_admin
        self.state = GateState.ADMIN if is_admin else GateState.NON_ADMIN
        logger.info(f"Session resolved as {self.state.value}")
        return self.state

    def sign_in(self, email: str, password: str) -> GateState:
        """
        Sign in and resolve the new session.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        self.backend.sign_in(email, password)
        return self.resolve()

    def sign_out(self) -> str:
        """
        Sign out from any state.

        Returns:
            str: The route to redirect to afterwards.
        """
        try:
            self.backend.sign_out()
        except RemoteError as e:
            logger.warning(f"Sign-out call failed, clearing session locally: {e}")
        self.session = None
        self.state = GateState.UNAUTHENTICATED
        return settings.SIGN_OUT_ROUTE

    def require_admin(self) -> AdminCapability:
        """
        Return the admin capability for the resolved session.

        Raises:
            AccessDeniedError: Unless the state is authenticated-admin.
        """
        if self.state is not GateState.ADMIN or self.session is None:
            raise AccessDeniedError(f"Admin access required (state: {self.state.value})")
        return AdminCapability(user=self.session.user)


@dataclass
class GateView:
    """What the admin route shows for the current state."""
    state: GateState
    redirect: Optional[str] = None
    message: Optional[str] = None
    dashboard: Any = None


ACCESS_DENIED_MESSAGE = (
    "You don't have admin privileges. Contact the church administrator for access."
)


class AdminGate:
    """Decides what the /admin route shows."""

    def __init__(self, session_state: SessionState,
                 dashboard_factory: Callable[[AdminCapability], Any]):
        """
        Args:
            session_state: The process session.
            dashboard_factory: Builds the admin dashboard from an admin capability.
        """
        self.session_state = session_state
        self.dashboard_factory = dashboard_factory

    def view(self) -> GateView:
        """
        Map the session state to the admin route's content.

        Only the admin state builds the dashboard, so no admin table is
        read for any other state.
        """
        state = self.session_state.state
        if state is GateState.LOADING:
            return GateView(state)
        if state is GateState.UNAUTHENTICATED:
            return GateView(state, redirect=settings.SIGN_IN_ROUTE)
        if state is GateState.NON_ADMIN:
            return GateView(state, message=ACCESS_DENIED_MESSAGE)
        capability = self.session_state.require_admin()
        return GateView(state, dashboard=self.dashboard_factory(capability))

    def sign_out(self) -> GateView:
        """Sign out and return the redirect view."""
        redirect = self.session_state.sign_out()
        return GateView(GateState.UNAUTHENTICATED, redirect=redirect)
