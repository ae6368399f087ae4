"""
Application Service Module

Volunteer applications: the public join form that validates and submits
one application, and the admin repository that lists and deletes them.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from config import settings
from data.forms import JoinApplicationForm, parse_form
from data.models import WorkerApplication
from data.protocols import Backend, Order
from services.content_service import TableRepository
from services.notifications import Notifier
from services.protocols import NotificationSink
from utils.exceptions import RemoteError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class WorkerApplicationRepository(TableRepository):
    """Admin view of the worker_applications table."""
    table = settings.WORKER_APPLICATIONS_TABLE
    default_order = Order("date_submitted", ascending=False)
    cache_key = "worker-applications"
    label = "application"

    def _to_entity(self, row: Dict[str, Any]) -> WorkerApplication:
        return WorkerApplication.from_row(row)

    def list_all(self) -> List[WorkerApplication]:
        """Every application, most recent first."""
        return self.list(order=Order("date_submitted", ascending=False), cache_key="worker-applications")


@dataclass
class SubmissionResult:
    """Outcome of a join form submission."""
    success: bool
    field_errors: Dict[str, str] = field(default_factory=dict)


class JoinFormService:
    """Validates and submits the public volunteer form."""

    def __init__(self, backend: Backend, notifier: Optional[NotificationSink] = None):
        self.backend = backend
        self.notifier = notifier if notifier is not None else Notifier()

    def validate(self, fields: Dict[str, Any]) -> Dict[str, str]:
        """
        Check the form without submitting it.

        Returns:
            Dict[str, str]: The first error per field, empty when the form is valid.
        """
        try:
            parse_form(JoinApplicationForm, fields)
        except ValidationError as e:
            return e.field_errors
        return {}

    def submit(self, fields: Dict[str, Any]) -> SubmissionResult:
        """
        Validate the form and, if it passes, insert one application.

        The form is validated on every attempt. An invalid form makes no
        network call and raises a single "Validation Error" notification.

        Args:
            fields: Raw form values (full_name, email, phone, gender, age,
                departments, experience).

        Returns:
            SubmissionResult: success flag and any field errors.
        """
        try:
            form = parse_form(JoinApplicationForm, fields)
        except ValidationError as e:
            logger.info(f"Join form rejected: {sorted(e.field_errors)}")
            self.notifier.error("Validation Error", "Please fill in all required fields correctly.")
            return SubmissionResult(success=False, field_errors=e.field_errors)

        row = form.to_row()
        try:
            self.backend.insert(settings.WORKER_APPLICATIONS_TABLE, [row])
        except RemoteError as e:
            logger.error(f"Failed to submit application: {e}")
            self.notifier.error("Submission Failed", str(e) or "Please try again later.")
            return SubmissionResult(success=False)

        logger.info(f"Application submitted for departments {row['departments']}")
        self.notifier.success(
            "Application Submitted!",
            "Thank you for your interest in serving. We'll be in touch soon.",
        )
        return SubmissionResult(success=True)
