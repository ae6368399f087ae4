"""
Notification Module

User-facing notifications raised by repositories and forms. The page layer
drains them and shows each one; here they are recorded and logged.
"""

from dataclasses import dataclass
from typing import List, Optional

from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass
class Notification:
    """A single non-blocking message for the user."""
    title: str
    description: Optional[str] = None
    variant: str = DEFAULT


class Notifier:
    """Collects notifications until the page layer takes them."""

    def __init__(self):
        self._pending: List[Notification] = []

    def success(self, title: str, description: Optional[str] = None) -> Notification:
        note = Notification(title, description, DEFAULT)
        self._pending.append(note)
        logger.info(f"Notify: {title}")
        return note

    def error(self, title: str, description: Optional[str] = None) -> Notification:
        note = Notification(title, description, DESTRUCTIVE)
        self._pending.append(note)
        logger.warning(f"Notify error: {title}" + (f" ({description})" if description else ""))
        return note

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Return and forget every pending notification."""
        notes, self._pending = self._pending, []
        return notes
