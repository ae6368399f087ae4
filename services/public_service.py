"""
Public Service Module

Read-only data for the public pages: home preview, upcoming events, news
and the media gallery. Derived display fields (`is_today`, media icon) are
computed on every read.
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Union

from config import settings
from data.models import Event, NewsPost, MediaItem, MediaType, ALL_CATEGORIES, GALLERY_CATEGORIES
from services.protocols import EventSource, NewsSource, MediaSource
from utils.logger import get_logger

logger = get_logger(__name__)

MEDIA_ICONS = {
    MediaType.IMAGE: "image",
    MediaType.VIDEO: "video",
    MediaType.TEXT: "file-text",
}


def media_icon(media_type: Union[MediaType, str]) -> str:
    """Icon name for a media type; unknown types fall back to the image icon."""
    try:
        key = media_type if isinstance(media_type, MediaType) else MediaType(str(media_type).capitalize())
    except ValueError:
        return MEDIA_ICONS[MediaType.IMAGE]
    return MEDIA_ICONS[key]


@dataclass
class GalleryItem:
    """A media item with its display icon."""
    item: MediaItem
    icon: str


class PublicViews:
    """Page data for the public routes."""

    def __init__(self, events: EventSource, news: NewsSource, media: MediaSource):
        self.events = events
        self.news = news
        self.media = media

    def upcoming_events(self) -> List[Event]:
        """Events from today on, earliest first, each flagged with is_today."""
        return self.events.list_upcoming()

    def latest_news(self) -> List[NewsPost]:
        return self.news.list_latest()

    def home(self) -> Dict[str, Any]:
        """The next few events and the latest few news posts."""
        return {
            "upcoming_events": self.events.list_upcoming(limit=settings.HOME_EVENTS_LIMIT),
            "latest_news": self.news.list_latest(limit=settings.HOME_NEWS_LIMIT),
        }

    def media_gallery(self, category: Optional[str] = None) -> List[GalleryItem]:
        """
        Gallery items, newest first.

        Args:
            category: One of GALLERY_CATEGORIES; None or "All" shows everything.
        """
        category = category or ALL_CATEGORIES
        if category not in GALLERY_CATEGORIES:
            logger.warning(f"Unknown gallery category {category!r}, showing all media")
            category = ALL_CATEGORIES
        return [GalleryItem(item, media_icon(item.media_type)) for item in self.media.list_gallery(category)]
