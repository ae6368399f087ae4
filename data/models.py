"""
Data Models for the Church Site

This module contains the data classes for rows read from the backend tables,
plus the fixed enumerations the site offers (media types and categories,
departments, genders).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, List, Dict, Any, Union

from utils.helpers import parse_date, parse_timestamp


class MediaType(str, Enum):
    IMAGE = "Image"
    VIDEO = "Video"
    TEXT = "Text"


# Categories offered when uploading media
MEDIA_CATEGORIES = ["Worship", "Events", "Community", "Sermons", "Announcements"]

# Gallery filter tabs; "All" disables the category filter
GALLERY_CATEGORIES = ["All", "Worship", "Events", "Sermons", "Community", "Other"]
ALL_CATEGORIES = "All"

GENDERS = ["male", "female"]


@dataclass(frozen=True)
class Department:
    """A ministry department volunteers can apply to."""
    id: str
    name: str
    description: str


DEPARTMENTS = [
    Department("ushering", "Ushering", "Welcome and assist congregation"),
    Department("media", "Media Department", "Handle audio, video, and live streaming"),
    Department("choir", "Choir", "Lead worship through singing"),
    Department("instrumentalists", "Instrumentalists", "Play musical instruments"),
    Department("technical", "Technical Department", "Manage sound and lighting systems"),
]

DEPARTMENT_IDS = [d.id for d in DEPARTMENTS]


def _parse_time(value: Any) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


@dataclass
class Event:
    """Data class for a row of the events table."""
    id: str
    title: str
    event_date: date
    event_time: time
    location: str
    description: Optional[str] = None
    is_today: bool = False             # Derived at read time, never written back

    @classmethod
    def from_row(cls, row: Dict[str, Any], today: Optional[date] = None) -> "Event":
        """Build an Event from a backend row, deriving is_today against `today`."""
        event_date = parse_date(row["event_date"])
        return cls(
            id=row["id"],
            title=row["title"],
            event_date=event_date,
            event_time=_parse_time(row.get("event_time")),
            location=row.get("location") or "",
            description=row.get("description"),
            is_today=today is not None and event_date == today,
        )


@dataclass
class NewsPost:
    """Data class for a row of the news table."""
    id: str
    title: str
    message: str
    date_created: datetime

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "NewsPost":
        return cls(
            id=row["id"],
            title=row["title"],
            message=row.get("message") or "",
            date_created=parse_timestamp(row.get("date_created")),
        )


@dataclass
class ImageMedia:
    """An image in the gallery; the file lives in object storage."""
    id: str
    category: str
    image_url: str
    date_uploaded: datetime
    media_type: MediaType = field(default=MediaType.IMAGE, init=False)

    def __post_init__(self):
        if not self.image_url:
            raise ValueError("Image media requires image_url")

    @property
    def content(self) -> str:
        return self.image_url


@dataclass
class VideoMedia:
    """A linked video (e.g. a YouTube URL)."""
    id: str
    category: str
    video_url: str
    date_uploaded: datetime
    media_type: MediaType = field(default=MediaType.VIDEO, init=False)

    def __post_init__(self):
        if not self.video_url:
            raise ValueError("Video media requires video_url")

    @property
    def content(self) -> str:
        return self.video_url


@dataclass
class TextMedia:
    """A text post in the gallery."""
    id: str
    category: str
    text_content: str
    date_uploaded: datetime
    media_type: MediaType = field(default=MediaType.TEXT, init=False)

    def __post_init__(self):
        if not self.text_content:
            raise ValueError("Text media requires text_content")

    @property
    def content(self) -> str:
        return self.text_content


MediaItem = Union[ImageMedia, VideoMedia, TextMedia]


def media_item_from_row(row: Dict[str, Any]) -> MediaItem:
    """
    Build the media variant matching a row's media_type.

    Only the content field belonging to the type is read; any other content
    columns on the row are ignored.

    Raises:
        ValueError: If media_type is unknown or its content field is empty.
    """
    media_type = MediaType(row["media_type"])
    common = {
        "id": row["id"],
        "category": row.get("category") or "",
        "date_uploaded": parse_timestamp(row.get("date_uploaded")),
    }
    if media_type is MediaType.IMAGE:
        return ImageMedia(image_url=row.get("image_url") or "", **common)
    if media_type is MediaType.VIDEO:
        return VideoMedia(video_url=row.get("video_url") or "", **common)
    return TextMedia(text_content=row.get("text_content") or "", **common)


@dataclass
class WorkerApplication:
    """Data class for a row of the worker_applications table."""
    id: str
    full_name: str
    email: str
    phone_number: str
    gender: str
    departments: List[str]
    date_submitted: datetime
    age: Optional[int] = None
    previous_experience: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "WorkerApplication":
        return cls(
            id=row["id"],
            full_name=row["full_name"],
            email=row["email"],
            phone_number=row["phone_number"],
            gender=row["gender"],
            departments=list(row.get("departments") or []),
            date_submitted=parse_timestamp(row.get("date_submitted")),
            age=row.get("age"),
            previous_experience=row.get("previous_experience"),
        )


@dataclass
class User:
    """The signed-in user as reported by the auth service."""
    id: str
    email: Optional[str] = None
    is_admin: bool = False


@dataclass
class Session:
    """An auth session: the bearer token and the user it belongs to."""
    access_token: str
    user: User
    refresh_token: Optional[str] = None
