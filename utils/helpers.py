"""
Helper Utility Module

This module provides various helper functions used throughout the church site.
"""

import time
from datetime import date, datetime
from typing import Optional, Dict, Any
from urllib.parse import urlparse, unquote


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False


def safe_get(data: Dict[str, Any], *keys, default: Any = None) -> Any:
    """
    Safely get a value from a nested dictionary.

    Args:
        data: The dictionary to search
        *keys: The keys to follow
        default: Default value if key doesn't exist

    Returns:
        The value at the specified keys or the default value
    """
    for key in keys:
        try:
            data = data[key]
        except (KeyError, TypeError, IndexError):
            return default
    return data


def file_extension(filename: str) -> str:
    """Return the text after the last dot of a file name, or the whole name if it has none."""
    return filename.rsplit(".", 1)[-1]


def build_upload_path(filename: str, prefix: str = "uploads", timestamp_ms: Optional[int] = None) -> str:
    """
    Build the storage path for an uploaded file.

    The path is `<prefix>/<timestamp>.<ext>` where the timestamp is in
    milliseconds. Two uploads in the same millisecond get the same path.

    Args:
        filename: Original file name, used only for its extension
        prefix: Folder inside the bucket
        timestamp_ms: Upload time in milliseconds, defaults to now

    Returns:
        str: The object path inside the bucket
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}/{timestamp_ms}.{file_extension(filename)}"


def storage_path_from_url(public_url: str) -> str:
    """
    Recover the object path from a public file URL.

    Public URLs end in `.../<bucket>/<folder>/<file>`; the last two
    segments are the path inside the bucket.

    Args:
        public_url: The stored image_url of a media row

    Returns:
        str: The `<folder>/<file>` path to pass to storage removal
    """
    path = urlparse(public_url).path or public_url
    segments = [unquote(s) for s in path.split("/") if s]
    return "/".join(segments[-2:])


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or the date part of an ISO timestamp) into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as returned by the backend."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).replace("Z", "+00:00")
    return datetime.fromisoformat(text)
