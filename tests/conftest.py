"""
Shared Test Fixtures for the Church Site

This module provides common fixtures used across all test modules.
Fixtures include a mock backend, a fixed clock, HTTP response factories,
log capture, and row factories for each content table.
"""

import pytest
from unittest.mock import MagicMock
from datetime import date, datetime, timedelta
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


FIXED_TODAY = date(2024, 1, 15)


# =============================================================================
# Clock Fixtures
# =============================================================================

@pytest.fixture
def today():
    """The date every test treats as today."""
    return FIXED_TODAY


@pytest.fixture
def clock():
    """
    A settable clock returning FIXED_TODAY until changed.

    Usage:
        def test_next_day(clock):
            clock.current = clock.current + timedelta(days=1)
    """
    class Clock:
        def __init__(self):
            self.current = FIXED_TODAY

        def __call__(self) -> date:
            return self.current

    return Clock()


# =============================================================================
# Backend Fixtures
# =============================================================================

@pytest.fixture
def mock_backend():
    """
    Mock backend client implementing the Backend protocol.

    select() returns an empty list, writes return None, and
    public_url() builds a storage URL from its arguments.

    Usage:
        def test_list(mock_backend):
            mock_backend.select.return_value = [{'id': '1', ...}]

    Returns:
        MagicMock: The mock backend.
    """
    backend = MagicMock()
    backend.select.return_value = []
    backend.insert.return_value = None
    backend.update.return_value = None
    backend.delete.return_value = None
    backend.upload.side_effect = lambda bucket, path, data, **kwargs: {"path": path}
    backend.remove.return_value = None
    backend.public_url.side_effect = (
        lambda bucket, path: f"https://backend.test/storage/v1/object/public/{bucket}/{path}"
    )
    backend.get_session.return_value = None
    return backend


@pytest.fixture
def notifier():
    """A real Notifier so tests can inspect pending notifications."""
    from services.notifications import Notifier
    return Notifier()


@pytest.fixture
def cache():
    from services.cache import QueryCache
    return QueryCache()


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("church_site")
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data=[{'id': '1'}])

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Any = None,
        text: str = '',
    ) -> MagicMock:
        """
        Create a mock HTTP response object.

        Args:
            status_code: HTTP status code (default 200).
            json_data: Value to return from response.json().
            text: Raw text body.

        Returns:
            MagicMock: A mock response object mimicking requests.Response.
        """
        import json

        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.ok = 200 <= status_code < 300
        if text:
            mock_response.text = text
        elif json_data is not None:
            mock_response.text = json.dumps(json_data)
        else:
            mock_response.text = ''

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")
        return mock_response

    return _create_response


@pytest.fixture
def mock_http(mock_http_response):
    """
    Mock requests.Session for BackendClient.

    Usage:
        def test_call(mock_http):
            mock_http.request.return_value = mock_http.response(json_data=[])

    Returns:
        MagicMock: A mock session with the response factory attached.
    """
    session = MagicMock()
    session.response = mock_http_response
    session.request.return_value = mock_http_response(status_code=200, json_data=[])
    return session


# =============================================================================
# Row Factories
# =============================================================================

@pytest.fixture
def event_row_factory():
    """
    Factory fixture for rows of the events table.

    Usage:
        row = event_row_factory(event_date='2024-01-15')
    """
    counter = {"n": 0}

    def _create_event_row(
        event_date: str = '2024-01-20',
        title: str = 'Sunday Service',
        event_time: str = '10:00:00',
        location: str = 'Main Sanctuary',
        description: Optional[str] = 'Weekly worship service',
        id: Optional[str] = None,
    ) -> Dict[str, Any]:
        counter["n"] += 1
        return {
            'id': id or f'event-{counter["n"]}',
            'title': title,
            'description': description,
            'event_date': event_date,
            'event_time': event_time,
            'location': location,
        }

    return _create_event_row


@pytest.fixture
def news_row_factory():
    """Factory fixture for rows of the news table."""
    counter = {"n": 0}

    def _create_news_row(
        title: str = 'Church Picnic',
        message: str = 'Join us after service for a picnic.',
        date_created: str = '2024-01-10T09:00:00+00:00',
        id: Optional[str] = None,
    ) -> Dict[str, Any]:
        counter["n"] += 1
        return {
            'id': id or f'news-{counter["n"]}',
            'title': title,
            'message': message,
            'date_created': date_created,
        }

    return _create_news_row


@pytest.fixture
def media_row_factory():
    """
    Factory fixture for rows of the media table.

    Only the content column matching media_type is filled unless
    overridden.
    """
    counter = {"n": 0}

    def _create_media_row(
        media_type: str = 'Image',
        category: str = 'Worship',
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
        text_content: Optional[str] = None,
        date_uploaded: str = '2024-01-12T18:30:00.123456+00:00',
        id: Optional[str] = None,
    ) -> Dict[str, Any]:
        counter["n"] += 1
        if media_type == 'Image' and image_url is None:
            image_url = f'https://backend.test/storage/v1/object/public/media/uploads/170000000000{counter["n"]}.jpg'
        if media_type == 'Video' and video_url is None:
            video_url = 'https://youtube.com/watch?v=abc123'
        if media_type == 'Text' and text_content is None:
            text_content = 'Blessed are the peacemakers.'
        return {
            'id': id or f'media-{counter["n"]}',
            'media_type': media_type,
            'category': category,
            'image_url': image_url,
            'video_url': video_url,
            'text_content': text_content,
            'date_uploaded': date_uploaded,
        }

    return _create_media_row


@pytest.fixture
def application_row_factory():
    """Factory fixture for rows of the worker_applications table."""
    def _create_application_row(**overrides) -> Dict[str, Any]:
        row = {
            'id': 'app-1',
            'full_name': 'Jane Doe',
            'email': 'jane@x.com',
            'phone_number': '1234567890',
            'gender': 'female',
            'age': 30,
            'departments': ['choir'],
            'previous_experience': None,
            'date_submitted': '2024-01-14T12:00:00+00:00',
        }
        row.update(overrides)
        return row

    return _create_application_row


@pytest.fixture
def valid_join_fields():
    """A join form submission that passes validation."""
    return {
        'full_name': 'Jane Doe',
        'email': 'JANE@X.COM',
        'phone': '1234567890',
        'gender': 'female',
        'departments': ['choir'],
    }
