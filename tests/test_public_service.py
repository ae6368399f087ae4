"""
Tests for Public Service - PublicViews

Tests cover the home page preview, the events and news lists and the media
gallery with its category filter and icons.
"""

import pytest
from unittest.mock import MagicMock
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import MediaType
from data.protocols import Filter
from services.content_service import EventRepository, NewsRepository
from services.media_service import MediaRepository
from services.public_service import PublicViews, media_icon


@pytest.fixture
def views(mock_backend, cache, notifier, clock):
    return PublicViews(
        EventRepository(mock_backend, cache, notifier, clock),
        NewsRepository(mock_backend, cache, notifier, clock),
        MediaRepository(mock_backend, cache, notifier, clock),
    )


class TestHome:
    """Tests for the home page preview."""

    def test_home_limits(self, views, mock_backend, today):
        """Test that the home page asks for three events and three news posts."""
        views.home()

        calls = {c.args[0]: c.kwargs for c in mock_backend.select.call_args_list}
        assert calls['events']['limit'] == 3
        assert calls['events']['filters'] == [Filter('event_date', 'gte', today)]
        assert calls['news']['limit'] == 3

    def test_home_with_sources(self):
        """Test that PublicViews works with any source implementation."""
        events, news, media = MagicMock(), MagicMock(), MagicMock()
        events.list_upcoming.return_value = ['e']
        news.list_latest.return_value = ['n']

        page = PublicViews(events, news, media).home()

        assert page == {'upcoming_events': ['e'], 'latest_news': ['n']}
        events.list_upcoming.assert_called_once_with(limit=3)

    def test_upcoming_events_flag_today(self, views, mock_backend, event_row_factory, today):
        mock_backend.select.return_value = [event_row_factory(event_date=today.isoformat())]

        assert views.upcoming_events()[0].is_today is True

    def test_latest_news_unlimited(self, views, mock_backend):
        views.latest_news()

        assert mock_backend.select.call_args.kwargs['limit'] is None


class TestGallery:
    """Tests for the media gallery."""

    def test_category_filter(self, views, mock_backend):
        views.media_gallery('Sermons')

        assert mock_backend.select.call_args.kwargs['filters'] == [Filter('category', 'eq', 'Sermons')]

    def test_unknown_category_shows_all(self, views, mock_backend, capture_logs):
        views.media_gallery('Weddings')

        assert mock_backend.select.call_args.kwargs['filters'] == []
        assert any('Unknown gallery category' in r.getMessage() for r in capture_logs)

    def test_items_carry_icons(self, views, mock_backend, media_row_factory):
        mock_backend.select.return_value = [
            media_row_factory(media_type='Image'),
            media_row_factory(media_type='Video'),
            media_row_factory(media_type='Text'),
        ]

        icons = [g.icon for g in views.media_gallery()]

        assert icons == ['image', 'video', 'file-text']


class TestMediaIcon:
    """Tests for media_icon()."""

    @pytest.mark.parametrize("media_type,icon", [
        (MediaType.VIDEO, 'video'),
        ('Text', 'file-text'),
        ('video', 'video'),
        ('IMAGE', 'image'),
        ('audio', 'image'),
    ])
    def test_icon(self, media_type, icon):
        assert media_icon(media_type) == icon
