"""
Tests for Form Schemas

Tests cover the join form's validation rules and normalization, and the
admin event, news and media forms.
"""

import pytest
from datetime import date, time
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.forms import JoinApplicationForm, EventForm, NewsForm, MediaForm, parse_form
from data.models import MediaType
from utils.exceptions import ValidationError


def _errors(fields):
    """Return the field errors for a join submission, {} if it is valid."""
    try:
        parse_form(JoinApplicationForm, fields)
    except ValidationError as e:
        return e.field_errors
    return {}


class TestJoinFormValidation:
    """Tests for each rule of the join form."""

    def test_valid_form(self, valid_join_fields):
        assert _errors(valid_join_fields) == {}

    @pytest.mark.parametrize("name,valid", [
        ("J", False),
        ("Jo", True),
        ("x" * 100, True),
        ("x" * 101, False),
    ])
    def test_full_name_length(self, valid_join_fields, name, valid):
        """Test the 2..100 bounds on full_name."""
        errors = _errors({**valid_join_fields, 'full_name': name})

        assert ('full_name' not in errors) is valid

    def test_short_name_message(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'full_name': 'J'})

        assert errors['full_name'] == "Name must be at least 2 characters"

    def test_malformed_email(self, valid_join_fields):
        """Test that a malformed email is a field error on email only."""
        errors = _errors({**valid_join_fields, 'email': 'not-an-email'})

        assert errors == {'email': "Invalid email address"}

    @pytest.mark.parametrize("email", ['jane@church.local', 'jane@church.test', 'jane@example.com'])
    def test_reserved_domains_accepted(self, valid_join_fields, email):
        """Test that well-formed addresses on reserved domains are accepted."""
        assert _errors({**valid_join_fields, 'email': email}) == {}

    def test_email_too_long(self, valid_join_fields):
        """Test the 255 character limit on email."""
        email = 'a' * 250 + '@x.com'
        errors = _errors({**valid_join_fields, 'email': email})

        assert 'email' in errors

    @pytest.mark.parametrize("phone,valid", [
        ("123456789", False),
        ("1234567890", True),
        ("1" * 20, True),
        ("1" * 21, False),
    ])
    def test_phone_length(self, valid_join_fields, phone, valid):
        """Test the 10..20 bounds on phone."""
        errors = _errors({**valid_join_fields, 'phone': phone})

        assert ('phone' not in errors) is valid

    def test_gender_required(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'gender': ''})

        assert errors['gender'] == "Please select a gender"

    def test_gender_must_be_known(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'gender': 'other'})

        assert 'gender' in errors

    def test_empty_departments(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'departments': []})

        assert errors['departments'] == "Please select at least one department"

    def test_unknown_department(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'departments': ['choir', 'catering']})

        assert 'catering' in errors['departments']

    def test_experience_limit(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'experience': 'x' * 1001})

        assert 'experience' in errors
        assert _errors({**valid_join_fields, 'experience': 'x' * 1000}) == {}

    @pytest.mark.parametrize("age", [None, "", "35", 35, "150"])
    def test_age_accepted(self, valid_join_fields, age):
        """Test that age is optional and not range checked."""
        assert _errors({**valid_join_fields, 'age': age}) == {}

    def test_age_not_a_number(self, valid_join_fields):
        errors = _errors({**valid_join_fields, 'age': 'thirty'})

        assert 'age' in errors

    def test_first_error_per_field_only(self):
        """Test that every failing field gets exactly one message."""
        errors = _errors({
            'full_name': '',
            'email': 'bad',
            'phone': '',
            'gender': '',
            'departments': [],
        })

        assert set(errors) == {'full_name', 'email', 'phone', 'gender', 'departments'}
        assert all(isinstance(message, str) for message in errors.values())


class TestJoinFormRow:
    """Tests for the row produced from a valid join form."""

    def test_normalization(self, valid_join_fields):
        """Test that email is lower-cased and departments kept as given."""
        row = parse_form(JoinApplicationForm, valid_join_fields).to_row()

        assert row['email'] == 'jane@x.com'
        assert row['departments'] == ['choir']
        assert row['phone_number'] == '1234567890'
        assert row['age'] is None
        assert row['previous_experience'] is None

    def test_trimming(self, valid_join_fields):
        """Test that text fields are trimmed and age parsed."""
        fields = {
            **valid_join_fields,
            'full_name': '  Jane Doe  ',
            'phone': ' 1234567890 ',
            'age': ' 42 ',
            'experience': '  Sang in choir  ',
        }
        row = parse_form(JoinApplicationForm, fields).to_row()

        assert row['full_name'] == 'Jane Doe'
        assert row['phone_number'] == '1234567890'
        assert row['age'] == 42
        assert row['previous_experience'] == 'Sang in choir'

    def test_blank_experience_is_null(self, valid_join_fields):
        row = parse_form(JoinApplicationForm, {**valid_join_fields, 'experience': '   '}).to_row()

        assert row['previous_experience'] is None


class TestAdminForms:
    """Tests for the event, news and media forms."""

    def test_event_form_row(self):
        form = parse_form(EventForm, {
            'title': 'Revival Night',
            'event_date': '2024-02-01',
            'event_time': '19:00',
            'location': 'Main Hall',
        })

        assert form.event_date == date(2024, 2, 1)
        assert form.event_time == time(19, 0)
        assert form.to_row() == {
            'title': 'Revival Night',
            'description': None,
            'event_date': '2024-02-01',
            'event_time': '19:00',
            'location': 'Main Hall',
        }

    def test_event_form_requires_location(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_form(EventForm, {'title': 'T', 'event_date': '2024-02-01', 'event_time': '19:00', 'location': ''})

        assert 'location' in exc_info.value.field_errors

    def test_news_form_requires_message(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_form(NewsForm, {'title': 'T'})

        assert 'message' in exc_info.value.field_errors

    def test_media_form_video_row(self):
        """Test that only the video URL column is produced for a video."""
        form = parse_form(MediaForm, {
            'media_type': 'Video',
            'category': 'Sermons',
            'video_url': 'https://youtube.com/watch?v=abc',
            'text_content': 'ignored',
        })

        assert form.to_row() == {
            'media_type': 'Video',
            'category': 'Sermons',
            'video_url': 'https://youtube.com/watch?v=abc',
        }

    def test_media_form_image_row(self):
        form = parse_form(MediaForm, {'media_type': 'Image', 'category': 'Worship'})

        assert form.media_type is MediaType.IMAGE
        assert form.to_row(image_url='https://x/y.jpg') == {
            'media_type': 'Image', 'category': 'Worship', 'image_url': 'https://x/y.jpg'
        }

    def test_media_form_requires_category(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_form(MediaForm, {'media_type': 'Text', 'category': '', 'text_content': 'x'})

        assert 'category' in exc_info.value.field_errors

    def test_media_form_text_requires_content(self):
        with pytest.raises(ValidationError):
            parse_form(MediaForm, {'media_type': 'Text', 'category': 'Worship'})
