"""
Form Schemas for the Church Site

Pydantic models for every form the site accepts: the public volunteer
"join" form and the admin event, news and media forms. Each form validates
the raw input and produces the row that is sent to the backend.
"""

from datetime import date, time
from typing import Optional, List, Dict, Any, Type

import email_validator
from email_validator import validate_email, EmailNotValidError
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from config import settings
from data.models import MediaType, MEDIA_CATEGORIES, GENDERS, DEPARTMENT_IDS
from utils.exceptions import ValidationError

# Addresses on reserved domains such as church.local are accepted like any other
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


# Messages shown for built-in constraint failures, keyed by field then error type
FIELD_MESSAGES: Dict[str, Dict[str, str]] = {
    "full_name": {
        "string_too_short": "Name must be at least 2 characters",
        "string_too_long": "Name must be at most 100 characters",
    },
    "email": {
        "string_too_long": "Email must be at most 255 characters",
    },
    "phone": {
        "string_too_short": "Phone number must be at least 10 digits",
        "string_too_long": "Phone number must be at most 20 characters",
    },
    "gender": {
        "string_too_short": "Please select a gender",
    },
    "departments": {
        "too_short": "Please select at least one department",
    },
    "experience": {
        "string_too_long": "Experience must be at most 1000 characters",
    },
}


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """Collapse pydantic errors to the first message per top-level field."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        field_name = str(err["loc"][0]) if err["loc"] else "__all__"
        if field_name in errors:
            continue
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            message = FIELD_MESSAGES.get(field_name, {}).get(err["type"], err["msg"])
        errors[field_name] = message
    return errors


def parse_form(form_cls: Type[BaseModel], data: Dict[str, Any]) -> BaseModel:
    """
    Validate raw form input against a form schema.

    Args:
        form_cls: The pydantic form model.
        data: Raw field values as entered.

    Returns:
        The validated form instance.

    Raises:
        ValidationError: With the first error per field, if any check fails.
    """
    try:
        return form_cls.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_field_errors(e)) from e


class JoinApplicationForm(BaseModel):
    """The public volunteer application form."""
    full_name: str = Field(min_length=settings.FULL_NAME_MIN_LENGTH, max_length=settings.FULL_NAME_MAX_LENGTH)
    email: str = Field(max_length=settings.EMAIL_MAX_LENGTH)
    phone: str = Field(min_length=settings.PHONE_MIN_LENGTH, max_length=settings.PHONE_MAX_LENGTH)
    gender: str = Field(min_length=1)
    age: Optional[str] = None
    departments: List[str] = Field(min_length=1)
    experience: Optional[str] = Field(default=None, max_length=settings.EXPERIENCE_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def email_shape(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Invalid email address")
        return value

    @field_validator("gender")
    @classmethod
    def known_gender(cls, value: str) -> str:
        if value not in GENDERS:
            raise ValueError("Please select a gender")
        return value

    @field_validator("age", mode="before")
    @classmethod
    def age_as_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @field_validator("age")
    @classmethod
    def age_is_integer(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value.strip() == "":
            return value
        try:
            int(value.strip())
        except ValueError:
            raise ValueError("Age must be a whole number")
        return value

    @field_validator("departments")
    @classmethod
    def known_departments(cls, value: List[str]) -> List[str]:
        unknown = [d for d in value if d not in DEPARTMENT_IDS]
        if unknown:
            raise ValueError(f"Unknown department: {', '.join(unknown)}")
        return value

    def to_row(self) -> Dict[str, Any]:
        """Normalize the submission into a worker_applications row."""
        age = self.age.strip() if self.age else ""
        experience = (self.experience or "").strip()
        return {
            "full_name": self.full_name.strip(),
            "email": self.email.strip().lower(),
            "phone_number": self.phone.strip(),
            "gender": self.gender,
            "age": int(age) if age else None,
            "departments": list(self.departments),
            "previous_experience": experience or None,
        }


class EventForm(BaseModel):
    """Admin form for creating or editing an event."""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    event_date: date
    event_time: time
    location: str = Field(min_length=1)

    def to_row(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description or None,
            "event_date": self.event_date.isoformat(),
            "event_time": self.event_time.strftime("%H:%M"),
            "location": self.location,
        }


class NewsForm(BaseModel):
    """Admin form for creating or editing a news post."""
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)

    def to_row(self) -> Dict[str, Any]:
        return {"title": self.title, "message": self.message}


class MediaForm(BaseModel):
    """
    Admin form for adding a media item.

    Only the content field belonging to media_type is kept; an image's
    content is the uploaded file, so it carries no text field here.
    """
    media_type: MediaType = MediaType.IMAGE
    category: str
    video_url: Optional[str] = None
    text_content: Optional[str] = None

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str) -> str:
        if value not in MEDIA_CATEGORIES:
            raise ValueError("Please select a category")
        return value

    @model_validator(mode="after")
    def content_matches_type(self) -> "MediaForm":
        if self.media_type is MediaType.VIDEO and not (self.video_url or "").strip():
            raise ValueError("Video media requires a video URL")
        if self.media_type is MediaType.TEXT and not (self.text_content or "").strip():
            raise ValueError("Text media requires content")
        return self

    def to_row(self, image_url: Optional[str] = None) -> Dict[str, Any]:
        """Build the media row; exactly one content column is included."""
        row: Dict[str, Any] = {"media_type": self.media_type.value, "category": self.category}
        if self.media_type is MediaType.IMAGE:
            row["image_url"] = image_url
        elif self.media_type is MediaType.VIDEO:
            row["video_url"] = self.video_url
        else:
            row["text_content"] = self.text_content
        return row
