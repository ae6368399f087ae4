"""
Configuration Validation for the Church Site

This module contains configuration validation logic and related exceptions.
Kept apart from settings.py so settings stays a flat list of values.
"""

from utils.exceptions import ConfigurationError
from utils.helpers import is_valid_url


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    # Required environment variables
    required_vars = [
        ("BACKEND_URL", settings.BACKEND_URL),
        ("BACKEND_ANON_KEY", settings.BACKEND_ANON_KEY),
    ]

    for var_name, var_value in required_vars:
        if not var_value:
            errors.append(f"Missing required environment variable: {var_name}")

    if settings.BACKEND_URL and not is_valid_url(settings.BACKEND_URL):
        errors.append(f"BACKEND_URL is not a valid URL: {settings.BACKEND_URL}")

    if not settings.MEDIA_BUCKET:
        errors.append("MEDIA_BUCKET must not be empty")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("HOME_EVENTS_LIMIT", settings.HOME_EVENTS_LIMIT, 1, 50),
        ("HOME_NEWS_LIMIT", settings.HOME_NEWS_LIMIT, 1, 50),
        ("FULL_NAME_MIN_LENGTH", settings.FULL_NAME_MIN_LENGTH, 1, settings.FULL_NAME_MAX_LENGTH),
        ("PHONE_MIN_LENGTH", settings.PHONE_MIN_LENGTH, 1, settings.PHONE_MAX_LENGTH),
        ("EMAIL_MAX_LENGTH", settings.EMAIL_MAX_LENGTH, 3, 1000),
        ("EXPERIENCE_MAX_LENGTH", settings.EXPERIENCE_MAX_LENGTH, 1, 10000),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.REQUEST_TIMEOUT <= 0:
        errors.append(f"REQUEST_TIMEOUT must be positive, got {settings.REQUEST_TIMEOUT}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "backend": {
            "url": settings.BACKEND_URL[:30] + "..." if len(settings.BACKEND_URL) > 30 else settings.BACKEND_URL,
            "anon_key_configured": bool(settings.BACKEND_ANON_KEY),
            "timeout": settings.REQUEST_TIMEOUT,
        },
        "storage": {
            "bucket": settings.MEDIA_BUCKET,
            "upload_prefix": settings.UPLOAD_PREFIX,
        },
        "auth": {
            "admin_role_table": settings.ADMIN_ROLE_TABLE,
            "admin_role": settings.ADMIN_ROLE_NAME,
        },
        "pages": {
            "home_events_limit": settings.HOME_EVENTS_LIMIT,
            "home_news_limit": settings.HOME_NEWS_LIMIT,
        },
    }
