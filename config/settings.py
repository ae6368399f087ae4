"""
Configuration Settings for the Church Site

This module centralizes all configuration settings for the church site,
including backend connection credentials, storage locations and application
constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))

# =============================================================================
# Backend Connection
# =============================================================================

BACKEND_URL = os.getenv("BACKEND_URL", "").rstrip("/")
BACKEND_ANON_KEY = os.getenv("BACKEND_ANON_KEY", "")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))  # Seconds per backend HTTP call

# =============================================================================
# Storage Settings
# =============================================================================

MEDIA_BUCKET = os.getenv("MEDIA_BUCKET", "media")
UPLOAD_PREFIX = "uploads"             # Folder for uploaded images inside the bucket
UPLOAD_CACHE_CONTROL = "3600"         # Cache-Control max-age for uploaded files

# =============================================================================
# Auth Settings
# =============================================================================

ADMIN_ROLE_TABLE = os.getenv("ADMIN_ROLE_TABLE", "user_roles")
ADMIN_ROLE_NAME = "admin"
SIGN_IN_ROUTE = "/auth"
SIGN_OUT_ROUTE = "/"

# =============================================================================
# Tables
# =============================================================================

EVENTS_TABLE = "events"
NEWS_TABLE = "news"
MEDIA_TABLE = "media"
WORKER_APPLICATIONS_TABLE = "worker_applications"

# =============================================================================
# Page Settings
# =============================================================================

SITE_NAME = "Shining Light Power Ministry"
CONTACT_EMAIL = "info@slpmi.org"
HOME_EVENTS_LIMIT = 3                 # Upcoming events shown on the home page
HOME_NEWS_LIMIT = 3                   # Latest news posts shown on the home page

# =============================================================================
# Join Form Bounds
# =============================================================================

FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
PHONE_MIN_LENGTH = 10
PHONE_MAX_LENGTH = 20
EXPERIENCE_MAX_LENGTH = 1000
AGE_MIN = 1                           # Input bounds only, not enforced on submit
AGE_MAX = 120

# =============================================================================
# Configuration Validation
# =============================================================================

from config.validators import ConfigurationError, validate_settings, get_config_summary  # noqa: E402,F401
