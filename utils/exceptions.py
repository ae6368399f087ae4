"""
Custom Exception Classes for the Church Site

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""

from typing import Dict, Optional


class ChurchSiteError(Exception):
    """Base exception for all church site errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ChurchSiteError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(ChurchSiteError):
    """Raised when a form fails local validation before any network call.

    Attributes:
        field_errors: First error message per field, keyed by form field name.
    """

    def __init__(self, field_errors: Dict[str, str], message: str = "Please fill in all required fields correctly."):
        super().__init__(message)
        self.field_errors = dict(field_errors)


# =============================================================================
# Access Errors
# =============================================================================

class AccessDeniedError(ChurchSiteError):
    """Raised when admin functionality is requested without an admin session."""
    pass


# =============================================================================
# Remote Backend Errors
# =============================================================================

class RemoteError(ChurchSiteError):
    """Base exception for any failed call to the managed backend.

    Attributes:
        status_code: HTTP status of the failed response, if one was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(RemoteError):
    """Raised when the auth service rejects a sign-in or session lookup."""
    pass


class QueryError(RemoteError):
    """Raised when a table read fails."""
    pass


class MutationError(RemoteError):
    """Raised when a table insert, update or delete fails."""
    pass


class StorageError(RemoteError):
    """Raised when a file upload or removal fails."""
    pass
