from __future__ import annotations
from typing import Dict, Optional


class PortalError(Exception):
    """Base for every failure scoped to one actor's in-flight operation."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    default_message = "Please fix the errors in the form"

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        super().__init__(message)


class AssetError(PortalError):
    default_message = "The selected file could not be processed"


class CompressionError(AssetError):
    default_message = "Failed to compress image"


class NotAuthenticated(PortalError):
    default_message = "Please sign in to continue"


class AuthError(PortalError):
    default_message = "Invalid login credentials"


class AccessDenied(PortalError):
    default_message = "Access denied"


class DuplicateSubmission(PortalError):
    default_message = "You have already submitted your application"


class PersistenceError(PortalError):
    default_message = "Failed to save. Please try again."


class NotificationError(PortalError):
    default_message = "Failed to send email notification"
