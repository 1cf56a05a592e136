"""Custom exceptions for the face authentication service."""
from typing import Optional


class FaceAuthError(Exception):
    """Base exception for face authentication operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face authentication error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.details = details or {}


class EmbeddingValidationError(FaceAuthError):
    """Raised when a query embedding is missing, malformed or of the wrong length."""
    pass


class IdentityNotFoundError(FaceAuthError):
    """Raised when the requested identity does not exist."""
    pass


class DuplicateNameError(FaceAuthError):
    """Raised when an identity with the same name (case-insensitive) already exists."""
    pass


class DuplicateFaceError(FaceAuthError):
    """Raised when the face being registered already belongs to another identity."""

    @property
    def existing_user(self) -> Optional[str]:
        """Name of the identity the face is already registered under."""
        return self.details.get("existing_user")


class IdentityStoreError(FaceAuthError):
    """Base exception for identity store operations."""
    pass


class ServiceNotInitializedError(FaceAuthError):
    """Raised when a service is requested before the container is initialized."""
    pass
