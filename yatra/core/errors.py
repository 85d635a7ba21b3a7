"""Error types surfaced by Yatra workflows."""

from __future__ import annotations

from typing import Optional


class YatraError(Exception):
    """Base class for errors rendered as a single inline message."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(YatraError):
    """Raised when the Supabase connection settings are missing."""

    default_message = "Missing Supabase environment variables"


class ValidationError(YatraError):
    """Raised for client-side input problems before any network call."""

    default_message = "Please check the form and try again."


class AuthError(YatraError):
    """Raised when the auth provider rejects a request or cannot be reached."""

    default_message = "Authentication failed. Please try again."


class StoreError(YatraError):
    """Raised when a read or insert against the record store fails."""

    default_message = "Unable to reach the booking service. Please try again."


class NetworkError(StoreError):
    """Raised when the record store could not be reached at all."""

    default_message = "Network error. Check your connection and try again."


class StateError(YatraError):
    """Raised when a booking is submitted from an invalid state."""

    UNAUTHENTICATED = "unauthenticated"
    NO_CANDIDATE = "no_candidate"

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        self.reason = reason
        super().__init__(message)


__all__ = [
    "AuthError",
    "ConfigurationError",
    "NetworkError",
    "StateError",
    "StoreError",
    "ValidationError",
    "YatraError",
]
