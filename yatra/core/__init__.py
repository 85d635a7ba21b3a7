"""Core utilities for Yatra."""

from .config import Settings, load_settings
from .errors import (
    AuthError,
    ConfigurationError,
    NetworkError,
    StateError,
    StoreError,
    ValidationError,
    YatraError,
)
from .records import SupabaseRecordStore
from .session import SessionProvider
from .supabase_api import SupabaseClient, SupabaseError

__all__ = [
    "AuthError",
    "ConfigurationError",
    "NetworkError",
    "SessionProvider",
    "Settings",
    "StateError",
    "StoreError",
    "SupabaseClient",
    "SupabaseError",
    "SupabaseRecordStore",
    "ValidationError",
    "YatraError",
    "load_settings",
]
