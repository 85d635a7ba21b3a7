"""Connection settings loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from yatra.core.errors import ConfigurationError

SUPABASE_URL_ENV = "SUPABASE_URL"
SUPABASE_ANON_KEY_ENV = "SUPABASE_ANON_KEY"

# Delay before a booking or sign-up result navigates away, in seconds.
REDIRECT_DELAY_SECONDS = 2.0
SIGNUP_REDIRECT_DELAY_SECONDS = 1.5


@dataclass(frozen=True, slots=True)
class Settings:
    """The two endpoints required to talk to Supabase."""

    supabase_url: str
    supabase_anon_key: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Return settings from ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY``.

        Raises :class:`ConfigurationError` when either value is missing or blank.
        """

        source = os.environ if environ is None else environ
        url = (source.get(SUPABASE_URL_ENV) or "").strip()
        anon_key = (source.get(SUPABASE_ANON_KEY_ENV) or "").strip()
        missing = [
            name
            for name, value in ((SUPABASE_URL_ENV, url), (SUPABASE_ANON_KEY_ENV, anon_key))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing Supabase environment variables: " + ", ".join(missing)
            )
        return cls(supabase_url=url, supabase_anon_key=anon_key)


def load_settings() -> Settings:
    """Load ``.env`` (if present) and return the validated settings."""

    load_dotenv()
    return Settings.from_env()


__all__ = [
    "REDIRECT_DELAY_SECONDS",
    "SIGNUP_REDIRECT_DELAY_SECONDS",
    "SUPABASE_ANON_KEY_ENV",
    "SUPABASE_URL_ENV",
    "Settings",
    "load_settings",
]
