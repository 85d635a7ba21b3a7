"""Session state for the signed-in traveller."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pydantic import ValidationError as SchemaValidationError

from yatra.core.errors import AuthError, ValidationError
from yatra.core.supabase_api import SupabaseClient, SupabaseError, SupabaseSession, SupabaseUser
from yatra.schemas import USER_TYPES, Profile

_LOGGER = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
MIN_PASSWORD_LENGTH = 6

SessionListener = Callable[["SessionProvider"], None]


def _auth_error(exc: SupabaseError, fallback: str) -> AuthError:
    if exc.is_network_error:
        return AuthError("Unable to reach the sign-in service. Check your connection and try again.")
    return AuthError(exc.detail or fallback)


class SessionProvider:
    """Holds the current identity and profile and notifies listeners on change.

    Only the operations on this object mutate the session. Components that need
    the identity receive the provider itself and read it on demand.
    """

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client
        self._session: Optional[SupabaseSession] = None
        self._profile: Optional[Profile] = None
        self._listeners: List[SessionListener] = []

    @property
    def identity(self) -> Optional[SupabaseUser]:
        return self._session.user if self._session else None

    @property
    def user_id(self) -> Optional[str]:
        return self._session.user.id if self._session else None

    @property
    def profile(self) -> Optional[Profile]:
        return self._profile

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def access_token(self) -> str:
        """Bearer token for store requests; the anon key while signed out."""

        if self._session:
            return self._session.access_token
        return self._client.anon_key

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set_state(self, session: Optional[SupabaseSession], profile: Optional[Profile]) -> None:
        self._session = session
        self._profile = profile
        for listener in list(self._listeners):
            listener(self)

    def _fetch_profile(self, session: SupabaseSession) -> Optional[Profile]:
        rows = self._client.select(
            PROFILES_TABLE,
            access_token=session.access_token,
            filters={"id": f"eq.{session.user.id}"},
            limit=1,
        )
        if not rows:
            return None
        try:
            return Profile.model_validate(rows[0])
        except SchemaValidationError as exc:
            _LOGGER.warning("Ignoring malformed profile row for %s: %s", session.user.id, exc)
            return None

    def _profile_from_metadata(self, user: SupabaseUser) -> Profile:
        metadata = user.metadata
        user_type = metadata.get("user_type")
        return Profile(
            id=user.id,
            full_name=str(metadata.get("full_name") or user.email or ""),
            user_type=user_type if user_type in USER_TYPES else "tourist",
        )

    def _create_profile(self, session: SupabaseSession, full_name: str, role: str) -> Profile:
        """Insert the profile row for a new account.

        The account already exists at this point, so a failed insert keeps the
        session and falls back to the profile carried in the user metadata.
        """

        fallback = self._profile_from_metadata(session.user)
        try:
            rows = self._client.insert(
                PROFILES_TABLE,
                [{"id": session.user.id, "full_name": full_name, "user_type": role}],
                access_token=session.access_token,
            )
        except SupabaseError as exc:
            _LOGGER.warning("Profile row for %s was not created: %s", session.user.id, exc)
            return fallback
        if not rows:
            return fallback
        try:
            return Profile.model_validate(rows[0])
        except SchemaValidationError as exc:
            _LOGGER.warning("Ignoring malformed profile row for %s: %s", session.user.id, exc)
            return fallback

    def register(self, email: str, password: str, full_name: str, role: str = "tourist") -> Profile:
        """Create an account, its profile row, and sign in."""

        email = (email or "").strip()
        full_name = (full_name or "").strip()
        if not email:
            raise ValidationError("Email is required")
        if not full_name:
            raise ValidationError("Full name is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if role not in USER_TYPES:
            raise ValidationError("Choose whether you are a tourist, driver or guide")

        try:
            session = self._client.sign_up_with_password(
                email,
                password,
                metadata={"full_name": full_name, "user_type": role},
            )
        except SupabaseError as exc:
            raise _auth_error(exc, "Unable to create your account. Please try again.") from exc

        profile = self._create_profile(session, full_name, role)
        _LOGGER.info("Registered %s account %s", role, session.user.id)
        self._set_state(session, profile)
        return profile

    def authenticate(self, email: str, password: str) -> Profile:
        """Sign in with email and password."""

        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Enter both email and password.")
        try:
            session = self._client.sign_in_with_password(email, password)
            profile = self._fetch_profile(session)
        except SupabaseError as exc:
            raise _auth_error(exc, "Invalid email or password.") from exc

        if profile is None:
            profile = self._profile_from_metadata(session.user)
        _LOGGER.info("Signed in %s", session.user.id)
        self._set_state(session, profile)
        return profile

    def end_session(self) -> None:
        """Sign out locally; a failed remote revoke is reported afterwards."""

        session = self._session
        if session is None:
            return
        failure: Optional[SupabaseError] = None
        try:
            self._client.sign_out(session.access_token)
        except SupabaseError as exc:
            failure = exc
        self._set_state(None, None)
        _LOGGER.info("Signed out %s", session.user.id)
        if failure is not None:
            raise _auth_error(failure, "Signed out locally, but the server session could not be revoked.") from failure

    def refresh_if_needed(self) -> bool:
        """Refresh an expiring token; drop the session if that fails.

        Returns ``True`` while a valid session remains.
        """

        session = self._session
        if session is None:
            return False
        if not session.is_expired():
            return True
        try:
            refreshed = self._client.refresh_session(session.refresh_token)
        except SupabaseError as exc:
            _LOGGER.warning("Session refresh failed for %s: %s", session.user.id, exc)
            self._set_state(None, None)
            return False
        self._set_state(refreshed, self._profile)
        return True


__all__ = ["MIN_PASSWORD_LENGTH", "PROFILES_TABLE", "SessionListener", "SessionProvider"]
