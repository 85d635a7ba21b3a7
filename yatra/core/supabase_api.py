"""Minimal Supabase REST API client used by the Yatra application."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional

import requests

from yatra.core.config import Settings

REQUEST_TIMEOUT_SECONDS = 30


class SupabaseError(RuntimeError):
    """Raised when a Supabase API request fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload

    @property
    def detail(self) -> Optional[str]:
        """Return the human-readable message from the error body, if any."""

        if isinstance(self.payload, Mapping):
            for key in ("msg", "error_description", "message", "error"):
                value = self.payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return None

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None and self.payload is None


@dataclass(slots=True)
class SupabaseUser:
    """Supabase authenticated user representation."""

    id: str
    email: Optional[str]
    raw: Mapping[str, Any]

    @property
    def metadata(self) -> Mapping[str, Any]:
        value = self.raw.get("user_metadata") if isinstance(self.raw, Mapping) else None
        return value if isinstance(value, Mapping) else {}


@dataclass(slots=True)
class SupabaseSession:
    """Authentication session details returned by Supabase."""

    access_token: str
    refresh_token: str
    token_type: str
    expires_at: Optional[int]
    user: SupabaseUser

    def is_expired(self, *, safety_seconds: int = 60) -> bool:
        """Return ``True`` if the token has expired or is close to expiring."""

        if not self.expires_at:
            return False
        return time.time() >= (self.expires_at - safety_seconds)


def _decode_body(response: requests.Response) -> Any:
    if not response.text:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class SupabaseClient:
    """Very small wrapper around Supabase's REST and auth HTTP APIs."""

    def __init__(self, url: str, anon_key: str, *, http_session: Optional[requests.Session] = None) -> None:
        self._url = url.rstrip("/")
        self._anon_key = anon_key
        self._session = http_session or requests.Session()
        self._session.headers.setdefault("apikey", anon_key)

    @property
    def url(self) -> str:
        return self._url

    @property
    def anon_key(self) -> str:
        return self._anon_key

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "SupabaseClient":
        """Return a client for the configured Supabase project."""

        return cls(settings.supabase_url, settings.supabase_anon_key, **kwargs)

    def _send(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, endpoint, timeout=REQUEST_TIMEOUT_SECONDS, **kwargs)
        except requests.RequestException as exc:
            raise SupabaseError(f"Supabase request to {endpoint} failed: {exc}") from exc

    def _auth_request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Mapping[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        endpoint = f"{self._url}/auth/v1{path}"
        headers = {"Content-Type": "application/json", "apikey": self._anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        response = self._send(method, endpoint, json=payload, headers=headers)
        body = _decode_body(response)
        if response.status_code >= 400:
            raise SupabaseError(
                f"Supabase auth request failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
                payload=body if body is not None else {},
            )
        return body if isinstance(body, dict) else {}

    def _rest_request(
        self,
        method: str,
        path: str,
        *,
        access_token: str,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Any] = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        endpoint = f"{self._url}/rest/v1/{path.lstrip('/')}"
        headers: MutableMapping[str, str] = {
            "Authorization": f"Bearer {access_token}",
            "apikey": self._anon_key,
        }
        if extra_headers:
            headers.update(extra_headers)
        if method.upper() in {"POST", "PATCH", "PUT"}:
            headers.setdefault("Content-Type", "application/json")
        response = self._send(method, endpoint, params=params, json=payload, headers=headers)
        body = _decode_body(response)
        if response.status_code >= 400:
            raise SupabaseError(
                f"Supabase REST request failed ({response.status_code}) for {path}: {response.text}",
                status_code=response.status_code,
                payload=body if body is not None else {},
            )
        return body

    @staticmethod
    def _parse_user(user_data: Mapping[str, Any]) -> SupabaseUser:
        user_id = user_data.get("id")
        if not user_id:
            raise SupabaseError("Supabase auth response missing user id", payload={})
        return SupabaseUser(id=str(user_id), email=user_data.get("email"), raw=dict(user_data))

    @classmethod
    def _parse_session(cls, payload: Mapping[str, Any]) -> SupabaseSession:
        user_data = payload.get("user") or {}
        access_token = payload.get("access_token")
        refresh_token = payload.get("refresh_token")
        token_type = payload.get("token_type", "bearer")
        expires_at = payload.get("expires_at")
        if not access_token or not refresh_token:
            raise SupabaseError("Supabase auth response missing access or refresh token", payload={})
        return SupabaseSession(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type=token_type,
            expires_at=expires_at,
            user=cls._parse_user(user_data),
        )

    def sign_in_with_password(self, email: str, password: str) -> SupabaseSession:
        payload = {"email": email, "password": password}
        data = self._auth_request("POST", "/token?grant_type=password", payload=payload)
        return self._parse_session(data)

    def sign_up_with_password(
        self,
        email: str,
        password: str,
        *,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> SupabaseSession:
        """Create an account and return its session.

        Projects that require email confirmation answer without tokens; that case
        is reported as a :class:`SupabaseError` asking the user to confirm first.
        """

        payload: Dict[str, Any] = {"email": email, "password": password}
        if metadata:
            payload["data"] = dict(metadata)
        data = self._auth_request("POST", "/signup", payload=payload)
        if not data.get("access_token"):
            raise SupabaseError(
                "Supabase sign-up requires email confirmation",
                payload={"msg": "Check your inbox to confirm your email, then sign in."},
            )
        return self._parse_session(data)

    def refresh_session(self, refresh_token: str) -> SupabaseSession:
        payload = {"refresh_token": refresh_token}
        data = self._auth_request("POST", "/token?grant_type=refresh_token", payload=payload)
        return self._parse_session(data)

    def sign_out(self, access_token: str) -> None:
        self._auth_request("POST", "/logout", access_token=access_token)

    def select(
        self,
        table: str,
        *,
        access_token: str,
        filters: Optional[Mapping[str, Any]] = None,
        select: Optional[str] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if filters:
            params.update(filters)
        if select:
            params["select"] = select
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        result = self._rest_request("GET", table, access_token=access_token, params=params)
        if isinstance(result, list):
            return result
        return []

    def insert(
        self,
        table: str,
        rows: Iterable[Mapping[str, Any]],
        *,
        access_token: str,
        returning: bool = True,
    ) -> List[Dict[str, Any]]:
        payload = list(rows)
        if not payload:
            return []
        headers = {"Prefer": "return=representation"} if returning else {"Prefer": "return=minimal"}
        result = self._rest_request(
            "POST",
            table,
            access_token=access_token,
            payload=payload,
            extra_headers=headers,
        )
        if isinstance(result, list):
            return result
        return []


__all__ = ["SupabaseClient", "SupabaseSession", "SupabaseUser", "SupabaseError"]
