"""Shared fakes for the Yatra test-suite."""

from __future__ import annotations

import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pytest

from yatra.core.records import SupabaseRecordStore
from yatra.core.session import SessionProvider
from yatra.core.supabase_api import SupabaseError, SupabaseSession, SupabaseUser
from yatra.workflows.router import Router


def _matches(row: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    for column, expression in (filters or {}).items():
        operator, _, operand = str(expression).partition(".")
        value = row.get(column)
        if operator == "eq":
            if str(value).lower() != operand.lower():
                return False
        elif operator == "cs":
            wanted = operand.strip("{}")
            if wanted not in (value or []):
                return False
        else:  # pragma: no cover - guards against unsupported filters in tests
            raise AssertionError(f"Unsupported filter {expression!r}")
    return True


class FakeSupabaseClient:
    """In-memory stand-in for :class:`SupabaseClient` that records every call."""

    anon_key = "anon-key"

    def __init__(self, tables: Optional[Mapping[str, Iterable[Mapping[str, Any]]]] = None) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.users: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[Any, ...]] = []
        self.failures: Dict[str, SupabaseError] = {}
        self.auth_failure: Optional[SupabaseError] = None
        self.refresh_failure: Optional[SupabaseError] = None
        self.expires_in = 3600
        self._counter = 0

    # Helpers -----------------------------------------------------------
    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter:04d}"

    def _session(self, user: Mapping[str, Any]) -> SupabaseSession:
        return SupabaseSession(
            access_token=f"token-{user['id']}",
            refresh_token=f"refresh-{user['id']}",
            token_type="bearer",
            expires_at=int(time.time()) + self.expires_in,
            user=SupabaseUser(
                id=user["id"],
                email=user["email"],
                raw={"id": user["id"], "email": user["email"], "user_metadata": dict(user["metadata"])},
            ),
        )

    def calls_of(self, kind: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == kind]

    @property
    def auth_calls(self) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] in {"sign_up", "sign_in", "sign_out", "refresh"}]

    # Auth ---------------------------------------------------------------
    def sign_up_with_password(
        self,
        email: str,
        password: str,
        *,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> SupabaseSession:
        self.calls.append(("sign_up", email))
        if self.auth_failure:
            raise self.auth_failure
        if email in self.users:
            raise SupabaseError("duplicate", status_code=422, payload={"msg": "User already registered"})
        user = {"id": self._next_id("user"), "email": email, "password": password, "metadata": dict(metadata or {})}
        self.users[email] = user
        return self._session(user)

    def sign_in_with_password(self, email: str, password: str) -> SupabaseSession:
        self.calls.append(("sign_in", email))
        if self.auth_failure:
            raise self.auth_failure
        user = self.users.get(email)
        if not user or user["password"] != password:
            raise SupabaseError(
                "invalid",
                status_code=400,
                payload={"error": "invalid_grant", "error_description": "Invalid login credentials"},
            )
        return self._session(user)

    def sign_out(self, access_token: str) -> None:
        self.calls.append(("sign_out", access_token))
        if self.auth_failure:
            raise self.auth_failure

    def refresh_session(self, refresh_token: str) -> SupabaseSession:
        self.calls.append(("refresh", refresh_token))
        if self.refresh_failure:
            raise self.refresh_failure
        user_id = refresh_token.removeprefix("refresh-")
        user = next(user for user in self.users.values() if user["id"] == user_id)
        self.expires_in = 3600
        return self._session(user)

    # REST ---------------------------------------------------------------
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
        self.calls.append(("select", table, dict(filters or {}), order, limit, access_token))
        if table in self.failures:
            raise self.failures[table]
        rows = [row for row in self.tables.get(table, []) if _matches(row, filters)]
        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda row: row.get(column) or 0, reverse=direction == "desc")
        if limit is not None:
            rows = rows[:limit]
        return [dict(row) for row in rows]

    def insert(
        self,
        table: str,
        rows: Iterable[Mapping[str, Any]],
        *,
        access_token: str,
        returning: bool = True,
    ) -> List[Dict[str, Any]]:
        payload = [dict(row) for row in rows]
        self.calls.append(("insert", table, payload, access_token))
        if table in self.failures:
            raise self.failures[table]
        stored = []
        for row in payload:
            record = {"id": self._next_id(table), "created_at": "2024-05-01T09:00:00+00:00", **row}
            self.tables.setdefault(table, []).append(record)
            stored.append(dict(record))
        return stored if returning else []


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _driver(driver_id: str, vehicle_type: str, rating: float, *, available: bool = True) -> Dict[str, Any]:
    return {
        "id": driver_id,
        "user_id": f"user-{driver_id}",
        "vehicle_type": vehicle_type,
        "vehicle_number": f"KA-01-{driver_id[-2:].upper()}",
        "license_number": "DL-123",
        "rating": rating,
        "total_rides": 120,
        "available": available,
    }


def _guide(guide_id: str, name: str, rate: float, rating: float, specialization: List[str], languages: List[str]) -> Dict[str, Any]:
    return {
        "id": guide_id,
        "user_id": f"user-{guide_id}",
        "specialization": specialization,
        "languages": languages,
        "experience_years": 8,
        "hourly_rate": rate,
        "rating": rating,
        "total_bookings": 40,
        "bio": None,
        "available": True,
        "profiles": {"full_name": name, "avatar_url": None},
    }


def default_tables() -> Dict[str, List[Dict[str, Any]]]:
    return {
        "drivers": [
            _driver("drv-sedan-45", "sedan", 4.5),
            _driver("drv-sedan-49", "sedan", 4.9),
            _driver("drv-sedan-50", "sedan", 5.0, available=False),
            _driver("drv-sedan-47", "sedan", 4.7),
            _driver("drv-suv-48", "suv", 4.8),
        ],
        "guides": [
            _guide("gd-1", "Asha Menon", 500, 4.6, ["Heritage", "Food"], ["English", "Malayalam"]),
            _guide("gd-2", "Ravi Kumar", 750, 4.9, ["Wildlife"], ["Hindi", "English"]),
            _guide("gd-3", "Meera Iyer", 400, 4.2, ["Temples"], ["Tamil"]),
            _guide("gd-4", "Arjun Singh", 650, 4.4, ["Trekking"], ["Hindi"]),
        ],
        "destinations": [
            {
                "id": "dst-1",
                "name": "Hampi",
                "description": "Ruins of the Vijayanagara empire.",
                "state": "Karnataka",
                "city": "Hosapete",
                "category": "heritage",
                "rating": 4.8,
                "popular": True,
            },
            {
                "id": "dst-2",
                "name": "Varkala Cliff",
                "description": "Cliffside beach town.",
                "state": "Kerala",
                "city": "Varkala",
                "category": "beach",
                "rating": 4.6,
                "popular": False,
            },
        ],
    }


@pytest.fixture
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient(default_tables())


@pytest.fixture
def session(fake_client: FakeSupabaseClient) -> SessionProvider:
    return SessionProvider(fake_client)  # type: ignore[arg-type]


@pytest.fixture
def signed_in(session: SessionProvider) -> SessionProvider:
    session.register("tourist@example.com", "secret123", "Priya Sharma", "tourist")
    return session


@pytest.fixture
def store(fake_client: FakeSupabaseClient, session: SessionProvider) -> SupabaseRecordStore:
    return SupabaseRecordStore(fake_client, lambda: session.access_token)  # type: ignore[arg-type]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def router(clock: FakeClock) -> Router:
    return Router(clock=clock)
