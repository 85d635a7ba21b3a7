"""Single-value page routing with delayed redirects."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class Page(str, Enum):
    HOME = "home"
    SIGN_IN = "signin"
    SIGN_UP = "signup"
    DESTINATIONS = "destinations"
    RIDES = "rides"
    GUIDES = "guides"
    DASHBOARD = "dashboard"

    @classmethod
    def parse(cls, value: object) -> "Page":
        """Return the page named by ``value``; unknown names map to home."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.HOME


AUTH_PAGES = frozenset({Page.SIGN_IN, Page.SIGN_UP})


@dataclass(frozen=True, slots=True)
class Redirect:
    page: Page
    due_at: float


class Router:
    """Holds the current page; there is no history stack."""

    def __init__(self, page: Page = Page.HOME, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._page = page
        self._clock = clock
        self._pending: Optional[Redirect] = None

    @property
    def current(self) -> Page:
        return self._page

    @property
    def show_footer(self) -> bool:
        return self._page not in AUTH_PAGES

    @property
    def pending(self) -> Optional[Redirect]:
        return self._pending

    def navigate(self, page: Page | str) -> Page:
        self._page = Page.parse(page)
        self._pending = None
        return self._page

    def schedule(self, page: Page | str, delay_seconds: float) -> Redirect:
        """Navigate to ``page`` once ``delay_seconds`` have elapsed."""

        self._pending = Redirect(Page.parse(page), self._clock() + max(delay_seconds, 0.0))
        return self._pending

    def seconds_until_redirect(self) -> Optional[float]:
        if self._pending is None:
            return None
        return max(self._pending.due_at - self._clock(), 0.0)

    def due_redirect(self) -> Optional[Page]:
        """Apply the pending redirect if it is due and return the new page."""

        pending = self._pending
        if pending is None or self._clock() < pending.due_at:
            return None
        return self.navigate(pending.page)


__all__ = ["AUTH_PAGES", "Page", "Redirect", "Router"]
