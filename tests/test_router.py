from __future__ import annotations

import pytest

from yatra.workflows.router import AUTH_PAGES, Page, Router


@pytest.mark.parametrize("page", list(Page))
def test_footer_hidden_only_on_auth_pages(router: Router, page: Page) -> None:
    router.navigate(page)

    assert router.current is page
    assert router.show_footer is (page not in AUTH_PAGES)


@pytest.mark.parametrize("value, expected", [("rides", Page.RIDES), ("signin", Page.SIGN_IN), ("nowhere", Page.HOME), (None, Page.HOME)])
def test_parse_falls_back_to_home(value, expected: Page) -> None:
    assert Page.parse(value) is expected


def test_router_starts_at_home(router: Router) -> None:
    assert router.current is Page.HOME
    assert router.pending is None
    assert router.seconds_until_redirect() is None


def test_scheduled_redirect_applies_once_due(router: Router, clock) -> None:
    router.navigate(Page.RIDES)
    router.schedule(Page.DASHBOARD, 2.0)

    clock.advance(1.5)
    assert router.seconds_until_redirect() == pytest.approx(0.5)
    assert router.due_redirect() is None
    assert router.current is Page.RIDES

    clock.advance(0.5)
    assert router.due_redirect() is Page.DASHBOARD
    assert router.current is Page.DASHBOARD
    assert router.pending is None
    assert router.due_redirect() is None


def test_manual_navigation_cancels_pending_redirect(router: Router, clock) -> None:
    router.schedule("signin", 2.0)

    router.navigate("destinations")
    clock.advance(5)

    assert router.due_redirect() is None
    assert router.current is Page.DESTINATIONS


def test_negative_delay_is_due_immediately(router: Router) -> None:
    router.schedule(Page.DASHBOARD, -1)

    assert router.seconds_until_redirect() == 0.0
    assert router.due_redirect() is Page.DASHBOARD
