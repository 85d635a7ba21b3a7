"""Per-browser-session wiring of the Yatra components."""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from yatra.core.config import Settings
from yatra.core.records import SupabaseRecordStore
from yatra.core.session import SessionProvider
from yatra.core.supabase_api import SupabaseClient
from yatra.schemas import Destination, GuideWithProfile
from yatra.workflows.booking import GuideBookingWorkflow, RideBookingWorkflow
from yatra.workflows.catalog import CatalogBrowser
from yatra.workflows.dashboard import DashboardAggregator
from yatra.workflows.router import Router

APP_CONTEXT_KEY = "_yatra_context"


@dataclass(slots=True)
class AppContext:
    """Everything a page renderer needs, passed explicitly."""

    client: SupabaseClient
    session: SessionProvider
    store: SupabaseRecordStore
    router: Router
    popular: CatalogBrowser[Destination]
    destinations: CatalogBrowser[Destination]
    guides: CatalogBrowser[GuideWithProfile]
    dashboard: DashboardAggregator
    rides: RideBookingWorkflow
    guide_booking: GuideBookingWorkflow

    @classmethod
    def build(cls, settings: Settings, *, client: SupabaseClient | None = None) -> "AppContext":
        client = client or SupabaseClient.from_settings(settings)
        session = SessionProvider(client)
        store = SupabaseRecordStore(client, lambda: session.access_token)
        router = Router()
        dashboard = DashboardAggregator(store)
        session.subscribe(dashboard.invalidate)
        return cls(
            client=client,
            session=session,
            store=store,
            router=router,
            popular=CatalogBrowser(),
            destinations=CatalogBrowser(),
            guides=CatalogBrowser(),
            dashboard=dashboard,
            rides=RideBookingWorkflow(store, session, router, on_booked=[dashboard.invalidate]),
            guide_booking=GuideBookingWorkflow(store, session, router, on_booked=[dashboard.invalidate]),
        )


def get_context(settings: Settings) -> AppContext:
    """Return the context for this browser session, creating it on first use."""

    context = st.session_state.get(APP_CONTEXT_KEY)
    if not isinstance(context, AppContext):
        context = AppContext.build(settings)
        st.session_state[APP_CONTEXT_KEY] = context
    return context


__all__ = ["APP_CONTEXT_KEY", "AppContext", "get_context"]
