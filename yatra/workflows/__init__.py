"""Workflow entry points for browsing and booking."""

from .booking import BookingOutcome, BookingState, GuideBookingWorkflow, RideBookingWorkflow, guide_total_cost
from .catalog import CatalogBrowser, filter_destinations, filter_guides, filter_items
from .dashboard import DashboardAggregator, DashboardSummary, active_count
from .router import Page, Router

__all__ = [
    "BookingOutcome",
    "BookingState",
    "CatalogBrowser",
    "DashboardAggregator",
    "DashboardSummary",
    "GuideBookingWorkflow",
    "Page",
    "RideBookingWorkflow",
    "Router",
    "active_count",
    "filter_destinations",
    "filter_guides",
    "filter_items",
    "guide_total_cost",
]
