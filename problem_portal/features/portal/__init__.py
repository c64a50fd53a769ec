"""Portal feature module: listing/detail orchestration for the known-problems view."""

from problem_portal.features.portal.orchestrator import PortalOrchestrator, build_demo_portal
from problem_portal.features.portal.state import (
    DetailState,
    ListingState,
    Notification,
    PortalView,
    TransitionError,
)

__all__ = [
    "DetailState",
    "ListingState",
    "Notification",
    "PortalOrchestrator",
    "PortalView",
    "TransitionError",
    "build_demo_portal",
]
