"""
Shared dependencies for the application.

Provides dependency injection functions used across routers.
"""

from typing import Optional

from .tracker import TeamTracker

# Global tracker instance (set by main app)
_tracker: Optional[TeamTracker] = None


def set_tracker(tracker: Optional[TeamTracker]) -> None:
    """
    Set the global tracker instance.

    Called by the app lifespan during startup and shutdown.
    """
    global _tracker
    _tracker = tracker


def get_tracker() -> TeamTracker:
    """
    Get the tracker instance for dependency injection.

    Used by all routers that read or mutate tracker state.
    """
    if _tracker is None:
        raise RuntimeError("Tracker not initialized")
    return _tracker
