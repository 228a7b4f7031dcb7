"""
Team Task Tracker Package.

A small web application for tracking team members and the tasks assigned
to them. Includes the FastAPI application, tracker state and configuration.
"""

__version__ = "1.0.0"
__description__ = "Team task tracker with server-rendered HTMX UI"

# Export main components
from .app import app
from .config import settings

__all__ = [
    "app",
    "settings",
    "__version__",
]
