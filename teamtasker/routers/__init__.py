"""
Routers for the tracker's HTML pages and JSON API.
"""

from . import api, pages

__all__ = ["api", "pages"]
