"""
API route modules.
"""

from .entries import router as entries_router
from .feeds import router as feeds_router
from .misc import router as misc_router

__all__ = [
    "entries_router",
    "feeds_router",
    "misc_router",
]
