"""
API route modules.
"""

from .catalog import router as catalog_router
from .misc import router as misc_router
from .summary import router as summary_router

__all__ = [
    "catalog_router",
    "misc_router",
    "summary_router",
]
