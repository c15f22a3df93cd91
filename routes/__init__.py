"""
API route modules.
"""

from routes.negative_keywords import router as negative_keywords_router

__all__ = [
    "negative_keywords_router",
]
