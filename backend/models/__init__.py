"""
Pydantic models for the site builder service.

All data shapes defined here. No imports from routes or services.
"""

from backend.models.website import PageIn, PublishResponse, WebsiteIn

__all__ = [
    "PageIn",
    "WebsiteIn",
    "PublishResponse",
]
