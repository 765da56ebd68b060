"""Data models for the realty site API"""

from .property import PropertyOut, PropertyIn, ImageUploadIn
from .search import SearchQuery, SearchResult, LocationSuggestionOut, SuggestionResult
from .site import AboutOut, AboutIn, ContactIn, LoginIn, LoginOut

__all__ = [
    "PropertyOut",
    "PropertyIn",
    "ImageUploadIn",
    "SearchQuery",
    "SearchResult",
    "LocationSuggestionOut",
    "SuggestionResult",
    "AboutOut",
    "AboutIn",
    "ContactIn",
    "LoginIn",
    "LoginOut",
]
