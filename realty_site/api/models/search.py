"""Search data models"""

from pydantic import BaseModel, Field
from typing import List, Optional

from .property import PropertyOut


class SearchQuery(BaseModel):
    """Search form fields, as the hero form sends them"""
    location: str = ""
    propertyType: str = ""
    propertyStatus: str = ""
    priceRange: str = ""
    bedrooms: str = ""
    suites: str = ""
    parkingSpots: str = ""


class SearchResult(BaseModel):
    """Search results with metadata"""
    results: List[PropertyOut]
    total_count: int
    searchParams: SearchQuery
    message: Optional[str] = None


class LocationSuggestionOut(BaseModel):
    """One entry of the suggestion panel"""
    label: str
    count: int
    location: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None


class SuggestionResult(BaseModel):
    query: str
    suggestions: List[LocationSuggestionOut] = Field(default_factory=list)
