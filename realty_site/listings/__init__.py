"""Listing panels and media helpers."""

from .display import ListingDisplay, LaunchDisplay, load_featured
from .location_results import LocationSearchResults
from .media import resolve_image_url, cover_image, video_embed_url

__all__ = [
    'ListingDisplay',
    'LaunchDisplay',
    'load_featured',
    'LocationSearchResults',
    'resolve_image_url',
    'cover_image',
    'video_embed_url',
]
