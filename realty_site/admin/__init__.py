"""Admin back office: session, property records and site copy."""

from .session import AdminSession
from .properties import PropertyAdmin, ImageUpload, build_property_row
from .about import AboutAdmin

__all__ = [
    'AdminSession',
    'PropertyAdmin',
    'ImageUpload',
    'build_property_row',
    'AboutAdmin',
]
