"""Property data models"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from realty_site.listings.media import image_urls, cover_image
from realty_site.models import PropertyRecord


class PropertyBase(BaseModel):
    """Fields shared by the public and admin property shapes"""
    title: str
    description: Optional[str] = None
    price: Optional[float] = None
    location: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    display_status: Optional[str] = None
    bedrooms: Optional[int] = None
    suites: Optional[int] = None
    bathrooms: Optional[int] = None
    parking_spots: Optional[int] = None
    area: Optional[float] = None
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    video_links: List[str] = Field(default_factory=list)


class PropertyOut(PropertyBase):
    """API response model for properties"""
    id: str
    created_at: Optional[datetime] = None
    status_label: str = ""
    image_urls: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_record(cls, record: PropertyRecord, base_url: str, bucket: str) -> "PropertyOut":
        data = record.to_dict()
        data["created_at"] = record.created_at
        return cls(
            **data,
            status_label=record.status_label,
            image_urls=image_urls(record.images, base_url, bucket),
            cover_image=cover_image(record.images, base_url, bucket),
        )


class ImageUploadIn(BaseModel):
    """A new image, base64-encoded"""
    filename: str
    content_type: str = "application/octet-stream"
    data: str


class PropertyIn(BaseModel):
    """Admin form for creating or updating a property.

    Numbers arrive as strings from the form; blanks mean "not set".
    """
    title: str = ""
    description: str = ""
    price: str = ""
    location: str = ""
    city: str = ""
    region: str = ""
    type: str = "apartment"
    status: str = "new"
    display_status: str = ""
    bedrooms: str = ""
    suites: str = ""
    bathrooms: str = ""
    parking_spots: str = ""
    area: str = ""
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    video_links: List[str] = Field(default_factory=list)
    uploads: List[ImageUploadIn] = Field(default_factory=list)
