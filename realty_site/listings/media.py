"""
Image and video URL helpers for property listings.
"""

from typing import List, Optional
from urllib.parse import parse_qs, urlparse


PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1600585154340-be6161a56a0c"
    "?auto=format&fit=crop&w=1770&q=80"
)


def resolve_image_url(image: str, base_url: str, bucket: str = "properties") -> str:
    """Turn a stored image reference into a URL.

    Absolute URLs are returned unchanged; anything else is treated as a path
    in the public storage bucket.
    """
    if image.startswith("http"):
        return image
    return f"{base_url.rstrip('/')}/storage/v1/object/public/{bucket}/{image.lstrip('/')}"


def image_urls(images: List[str], base_url: str, bucket: str = "properties") -> List[str]:
    return [resolve_image_url(image, base_url, bucket) for image in images]


def cover_image(images: List[str], base_url: str, bucket: str = "properties") -> str:
    """URL of the first image, or a placeholder when there are none."""
    if not images:
        return PLACEHOLDER_IMAGE
    return resolve_image_url(images[0], base_url, bucket)


def youtube_video_id(url: str) -> Optional[str]:
    """Extract the video id from a youtube.com or youtu.be link."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    host = parsed.hostname or ""
    if "youtube.com" in host:
        return (parse_qs(parsed.query).get("v") or [None])[0]
    if "youtu.be" in host:
        return parsed.path.lstrip("/") or None
    return None


def video_embed_url(url: str) -> str:
    """Embeddable player URL for YouTube and Vimeo links.

    Links that are not recognized are returned unchanged.
    """
    video_id = youtube_video_id(url)
    if video_id:
        return f"https://www.youtube.com/embed/{video_id}?autoplay=1"

    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    if "vimeo.com" in (parsed.hostname or ""):
        vimeo_id = parsed.path.rstrip("/").split("/")[-1]
        if vimeo_id:
            return f"https://player.vimeo.com/video/{vimeo_id}?autoplay=1"
    return url


def video_thumbnail_url(url: str) -> Optional[str]:
    """Thumbnail for YouTube links, None for anything else."""
    video_id = youtube_video_id(url)
    if video_id:
        return f"https://img.youtube.com/vi/{video_id}/mqdefault.jpg"
    return None
