"""
Admin management of property records and their images.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlparse

from realty_site.error_handling import CriteriaError, ValidationError
from realty_site.models import (
    PropertyRecord,
    PropertyStatus,
    PropertyType,
    parse_optional_float,
    parse_optional_int,
)
from realty_site.store import DataStore, Query
from .session import AdminSession


logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Preencha todos os campos obrigatórios"
INVALID_VIDEO_MESSAGE = (
    "URL do vídeo inválida. Por favor, insira uma URL completa "
    "(começando com http:// ou https://)"
)


@dataclass
class ImageUpload:
    """A new image chosen in the property form."""
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else "bin"


def is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _number(parser, value: Any, name: str):
    try:
        return parser(value, name)
    except CriteriaError as e:
        raise ValidationError(str(e)) from e


def _text_list(values: Optional[Iterable[Any]]) -> List[str]:
    return [str(v).strip() for v in (values or []) if str(v).strip()]


def build_property_row(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate the property form and convert it into a store row.

    Title, location and price are required. Blank optional numbers become
    None, as does a blank display status.

    Raises:
        ValidationError: With a message suitable for the admin screen
    """
    title = str(form.get("title") or "").strip()
    location = str(form.get("location") or "").strip()
    price = _number(parse_optional_float, form.get("price"), "price")
    if not title or not location or price is None:
        raise ValidationError(REQUIRED_MESSAGE)

    property_type = str(form.get("type") or PropertyType.APARTMENT.value)
    if property_type not in {t.value for t in PropertyType}:
        raise ValidationError(f"Tipo de imóvel inválido: {property_type}")
    status = str(form.get("status") or PropertyStatus.NEW.value)
    if status not in {s.value for s in PropertyStatus}:
        raise ValidationError(f"Status inválido: {status}")

    video_links = _text_list(form.get("video_links"))
    if any(not is_absolute_url(link) for link in video_links):
        raise ValidationError(INVALID_VIDEO_MESSAGE)

    return {
        "title": title,
        "description": str(form.get("description") or "").strip(),
        "price": price,
        "location": location,
        "city": str(form.get("city") or "").strip(),
        "region": str(form.get("region") or "").strip(),
        "type": property_type,
        "status": status,
        "display_status": str(form.get("display_status") or "").strip() or None,
        "bedrooms": _number(parse_optional_int, form.get("bedrooms"), "bedrooms"),
        "suites": _number(parse_optional_int, form.get("suites"), "suites"),
        "bathrooms": _number(parse_optional_int, form.get("bathrooms"), "bathrooms"),
        "parking_spots": _number(parse_optional_int, form.get("parking_spots"), "parking_spots"),
        "area": _number(parse_optional_float, form.get("area"), "area"),
        "amenities": _text_list(form.get("amenities")),
        "images": _text_list(form.get("images")),
        "video_links": video_links,
    }


class PropertyAdmin:
    """CRUD for ``properties`` behind an admin session.

    Attributes:
        bucket: Storage bucket receiving uploaded images
        max_images: Upper bound on images per property
    """

    TABLE = "properties"

    def __init__(
        self,
        store: DataStore,
        session: AdminSession,
        bucket: str = "properties",
        max_images: int = 10
    ):
        self.store = store
        self.session = session
        self.bucket = bucket
        self.max_images = max_images

    async def list(self) -> List[PropertyRecord]:
        """All properties, newest first."""
        self.session.require()
        rows = await self.store.select(self.TABLE, Query().order("created_at", descending=True))
        return [PropertyRecord.from_row(row) for row in rows]

    async def load(self, property_id: str) -> Optional[PropertyRecord]:
        self.session.require()
        rows = await self.store.select(self.TABLE, Query().eq("id", property_id).limit(1))
        return PropertyRecord.from_row(rows[0]) if rows else None

    async def upload_images(self, uploads: Iterable[ImageUpload]) -> List[str]:
        """Upload new images and return their storage paths.

        Paths are ``<epoch-ms>-<random>.<ext>`` so uploads never collide.
        """
        paths = []
        for upload in uploads:
            path = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{upload.extension}"
            await self.store.upload(self.bucket, path, upload.data, upload.content_type)
            logger.debug(f"Uploaded {upload.filename} as {path}")
            paths.append(path)
        return paths

    async def save(
        self,
        form: Mapping[str, Any],
        uploads: Iterable[ImageUpload] = (),
        property_id: Optional[str] = None
    ) -> PropertyRecord:
        """Create a property, or update it when ``property_id`` is given.

        New images are uploaded first and appended to the images already on
        the form.

        Raises:
            NotAuthorizedError: Without an admin session
            ValidationError: If the form is invalid
            StoreError: If an upload or the write fails
        """
        self.session.require()
        row = build_property_row(form)
        uploads = list(uploads)

        if len(row["images"]) + len(uploads) > self.max_images:
            raise ValidationError(f"Máximo de {self.max_images} imagens permitido")

        row["images"] = row["images"] + await self.upload_images(uploads)

        if property_id:
            rows = await self.store.update(self.TABLE, row, Query().eq("id", property_id))
            if not rows:
                raise ValidationError("Imóvel não encontrado")
            logger.info(f"Updated property {property_id}")
        else:
            rows = await self.store.insert(self.TABLE, row)
            logger.info(f"Created property {rows[0].get('id') if rows else '?'}")

        if not rows:
            # Row-level security may hide the written row from the reply
            return PropertyRecord.from_row({"id": property_id or "", **row})
        return PropertyRecord.from_row(rows[0])

    async def delete(self, property_id: str) -> bool:
        """Delete a property; returns False if it did not exist."""
        self.session.require()
        removed = await self.store.delete(self.TABLE, Query().eq("id", property_id))
        if removed:
            logger.info(f"Deleted property {property_id}")
        return bool(removed)
