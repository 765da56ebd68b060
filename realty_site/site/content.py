"""
Site copy and media read from the store.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from realty_site.models import PropertyRecord
from realty_site.store import DataStore, Query


logger = logging.getLogger(__name__)

DEFAULT_STORY = (
    "Com anos de experiência no mercado imobiliário, construí minha carreira "
    "com base na confiança e no atendimento personalizado.\n\n"
    "Hoje, sou especialista em imóveis de lançamentos exclusivos, com foco em "
    "proporcionar uma experiência única para cada cliente."
)


@dataclass
class AboutContent:
    """The about section: profile picture and story."""
    profile_image: str = ""
    my_story: str = DEFAULT_STORY
    id: Optional[str] = None


@dataclass
class SiteMedia:
    """Hero image, logos and site name."""
    principal_img_site: Optional[str] = None
    logotipo_img: Optional[str] = None
    logotipo_img_rodape: Optional[str] = None
    nome_site: Optional[str] = None


class SiteContent:
    """Read-only access to the site copy tables."""

    def __init__(self, store: DataStore):
        self.store = store

    async def fetch_about(self) -> AboutContent:
        """The about section, or the built-in copy when none is stored."""
        rows = await self.store.select("about_me", Query().limit(1))
        if not rows:
            return AboutContent()
        row = rows[0]
        return AboutContent(
            profile_image=row.get("profile_image") or "",
            my_story=row.get("my_story") or DEFAULT_STORY,
            id=str(row["id"]) if row.get("id") is not None else None,
        )

    async def fetch_launches(self) -> List[PropertyRecord]:
        """Launch properties, newest first."""
        rows = await self.store.select(
            "property_launch",
            Query().order("created_at", descending=True)
        )
        return [PropertyRecord.from_row(row) for row in rows]

    async def fetch_site_media(self) -> SiteMedia:
        """Site media, with every field None when the table is empty.

        Failures are logged and treated as "no media" so the page falls back
        to its defaults.
        """
        try:
            rows = await self.store.select("midias_site", Query().limit(1))
        except Exception as e:
            logger.error(f"Error fetching site media: {e}")
            return SiteMedia()
        if not rows:
            return SiteMedia()
        row = rows[0]
        return SiteMedia(
            principal_img_site=row.get("principal_img_site"),
            logotipo_img=row.get("logotipo_img"),
            logotipo_img_rodape=row.get("logotipo_img_rodape"),
            nome_site=row.get("nome_site"),
        )
