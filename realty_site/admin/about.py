"""
Admin editing of the about section.
"""

import logging

from realty_site.error_handling import ValidationError
from realty_site.site import AboutContent, SiteContent
from realty_site.store import DataStore, Query
from .properties import is_absolute_url, REQUIRED_MESSAGE
from .session import AdminSession


logger = logging.getLogger(__name__)


class AboutAdmin:
    """Loads and saves the single ``about_me`` row."""

    TABLE = "about_me"

    def __init__(self, store: DataStore, session: AdminSession):
        self.store = store
        self.session = session

    async def load(self) -> AboutContent:
        self.session.require()
        return await SiteContent(self.store).fetch_about()

    async def save(self, profile_image: str, my_story: str) -> AboutContent:
        """Update the existing row, or insert one if there is none.

        Raises:
            ValidationError: If a field is blank or the image is not a URL
        """
        self.session.require()
        profile_image = (profile_image or "").strip()
        my_story = (my_story or "").strip()

        if not profile_image or not my_story:
            raise ValidationError(REQUIRED_MESSAGE)
        if not is_absolute_url(profile_image):
            raise ValidationError("URL da imagem de perfil inválida")

        values = {"profile_image": profile_image, "my_story": my_story}
        existing = await self.store.select(self.TABLE, Query("id").limit(1))

        if existing:
            about_id = existing[0]["id"]
            await self.store.update(self.TABLE, values, Query().eq("id", about_id))
            logger.info("Updated about section")
        else:
            rows = await self.store.insert(self.TABLE, values)
            about_id = rows[0]["id"] if rows else None
            logger.info("Created about section")

        return AboutContent(
            profile_image=profile_image,
            my_story=my_story,
            id=str(about_id) if about_id is not None else None,
        )
