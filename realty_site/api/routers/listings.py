"""
Public listing and site content routes.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from realty_site.config import SiteSettings
from realty_site.error_handling import StoreError
from realty_site.listings import LaunchDisplay, LocationSearchResults, load_featured
from realty_site.listings.display import LAUNCH_LOAD_ERROR_MESSAGE, LOAD_ERROR_MESSAGE
from realty_site.site import SiteContent
from realty_site.store import DataStore
from realty_site.api.dependencies import get_settings, get_store
from realty_site.api.models import AboutOut, PropertyOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _out(records, settings: SiteSettings) -> List[PropertyOut]:
    return [
        PropertyOut.from_record(record, settings.store.url, settings.store.image_bucket)
        for record in records
    ]


@router.get("/properties/featured", response_model=List[PropertyOut])
async def featured_properties(
    store: DataStore = Depends(get_store),
    settings: SiteSettings = Depends(get_settings),
):
    """Featured properties, or the most recent ones when none are featured."""
    try:
        records = await load_featured(store, settings.search.featured_fallback_limit)
    except StoreError as e:
        logger.error(f"Failed to load featured properties: {e}")
        raise HTTPException(status_code=502, detail=LOAD_ERROR_MESSAGE)
    return _out(records, settings)


@router.get("/properties/by-location", response_model=List[PropertyOut])
async def properties_by_location(
    location: str = Query(..., min_length=1),
    store: DataStore = Depends(get_store),
    settings: SiteSettings = Depends(get_settings),
):
    """Every property matching a location label."""
    results = LocationSearchResults(store)
    records = await results.fetch(location)
    if results.error_message:
        raise HTTPException(status_code=502, detail=results.error_message)
    return _out(records, settings)


@router.get("/launches", response_model=List[PropertyOut])
async def launches(
    store: DataStore = Depends(get_store),
    settings: SiteSettings = Depends(get_settings),
):
    """Launch properties, newest first."""
    display = LaunchDisplay(store)
    await display.mount()
    if display.error_message:
        raise HTTPException(status_code=502, detail=LAUNCH_LOAD_ERROR_MESSAGE)
    return _out(display.records, settings)


@router.get("/about", response_model=AboutOut)
async def about(store: DataStore = Depends(get_store)):
    """The about section."""
    try:
        content = await SiteContent(store).fetch_about()
    except StoreError as e:
        logger.error(f"Failed to load about section: {e}")
        raise HTTPException(status_code=502, detail="Database error")
    return AboutOut(profile_image=content.profile_image, my_story=content.my_story)
