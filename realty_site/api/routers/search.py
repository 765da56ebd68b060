"""
Search routes: property search and location suggestions.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from realty_site.config import SiteSettings
from realty_site.error_handling import CriteriaError
from realty_site.models import SearchCriteria
from realty_site.search import (
    LocationSuggestionResolver,
    PropertyQueryComposer,
    SEARCH_ERROR_MESSAGE,
    not_found_message,
)
from realty_site.api.dependencies import get_composer, get_resolver, get_settings
from realty_site.api.models import (
    LocationSuggestionOut,
    PropertyOut,
    SearchQuery,
    SearchResult,
    SuggestionResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=SearchResult)
async def search_properties(
    query: SearchQuery,
    composer: PropertyQueryComposer = Depends(get_composer),
    settings: SiteSettings = Depends(get_settings),
):
    """
    Search properties with the hero form fields.

    1. Parses the form fields into criteria
    2. Runs the composed query
    3. Publishes the results to subscribed listing panels
    4. Returns results, or a not-found message when there are none
    """
    try:
        criteria = SearchCriteria.from_form(query.model_dump())
    except CriteriaError as e:
        raise HTTPException(status_code=422, detail=str(e))

    outcome = await composer.search(criteria)
    if not outcome.ok:
        raise HTTPException(status_code=502, detail=SEARCH_ERROR_MESSAGE)

    results = [
        PropertyOut.from_record(record, settings.store.url, settings.store.image_bucket)
        for record in outcome.records
    ]
    return SearchResult(
        results=results,
        total_count=len(results),
        searchParams=SearchQuery(**criteria.to_form()),
        message=None if results else not_found_message(criteria.location),
    )


@router.get("/locations/suggest", response_model=SuggestionResult)
async def suggest_locations(
    q: str = Query("", description="Location text typed so far"),
    resolver: LocationSuggestionResolver = Depends(get_resolver),
):
    """
    Suggest locations for partial input.

    Short input and lookup failures both yield an empty list.
    """
    suggestions = await resolver.resolve(q)
    return SuggestionResult(
        query=q,
        suggestions=[
            LocationSuggestionOut(label=label, **suggestion.to_dict())
            for label, suggestion in suggestions.items()
        ],
    )
