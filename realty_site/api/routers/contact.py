"""
Contact form route.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from realty_site.error_handling import StoreError, ValidationError
from realty_site.site import ContactForm, ContactRequest
from realty_site.site.contact import SUBMIT_ERROR_MESSAGE
from realty_site.store import DataStore
from realty_site.api.dependencies import get_store
from realty_site.api.models import ContactIn

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/contact", status_code=201)
async def submit_contact(
    contact: ContactIn,
    store: DataStore = Depends(get_store),
):
    """Store a contact request, optionally with a visit appointment."""
    try:
        await ContactForm(store).submit(ContactRequest(**contact.model_dump()))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        logger.error(f"Failed to store contact request: {e}")
        raise HTTPException(status_code=502, detail=SUBMIT_ERROR_MESSAGE)
    return {"status": "pending"}
