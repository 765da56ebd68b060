"""
Admin routes: sign-in, property management and the about section.

Every route except login requires the bearer token returned by login.
"""

import base64
import binascii
import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List

from realty_site.admin import AboutAdmin, AdminSession, ImageUpload, PropertyAdmin
from realty_site.config import SiteSettings
from realty_site.error_handling import NotAuthorizedError, StoreError, ValidationError
from realty_site.api.dependencies import get_admin_session, get_settings, require_admin
from realty_site.api.models import AboutIn, AboutOut, LoginIn, LoginOut, PropertyIn, PropertyOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


def _property_admin(admin: AdminSession, settings: SiteSettings) -> PropertyAdmin:
    return PropertyAdmin(
        admin.store,
        admin,
        bucket=settings.store.image_bucket,
        max_images=settings.search.max_property_images,
    )


def _uploads(form: PropertyIn) -> List[ImageUpload]:
    uploads = []
    for upload in form.uploads:
        try:
            data = base64.b64decode(upload.data, validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=422, detail=f"Imagem inválida: {upload.filename}")
        uploads.append(ImageUpload(upload.filename, data, upload.content_type))
    return uploads


async def _save(form: PropertyIn, admin: AdminSession, settings: SiteSettings, property_id=None):
    property_admin = _property_admin(admin, settings)
    try:
        record = await property_admin.save(
            form.model_dump(exclude={"uploads"}),
            _uploads(form),
            property_id=property_id,
        )
    except ValidationError as e:
        status = 404 if property_id and str(e) == "Imóvel não encontrado" else 422
        raise HTTPException(status_code=status, detail=str(e))
    except StoreError as e:
        logger.error(f"Failed to save property: {e}")
        raise HTTPException(status_code=502, detail="Erro ao salvar imóvel")
    return PropertyOut.from_record(record, settings.store.url, settings.store.image_bucket)


@router.post("/login", response_model=LoginOut)
async def login(
    credentials: LoginIn,
    admin: AdminSession = Depends(get_admin_session),
):
    """Sign in as an admin and receive the bearer token for later calls."""
    try:
        session = await admin.sign_in(credentials.email, credentials.password)
    except NotAuthorizedError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except StoreError as e:
        logger.error(f"Admin role check failed: {e}")
        raise HTTPException(status_code=502, detail="Database error")
    return LoginOut(access_token=session.access_token, user_id=session.user_id)


@router.post("/logout", status_code=204)
async def logout(admin: AdminSession = Depends(require_admin)):
    await admin.sign_out()
    return Response(status_code=204)


@router.get("/properties", response_model=List[PropertyOut])
async def list_properties(
    admin: AdminSession = Depends(require_admin),
    settings: SiteSettings = Depends(get_settings),
):
    try:
        records = await _property_admin(admin, settings).list()
    except StoreError as e:
        logger.error(f"Failed to list properties: {e}")
        raise HTTPException(status_code=502, detail="Database error")
    return [
        PropertyOut.from_record(record, settings.store.url, settings.store.image_bucket)
        for record in records
    ]


@router.post("/properties", response_model=PropertyOut, status_code=201)
async def create_property(
    form: PropertyIn,
    admin: AdminSession = Depends(require_admin),
    settings: SiteSettings = Depends(get_settings),
):
    """Create a property, uploading any new images first."""
    return await _save(form, admin, settings)


@router.get("/properties/{property_id}", response_model=PropertyOut)
async def get_property(
    property_id: str,
    admin: AdminSession = Depends(require_admin),
    settings: SiteSettings = Depends(get_settings),
):
    try:
        record = await _property_admin(admin, settings).load(property_id)
    except StoreError as e:
        logger.error(f"Failed to load property {property_id}: {e}")
        raise HTTPException(status_code=502, detail="Database error")
    if record is None:
        raise HTTPException(status_code=404, detail="Imóvel não encontrado")
    return PropertyOut.from_record(record, settings.store.url, settings.store.image_bucket)


@router.put("/properties/{property_id}", response_model=PropertyOut)
async def update_property(
    property_id: str,
    form: PropertyIn,
    admin: AdminSession = Depends(require_admin),
    settings: SiteSettings = Depends(get_settings),
):
    return await _save(form, admin, settings, property_id=property_id)


@router.delete("/properties/{property_id}", status_code=204)
async def delete_property(
    property_id: str,
    admin: AdminSession = Depends(require_admin),
    settings: SiteSettings = Depends(get_settings),
):
    try:
        removed = await _property_admin(admin, settings).delete(property_id)
    except StoreError as e:
        logger.error(f"Failed to delete property {property_id}: {e}")
        raise HTTPException(status_code=502, detail="Database error")
    if not removed:
        raise HTTPException(status_code=404, detail="Imóvel não encontrado")
    return Response(status_code=204)


@router.put("/about", response_model=AboutOut)
async def update_about(
    about: AboutIn,
    admin: AdminSession = Depends(require_admin),
):
    try:
        content = await AboutAdmin(admin.store, admin).save(about.profile_image, about.my_story)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        logger.error(f"Failed to save about section: {e}")
        raise HTTPException(status_code=502, detail="Database error")
    return AboutOut(profile_image=content.profile_image, my_story=content.my_story)
