"""
Request dependencies: shared services held on app.state, and the admin guard.
"""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional

from realty_site.admin import AdminSession
from realty_site.config import SiteSettings
from realty_site.search import LocationSuggestionResolver, PropertyQueryComposer
from realty_site.store import DataStore


security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> SiteSettings:
    return request.app.state.settings


def get_store(request: Request) -> DataStore:
    store = request.app.state.store
    if store is None:
        raise RuntimeError("Store not initialized")
    return store


def get_admin_session(request: Request) -> AdminSession:
    return request.app.state.admin_session


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    admin: AdminSession = Depends(get_admin_session),
) -> AdminSession:
    """Allow the request only with the bearer token of the signed-in admin."""
    if not admin.is_authenticated:
        raise HTTPException(status_code=401, detail="Sessão de administrador necessária")
    session = admin.store.session
    if credentials is None or credentials.credentials != session.access_token:
        raise HTTPException(status_code=403, detail="Token inválido")
    return admin


def get_composer(request: Request) -> PropertyQueryComposer:
    return request.app.state.composer


def get_resolver(request: Request) -> LocationSuggestionResolver:
    return request.app.state.resolver
