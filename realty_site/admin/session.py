"""
Admin session: sign-in restricted to users whose profile role is "admin".
"""

import logging
from typing import Optional

from realty_site.error_handling import NotAuthorizedError, StoreError
from realty_site.store import AuthSession, DataStore, Query


logger = logging.getLogger(__name__)


class AdminSession:
    """Tracks whether an admin is signed in to the store."""

    def __init__(self, store: DataStore):
        self.store = store
        self._admin_user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        session = self.store.session
        return (
            session is not None
            and not session.is_expired()
            and session.user_id == self._admin_user_id
        )

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in and confirm the user has the admin role.

        Raises:
            NotAuthorizedError: On bad credentials or a non-admin user
        """
        try:
            session = await self.store.sign_in(email, password)
        except StoreError as e:
            logger.warning(f"Admin sign-in failed for {email}: {e}")
            raise NotAuthorizedError("E-mail ou senha inválidos") from e

        profiles = await self.store.select(
            "profiles",
            Query("role").eq("id", session.user_id).limit(1)
        )
        if not profiles or profiles[0].get("role") != "admin":
            logger.warning(f"User {email} is not an admin; signing out")
            await self.store.sign_out()
            raise NotAuthorizedError("Acesso restrito a administradores")

        self._admin_user_id = session.user_id
        logger.info(f"Admin {email} signed in")
        return session

    async def sign_out(self) -> None:
        self._admin_user_id = None
        await self.store.sign_out()

    def require(self) -> None:
        """Raise NotAuthorizedError unless an admin is signed in."""
        if not self.is_authenticated:
            raise NotAuthorizedError("Sessão de administrador necessária")
