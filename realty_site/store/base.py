"""
Interface to the external hosted backend.

Everything the site persists goes through a DataStore: table reads and
writes, password sign-in for the admin, and image storage.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .query import Query


@dataclass
class AuthSession:
    """An authenticated store session.

    Attributes:
        access_token: Bearer token sent with subsequent requests
        user_id: Identifier of the signed-in user
        email: E-mail the user signed in with
        expires_at: When the access token stops being accepted
    """
    access_token: str
    user_id: str
    email: Optional[str] = None
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now()) >= self.expires_at


class DataStore(ABC):
    """Abstract client for the hosted backend.

    Attributes:
        base_url: Root URL of the backend, used to build public storage URLs
    """

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.session: Optional[AuthSession] = None

    @abstractmethod
    async def select(self, table: str, query: Optional[Query] = None) -> List[Dict[str, Any]]:
        """Return the rows of ``table`` matching ``query``."""

    @abstractmethod
    async def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert one row and return the stored representation."""

    @abstractmethod
    async def update(self, table: str, values: Dict[str, Any], query: Query) -> List[Dict[str, Any]]:
        """Update matching rows and return them."""

    @abstractmethod
    async def delete(self, table: str, query: Query) -> List[Dict[str, Any]]:
        """Delete matching rows and return them."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Authenticate with e-mail and password."""

    @abstractmethod
    async def sign_out(self) -> None:
        """Drop the current session."""

    @abstractmethod
    def fork(self) -> 'DataStore':
        """A store over the same backend that keeps its own sign-in session."""

    @abstractmethod
    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store a file and return its path inside the bucket."""

    async def close(self) -> None:
        """Release network resources."""

    def public_url(self, bucket: str, path: str) -> str:
        """Public URL of a stored object."""
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path.lstrip('/')}"
