"""
REST client for the hosted backend.

Talks to the PostgREST table API (``/rest/v1``), the auth API
(``/auth/v1``) and the storage API (``/storage/v1``) over aiohttp.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import aiohttp

from realty_site.error_handling import StoreError
from .base import AuthSession, DataStore
from .query import Query


logger = logging.getLogger(__name__)


class RestDataStore(DataStore):
    """
    Hosted backend client over HTTP.

    Requests are sent with the project's anon key; once someone signs in on
    this instance, the session's access token replaces it as the bearer
    token. Use fork() to sign in without affecting anonymous callers.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout_seconds: float = 15.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        super().__init__(base_url)
        if not anon_key:
            raise ValueError("Store credentials not configured. Set STORE_ANON_KEY in .env")

        self.anon_key = anon_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._http: Optional[aiohttp.ClientSession] = session

    async def __aenter__(self):
        await self._ensure_http()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Explicitly close the HTTP session when done"""
        if self._http and not self._http.closed:
            await self._http.close()
            self._http = None

    async def _ensure_http(self):
        """Ensure we have an open HTTP session"""
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession(timeout=self.timeout)

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        token = self.anon_key
        if self.session and not self.session.is_expired():
            token = self.session.access_token
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Any = None,
        json: Any = None,
        data: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """Send a request and decode the JSON reply.

        Raises:
            StoreError: On a non-2xx response or a transport failure
        """
        await self._ensure_http()
        url = f"{self.base_url}{path}"

        try:
            async with self._http.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=self._headers(headers)
            ) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    logger.error(f"{method} {path} failed: {response.status} - {error_text}")
                    raise StoreError(error_text, status=response.status)

                if response.status == 204:
                    return None
                text = await response.text()
                if not text:
                    return None
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{method} {path} transport error: {e}")
            raise StoreError(str(e)) from e

    async def select(self, table: str, query: Optional[Query] = None) -> List[Dict[str, Any]]:
        query = query or Query()
        logger.debug(f"SELECT {table} {query.to_params()}")
        rows = await self._request("GET", f"/rest/v1/{table}", params=query.to_params())
        return rows or []

    async def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        rows = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            headers={"Prefer": "return=representation"}
        )
        return rows or []

    async def update(self, table: str, values: Dict[str, Any], query: Query) -> List[Dict[str, Any]]:
        if query.is_unfiltered:
            raise StoreError(f"Refusing to update every row of {table}")
        params = [p for p in query.to_params() if p[0] != "select"]
        rows = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=representation"}
        )
        return rows or []

    async def delete(self, table: str, query: Query) -> List[Dict[str, Any]]:
        if query.is_unfiltered:
            raise StoreError(f"Refusing to delete every row of {table}")
        params = [p for p in query.to_params() if p[0] != "select"]
        rows = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=params,
            headers={"Prefer": "return=representation"}
        )
        return rows or []

    async def sign_in(self, email: str, password: str) -> AuthSession:
        result = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password}
        )
        user = result.get("user") or {}
        expires_in = int(result.get("expires_in", 3600))
        self.session = AuthSession(
            access_token=result["access_token"],
            user_id=str(user.get("id", "")),
            email=user.get("email", email),
            expires_at=datetime.now() + timedelta(seconds=expires_in),
        )
        logger.info(f"Signed in as {self.session.email}")
        return self.session

    async def sign_out(self) -> None:
        if self.session is None:
            return
        try:
            await self._request("POST", "/auth/v1/logout")
        finally:
            self.session = None

    def fork(self) -> 'RestDataStore':
        return RestDataStore(self.base_url, self.anon_key, timeout_seconds=self.timeout.total)

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        await self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{path.lstrip('/')}",
            data=data,
            headers={"Content-Type": content_type}
        )
        return path
