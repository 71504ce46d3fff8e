# recipe_app/services/identity.py
# Bearer token → user, delegated to the hosted identity service (Supabase auth REST).

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

log = logging.getLogger(__name__)


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None


class InvalidToken(Exception):
    pass


class IdentityClient:
    def __init__(
        self,
        base_url: Optional[str],
        anon_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport

    async def get_user(self, token: str) -> AuthUser:
        if not token:
            raise InvalidToken("missing token")
        if not self.base_url:
            log.error("SUPABASE_URL not set; every request is rejected")
            raise InvalidToken("identity service not configured")

        headers = {"Authorization": f"Bearer {token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as cli:
                r = await cli.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            log.warning("identity service unreachable: %s", e)
            raise InvalidToken("identity service unreachable") from e

        if r.status_code != 200:
            raise InvalidToken(f"identity service rejected token ({r.status_code})")

        try:
            data = r.json()
        except ValueError as e:
            raise InvalidToken("identity service returned invalid JSON") from e

        uid = data.get("id") if isinstance(data, dict) else None
        if not uid:
            raise InvalidToken("identity payload without user id")
        return AuthUser(id=str(uid), email=data.get("email"))
