# recipe_app/services/webhook.py
# Outbound calls to the user-configured workflow webhook (n8n).
# Depends: httpx. No retry; a failed call surfaces immediately.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

log = logging.getLogger(__name__)

BODY_PREVIEW = 500


class UpstreamFailure(Exception):
    """Webhook / LLM call failed or answered with something unusable."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class WebhookClient:
    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def post(self, payload: Dict[str, Any]) -> str:
        """POST the payload, return the raw body. Non-2xx and transport errors raise UpstreamFailure."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as cli:
                r = await cli.post(self.url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            log.warning("webhook call failed type=%s: %s", payload.get("type"), e)
            raise UpstreamFailure(f"webhook unreachable: {e.__class__.__name__}: {e}") from e

        body = r.text
        log.info("webhook type=%s status=%s bytes=%d", payload.get("type"), r.status_code, len(body))
        if not r.is_success:
            raise UpstreamFailure(
                f"webhook failed with status {r.status_code}: {body[:BODY_PREVIEW]}",
                status=r.status_code,
            )
        return body
