# recipe_app/services/llm_openai.py
# Recipe generation through OpenAI chat completions
# - JSON mode only (response_format=json_object)
# - the message content goes through the same normalizer as the webhook body

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from recipe_app.services.normalize import WebhookResponseError, extract_recipe_payload
from recipe_app.services.prompts import SYSTEM_PROMPT
from recipe_app.services.webhook import UpstreamFailure

log = logging.getLogger(__name__)


class LLMNotReady(Exception):
    # no API key configured
    pass


class OpenAIRecipeClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-3.5-turbo",
        client: Optional[AsyncOpenAI] = None,
    ):
        if client is None and not api_key:
            raise LLMNotReady("OPENAI_API_KEY not set")
        self.model = model
        self._client = client or AsyncOpenAI(api_key=api_key)

    async def complete(self, prompt: str) -> Dict[str, Any]:
        try:
            chat = await self._client.chat.completions.create(
                model=self.model,
                temperature=0.7,
                max_tokens=1500,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            log.exception("OpenAI chat completion failed")
            raise UpstreamFailure(f"openai request failed: {e}") from e

        text = chat.choices[0].message.content if chat and chat.choices else ""
        try:
            return extract_recipe_payload(text)
        except WebhookResponseError as e:
            log.warning("OpenAI returned unusable content: %s", e)
            raise UpstreamFailure(f"openai returned an unusable recipe: {e}") from e
