# recipe_app/services/translate.py
# Recipe translation through the workflow webhook only (no local fallback).

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from recipe_app.core.config import Settings
from recipe_app.db.models.recipe import RecipeTranslation
from recipe_app.services.normalize import (
    WebhookResponseError,
    extract_translation_payload,
    to_translation,
)
from recipe_app.services.webhook import UpstreamFailure, WebhookClient

log = logging.getLogger(__name__)

SOURCE_LANGUAGE = "english"


class TranslationNotConfigured(Exception):
    pass


class RecipeTranslator:
    def __init__(self, client: Optional[WebhookClient]):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecipeTranslator":
        url = settings.translation_webhook_url
        if not url:
            return cls(None)
        return cls(WebhookClient(url, token=settings.N8N_WEBHOOK_TOKEN, timeout=settings.WEBHOOK_TIMEOUT_SECONDS))

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def translate(self, recipe: Mapping[str, Any], language: str) -> RecipeTranslation:
        if self.client is None:
            raise TranslationNotConfigured(
                "Translation service not configured. Set N8N_TRANSLATION_WEBHOOK or N8N_WEBHOOK_URL."
            )

        source = {
            "title": recipe.get("title") or "",
            "ingredients": list(recipe.get("ingredients") or []),
            "instructions": list(recipe.get("instructions") or []),
        }
        log.info("translating recipe title=%r to %s", source["title"], language)
        body = await self.client.post({
            "type": "recipe_translation",
            "recipe": source,
            "targetLanguage": language,
            "sourceLanguage": SOURCE_LANGUAGE,
        })
        try:
            payload = extract_translation_payload(body)
        except WebhookResponseError as e:
            raise UpstreamFailure(f"translation webhook returned unusable data: {e}") from e
        return to_translation(payload, source)
