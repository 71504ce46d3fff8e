# recipe_app/services/generator.py
# Recipe generation adapter: prompt → provider → normalized record.
#
# Provider priority: webhook → OpenAI → mock. The choice is made once from
# configuration; a failing provider raises UpstreamFailure instead of
# silently falling through to the next one.

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol, Tuple

from recipe_app.core.config import Settings
from recipe_app.db.models.recipe import CanonicalRecipe
from recipe_app.db.models.schemas import RecipeRequestIn
from recipe_app.services.llm_openai import OpenAIRecipeClient
from recipe_app.services.mock_recipe import generate_mock_recipe
from recipe_app.services.normalize import (
    WebhookResponseError,
    extract_recipe_payload,
    to_canonical_recipe,
)
from recipe_app.services.prompts import build_recipe_prompt
from recipe_app.services.webhook import UpstreamFailure, WebhookClient

log = logging.getLogger(__name__)


class RecipeProvider(Protocol):
    name: str

    async def fetch(self, req: RecipeRequestIn, prompt: str) -> Dict[str, Any]:
        ...


class WebhookProvider:
    name = "webhook"

    def __init__(self, client: WebhookClient):
        self.client = client

    async def fetch(self, req: RecipeRequestIn, prompt: str) -> Dict[str, Any]:
        body = await self.client.post({
            "type": "recipe_generation",
            "data": req.model_dump(),
            "prompt": prompt,
        })
        try:
            return extract_recipe_payload(body)
        except WebhookResponseError as e:
            raise UpstreamFailure(f"webhook returned an unusable recipe: {e}") from e


class OpenAIProvider:
    name = "openai"

    def __init__(self, client: OpenAIRecipeClient):
        self.client = client

    async def fetch(self, req: RecipeRequestIn, prompt: str) -> Dict[str, Any]:
        return await self.client.complete(prompt)


class MockProvider:
    name = "mock"

    async def fetch(self, req: RecipeRequestIn, prompt: str) -> Dict[str, Any]:
        return generate_mock_recipe(req)


def select_provider(settings: Settings) -> RecipeProvider:
    if settings.N8N_WEBHOOK_URL:
        return WebhookProvider(WebhookClient(
            settings.N8N_WEBHOOK_URL,
            token=settings.N8N_WEBHOOK_TOKEN,
            timeout=settings.WEBHOOK_TIMEOUT_SECONDS,
        ))
    if settings.OPENAI_API_KEY:
        return OpenAIProvider(OpenAIRecipeClient(settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL))
    log.warning("no webhook or OpenAI key configured; recipes will come from the local template")
    return MockProvider()


class RecipeGenerator:
    def __init__(self, provider: RecipeProvider):
        self.provider = provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecipeGenerator":
        return cls(select_provider(settings))

    @property
    def provider_name(self) -> str:
        return self.provider.name

    async def generate(self, req: RecipeRequestIn) -> Tuple[CanonicalRecipe, str]:
        prompt = build_recipe_prompt(req)
        payload = await self.provider.fetch(req, prompt)
        recipe = to_canonical_recipe(payload, req)
        log.info(
            "recipe generated provider=%s title=%r ingredients=%d steps=%d",
            self.provider.name, recipe.title, len(recipe.ingredients), len(recipe.instructions),
        )
        return recipe, self.provider.name
