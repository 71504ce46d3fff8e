# Purpose: operator diagnostics for the generation pipeline
# GET  /debug/webhook → which provider/translation paths are configured (no secrets)
# POST /debug/webhook → send a sample recipe_generation payload (ENVIRONMENT=development only)

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from recipe_app.core.config import Settings
from recipe_app.core.deps import get_generator, get_settings
from recipe_app.db.models.schemas import RecipeRequestIn
from recipe_app.services.generator import RecipeGenerator
from recipe_app.services.normalize import WebhookResponseError, parse_webhook_body
from recipe_app.services.prompts import build_recipe_prompt
from recipe_app.services.webhook import UpstreamFailure, WebhookClient

router = APIRouter(prefix="/debug", tags=["debug"])

SAMPLE_REQUEST = {
    "ingredients": ["chicken", "rice"],
    "dietaryRestrictions": [],
    "cuisine": "Asian",
    "servings": 2,
    "difficulty": "easy",
    "cookingTime": 30,
}


@router.get("/webhook")
async def webhook_status(
    settings: Settings = Depends(get_settings),
    generator: RecipeGenerator = Depends(get_generator),
):
    return {
        "provider": generator.provider_name,
        "webhookConfigured": bool(settings.N8N_WEBHOOK_URL),
        "webhookTokenConfigured": bool(settings.N8N_WEBHOOK_TOKEN),
        "translationWebhookConfigured": bool(settings.translation_webhook_url),
        "openaiConfigured": bool(settings.OPENAI_API_KEY),
    }


@router.post("/webhook")
async def webhook_test(
    test_data: Optional[Dict[str, Any]] = Body(None, embed=True, alias="testData"),
    settings: Settings = Depends(get_settings),
):
    if not settings.is_development:
        raise HTTPException(status_code=404, detail="Not Found")
    if not settings.N8N_WEBHOOK_URL:
        return {"success": False, "error": "N8N_WEBHOOK_URL not configured"}

    req = RecipeRequestIn(**(test_data or SAMPLE_REQUEST))
    client = WebhookClient(
        settings.N8N_WEBHOOK_URL,
        token=settings.N8N_WEBHOOK_TOKEN,
        timeout=settings.WEBHOOK_TIMEOUT_SECONDS,
    )
    try:
        body = await client.post({
            "type": "recipe_generation",
            "data": req.model_dump(),
            "prompt": build_recipe_prompt(req),
        })
    except UpstreamFailure as e:
        return {"success": False, "error": str(e), "status": e.status}

    try:
        parsed = parse_webhook_body(body)
    except WebhookResponseError as e:
        return {"success": False, "error": str(e), "rawResponse": body[:2000]}
    return {"success": True, "response": parsed}
