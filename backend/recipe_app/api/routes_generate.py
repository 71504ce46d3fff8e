# recipe_app/api/routes_generate.py
# ingredients + preferences → generator → recipes / userHistory → response

from __future__ import annotations

import logging
import uuid
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import PyMongoError

from recipe_app.core.deps import get_current_user, get_generator, get_store_optional
from recipe_app.db.models.recipe import HistoryDoc, RecipeDoc
from recipe_app.db.models.schemas import GeneratedRecipeOut, RecipeRequestIn
from recipe_app.db.store import RecipeStore
from recipe_app.services.generator import RecipeGenerator
from recipe_app.services.identity import AuthUser
from recipe_app.services.webhook import UpstreamFailure

log = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


def temp_recipe_id() -> str:
    return f"temp_{uuid.uuid4().hex}"


def search_query(req: RecipeRequestIn) -> str:
    return f"{', '.join(req.ingredients)} - {req.cuisine or 'Any cuisine'}"


async def persist_generation(
    store: Optional[RecipeStore], doc: RecipeDoc, req: RecipeRequestIn
) -> Tuple[str, bool]:
    """
    recipe first, then history.
    - store down: temporary id, persisted=False (the caller still gets the recipe)
    - history failure: logged and dropped, the recipe stays
    """
    if store is None:
        log.warning("persistence degraded: no database, returning temporary id")
        return temp_recipe_id(), False

    try:
        rid = await store.insert_recipe(doc)
    except PyMongoError as e:
        log.warning("persistence degraded: recipe insert failed: %s", e)
        return temp_recipe_id(), False

    try:
        await store.insert_history(HistoryDoc(
            userId=doc.userId,
            searchQuery=search_query(req),
            ingredients=req.ingredients,
            dietaryRestrictions=req.dietaryRestrictions,
            generatedRecipeId=rid,
        ))
    except PyMongoError:
        log.exception("history insert failed for recipe %s", rid)
    return rid, True


@router.post("/generate-recipe", response_model=GeneratedRecipeOut)
async def generate_recipe(
    payload: RecipeRequestIn,
    user: AuthUser = Depends(get_current_user),
    generator: RecipeGenerator = Depends(get_generator),
    store: Optional[RecipeStore] = Depends(get_store_optional),
):
    if not payload.ingredients:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ingredients are required")

    try:
        recipe, provider = await generator.generate(payload)
    except UpstreamFailure as e:
        log.warning("recipe generation failed provider=%s: %s", generator.provider_name, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to generate recipe: {e}")

    doc = RecipeDoc(
        userId=user.id,
        **recipe.model_dump(),
        servings=payload.servings,
        difficulty=payload.difficulty,
        cuisine=payload.cuisine,
        dietaryRestrictions=payload.dietaryRestrictions,
    )
    rid, persisted = await persist_generation(store, doc, payload)

    return GeneratedRecipeOut(
        id=rid,
        provider=provider,
        persisted=persisted,
        **doc.model_dump(exclude={"userId", "translations"}),
    )
