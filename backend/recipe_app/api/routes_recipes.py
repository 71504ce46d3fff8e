# recipe_app/api/routes_recipes.py
# Saved recipes: list / detail / save / favorite toggle / translate.
# All lookups are owner-scoped; someone else's id is a 404, never their data.

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.errors import PyMongoError

from recipe_app.core.deps import get_current_user, get_store, get_store_optional, get_translator
from recipe_app.db.models.schemas import (
    FavoriteToggleOut,
    RecipeIdIn,
    RecipeListOut,
    RecipeOut,
    SaveOut,
    TranslatedRecipeOut,
    TranslateIn,
    build_pagination,
    recipe_out_fields,
    to_recipe_out,
)
from recipe_app.db.store import RecipeStore, to_object_id
from recipe_app.services.identity import AuthUser
from recipe_app.services.translate import RecipeTranslator, TranslationNotConfigured
from recipe_app.services.webhook import UpstreamFailure

log = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])

MAX_LANGUAGE_LEN = 32


# ------------------------------
# helpers
# ------------------------------

def _require_recipe_id(recipe_id: Optional[str]) -> str:
    if not recipe_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Recipe ID is required")
    if to_object_id(recipe_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid recipe ID")
    return recipe_id


def _clean_language(language: Optional[str]) -> str:
    # used as a Mongo field name (translations.<language>)
    lang = (language or "").strip()
    if not lang or "." in lang or lang.startswith("$") or len(lang) > MAX_LANGUAGE_LEN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Language is required")
    return lang


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")


# ------------------------------
# endpoints
# ------------------------------

@router.get("", response_model=RecipeListOut)
async def list_recipes(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    filter: str = Query("all", description="all | favorites | recent"),
    user: AuthUser = Depends(get_current_user),
    store: Optional[RecipeStore] = Depends(get_store_optional),
):
    if store is None:
        return RecipeListOut(pagination=build_pagination(page, limit, 0, 0))
    try:
        docs, total = await store.list_recipes(user.id, page, limit, favorites_only=(filter == "favorites"))
    except PyMongoError as e:
        # listing degrades to an empty page
        log.warning("list recipes failed, returning empty page: %s", e)
        return RecipeListOut(pagination=build_pagination(page, limit, 0, 0))

    return RecipeListOut(
        recipes=[to_recipe_out(d) for d in docs],
        pagination=build_pagination(page, limit, total, len(docs)),
    )


@router.post("/save", response_model=SaveOut)
async def save_recipe(
    body: RecipeIdIn,
    user: AuthUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_store),
):
    rid = _require_recipe_id(body.recipeId)
    if not await store.mark_saved(rid, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found or not owned by user")
    return SaveOut()


@router.post("/toggle-favorite", response_model=FavoriteToggleOut)
async def toggle_favorite(
    body: RecipeIdIn,
    user: AuthUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_store),
):
    rid = _require_recipe_id(body.recipeId)
    is_favorite = await store.toggle_favorite(rid, user.id)
    if is_favorite is None:
        raise _not_found()
    return FavoriteToggleOut(
        isFavorite=is_favorite,
        message="Added to favorites" if is_favorite else "Removed from favorites",
    )


@router.post("/translate", response_model=TranslatedRecipeOut)
async def translate_recipe(
    body: TranslateIn,
    user: AuthUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_store),
    translator: RecipeTranslator = Depends(get_translator),
):
    rid = _require_recipe_id(body.recipeId)
    language = _clean_language(body.language)

    doc = await store.find_recipe(rid, user.id)
    if not doc:
        raise _not_found()

    translations = dict(doc.get("translations") or {})
    cached = translations.get(language)
    if cached:
        log.info("translation cache hit recipe=%s lang=%s", rid, language)
        return TranslatedRecipeOut(
            **{**recipe_out_fields(doc), **cached},
            currentLanguage=language,
            translations=translations,
        )

    try:
        translation = await translator.translate(doc, language)
    except TranslationNotConfigured as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except UpstreamFailure as e:
        log.warning("translation failed recipe=%s lang=%s: %s", rid, language, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Translation failed: {e}")

    await store.add_translation(rid, user.id, language, translation)
    translations[language] = translation.model_dump()

    return TranslatedRecipeOut(
        **{**recipe_out_fields(doc), **translation.model_dump()},
        currentLanguage=language,
        translations=translations,
    )


@router.get("/{rid}", response_model=RecipeOut)
async def get_recipe(
    rid: str,
    user: AuthUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_store),
):
    _require_recipe_id(rid)
    doc = await store.find_recipe(rid, user.id)
    if not doc:
        raise _not_found()
    return to_recipe_out(doc)
