# recipe_app/db/models/schemas.py
# API request/response models
# RecipeRequestIn: generation form, clamped server-side the same way the client form clamps
# RecipeOut / RecipeListOut: what the frontend renders
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from recipe_app.db.models.recipe import Difficulty, RecipeTranslation

SERVINGS_MIN, SERVINGS_MAX = 1, 20
COOK_MIN, COOK_MAX = 5, 480
DIFFICULTIES = ("easy", "medium", "hard")


def _clamp_int(v: Any, lo: int, hi: int, default: int) -> int:
    try:
        f = float(v)
    except OverflowError:
        # int too large for a float
        f = math.inf if v > 0 else -math.inf
    except (TypeError, ValueError):
        return default
    if math.isnan(f):
        return default
    if math.isinf(f):
        return hi if f > 0 else lo
    return max(lo, min(hi, int(f)))


def _clean_strings(v: Any) -> List[str]:
    # accepts "a, b" strings too; drops blanks and duplicates, order kept
    if isinstance(v, str):
        v = v.split(",")
    if not isinstance(v, (list, tuple)):
        return []
    out: List[str] = []
    for s in v:
        if not isinstance(s, str):
            continue
        s = s.strip()
        if s and s not in out:
            out.append(s)
    return out


class RecipeRequestIn(BaseModel):
    ingredients: List[str] = Field(default_factory=list)
    dietaryRestrictions: List[str] = Field(default_factory=list)
    cuisine: Optional[str] = None
    servings: int = 4
    difficulty: Difficulty = "medium"
    cookingTime: int = 30

    @field_validator("ingredients", "dietaryRestrictions", mode="before")
    @classmethod
    def _strings(cls, v: Any) -> List[str]:
        return _clean_strings(v)

    @field_validator("cuisine", mode="before")
    @classmethod
    def _cuisine(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("servings", mode="before")
    @classmethod
    def _servings(cls, v: Any) -> int:
        return _clamp_int(v, SERVINGS_MIN, SERVINGS_MAX, 4)

    @field_validator("cookingTime", mode="before")
    @classmethod
    def _cooking_time(cls, v: Any) -> int:
        return _clamp_int(v, COOK_MIN, COOK_MAX, 30)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty(cls, v: Any) -> str:
        v = v.strip().lower() if isinstance(v, str) else v
        return v if v in DIFFICULTIES else "medium"


class RecipeIdIn(BaseModel):
    recipeId: Optional[str] = None


class TranslateIn(BaseModel):
    recipeId: Optional[str] = None
    language: Optional[str] = None


class RecipeOut(BaseModel):
    id: str
    title: str
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prepTime: Optional[int] = None
    cookTime: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    cuisine: Optional[str] = None
    dietaryRestrictions: List[str] = Field(default_factory=list)
    isFavorite: bool = False
    isSaved: bool = False
    aiGenerated: bool = True
    originalLanguage: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class GeneratedRecipeOut(RecipeOut):
    tips: Optional[str] = None
    provider: str
    persisted: bool = True


class TranslatedRecipeOut(RecipeOut):
    currentLanguage: str
    translations: Dict[str, RecipeTranslation] = Field(default_factory=dict)


class PaginationOut(BaseModel):
    page: int
    limit: int
    totalCount: int = 0
    totalPages: int = 0
    hasMore: bool = False


class RecipeListOut(BaseModel):
    recipes: List[RecipeOut] = Field(default_factory=list)
    pagination: PaginationOut


class HistoryItemOut(BaseModel):
    id: str
    searchQuery: str
    ingredients: List[str] = Field(default_factory=list)
    dietaryRestrictions: List[str] = Field(default_factory=list)
    generatedRecipeId: Optional[str] = None
    timestamp: Optional[datetime] = None


class HistoryListOut(BaseModel):
    history: List[HistoryItemOut] = Field(default_factory=list)
    pagination: PaginationOut


class FavoriteToggleOut(BaseModel):
    success: bool = True
    isFavorite: bool
    message: str


class SaveOut(BaseModel):
    success: bool = True
    message: str = "Recipe saved successfully"


class RecipeSummaryOut(BaseModel):
    id: str
    title: str
    servings: Optional[int] = None
    difficulty: Optional[str] = None
    cuisine: Optional[str] = None
    isFavorite: bool = False
    createdAt: Optional[datetime] = None


class DashboardStatsOut(BaseModel):
    totalRecipes: int = 0
    favoriteRecipes: int = 0
    recentSearches: int = 0


class DashboardOut(BaseModel):
    recentRecipes: List[RecipeSummaryOut] = Field(default_factory=list)
    stats: DashboardStatsOut


# ------------------------------
# document → response helpers
# ------------------------------

def recipe_out_fields(doc: Dict[str, Any]) -> Dict[str, Any]:
    # _id(ObjectId) → id string; userId never leaves the API, translations are returned explicitly
    out = {k: v for k, v in doc.items() if k not in ("_id", "userId", "translations")}
    out["id"] = str(doc.get("_id") or doc.get("id") or "")
    return out


def to_recipe_out(doc: Dict[str, Any]) -> RecipeOut:
    return RecipeOut(**recipe_out_fields(doc))


def to_history_out(doc: Dict[str, Any]) -> HistoryItemOut:
    return HistoryItemOut(
        id=str(doc.get("_id") or ""),
        searchQuery=doc.get("searchQuery") or "",
        ingredients=doc.get("ingredients") or [],
        dietaryRestrictions=doc.get("dietaryRestrictions") or [],
        generatedRecipeId=doc.get("generatedRecipeId"),
        timestamp=doc.get("timestamp"),
    )


def build_pagination(page: int, limit: int, total: int, returned: int) -> PaginationOut:
    skip = (page - 1) * limit
    return PaginationOut(
        page=page,
        limit=limit,
        totalCount=total,
        totalPages=math.ceil(total / limit) if limit else 0,
        hasMore=skip + returned < total,
    )
