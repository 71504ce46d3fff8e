# Stored document shapes for the recipes / userHistory collections.
# Field names stay camelCase so documents written by the web client's API remain readable.
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecipeTranslation(BaseModel):
    title: str
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)


class CanonicalRecipe(BaseModel):
    """Normalized generator output, independent of which upstream shape produced it."""

    title: str
    description: str = ""
    ingredients: List[str]
    instructions: List[str]
    prepTime: Optional[int] = None
    cookTime: Optional[int] = None
    tips: Optional[str] = None


class RecipeDoc(BaseModel):
    userId: str
    title: str
    description: str = ""
    ingredients: List[str]
    instructions: List[str]
    prepTime: Optional[int] = None
    cookTime: Optional[int] = None
    servings: int = Field(4, ge=1, le=20)
    difficulty: Difficulty = "medium"
    cuisine: Optional[str] = None
    dietaryRestrictions: List[str] = Field(default_factory=list)
    tips: Optional[str] = None
    isFavorite: bool = False
    isSaved: bool = False
    savedAt: Optional[datetime] = None
    aiGenerated: bool = True
    originalLanguage: str = "english"
    translations: Dict[str, RecipeTranslation] = Field(default_factory=dict)
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)


class HistoryDoc(BaseModel):
    userId: str
    searchQuery: str
    ingredients: List[str] = Field(default_factory=list)
    dietaryRestrictions: List[str] = Field(default_factory=list)
    generatedRecipeId: str
    timestamp: datetime = Field(default_factory=utcnow)
