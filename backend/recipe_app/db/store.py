# recipe_app/db/store.py
# Persistence adapter over the injected motor database.
# Every read/update is scoped by owner: a recipe id belonging to someone else behaves like a missing id.

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from recipe_app.db.models.recipe import HistoryDoc, RecipeDoc, RecipeTranslation

RECIPES = "recipes"
HISTORY = "userHistory"
RECENT_SEARCH_WINDOW = 20


def to_object_id(rid: Optional[str]) -> Optional[ObjectId]:
    if not rid or not ObjectId.is_valid(rid):
        return None
    return ObjectId(rid)


def page_skip(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


class RecipeStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.recipes = db[RECIPES]
        self.history = db[HISTORY]

    async def ping(self) -> None:
        await self.db.command("ping")

    # ------------------------------
    # writes
    # ------------------------------

    async def insert_recipe(self, doc: RecipeDoc) -> str:
        res = await self.recipes.insert_one(doc.model_dump())
        return str(res.inserted_id)

    async def insert_history(self, doc: HistoryDoc) -> str:
        res = await self.history.insert_one(doc.model_dump())
        return str(res.inserted_id)

    async def toggle_favorite(self, recipe_id: str, user_id: str) -> Optional[bool]:
        """Flip isFavorite in one round trip. None when the recipe is not the user's."""
        oid = to_object_id(recipe_id)
        if oid is None:
            return None
        doc = await self.recipes.find_one_and_update(
            {"_id": oid, "userId": user_id},
            [{"$set": {
                "isFavorite": {"$not": [{"$ifNull": ["$isFavorite", False]}]},
                "updatedAt": "$$NOW",
            }}],
            projection={"isFavorite": 1},
            return_document=ReturnDocument.AFTER,
        )
        return None if doc is None else bool(doc.get("isFavorite"))

    async def mark_saved(self, recipe_id: str, user_id: str) -> bool:
        oid = to_object_id(recipe_id)
        if oid is None:
            return False
        now = datetime.now(timezone.utc)
        res = await self.recipes.update_one(
            {"_id": oid, "userId": user_id},
            {"$set": {"isSaved": True, "savedAt": now, "updatedAt": now}},
        )
        return res.matched_count > 0

    async def add_translation(
        self, recipe_id: str, user_id: str, language: str, translation: RecipeTranslation
    ) -> bool:
        # dotted path: other languages stay untouched
        oid = to_object_id(recipe_id)
        if oid is None:
            return False
        res = await self.recipes.update_one(
            {"_id": oid, "userId": user_id},
            {"$set": {
                f"translations.{language}": translation.model_dump(),
                "updatedAt": datetime.now(timezone.utc),
            }},
        )
        return res.matched_count > 0

    # ------------------------------
    # reads
    # ------------------------------

    async def find_recipe(self, recipe_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        oid = to_object_id(recipe_id)
        if oid is None:
            return None
        return await self.recipes.find_one({"_id": oid, "userId": user_id})

    async def list_recipes(
        self, user_id: str, page: int = 1, limit: int = 20, favorites_only: bool = False
    ) -> Tuple[List[Dict[str, Any]], int]:
        query: Dict[str, Any] = {"userId": user_id}
        if favorites_only:
            query["isFavorite"] = True
        cursor = (
            self.recipes.find(query)
            .sort("createdAt", -1)
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        total = await self.recipes.count_documents(query)
        return docs, total

    async def recent_recipes(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        cursor = self.recipes.find({"userId": user_id}).sort("createdAt", -1).limit(limit)
        return await cursor.to_list(length=limit)

    async def list_history(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        query = {"userId": user_id}
        cursor = (
            self.history.find(query)
            .sort("timestamp", -1)
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        total = await self.history.count_documents(query)
        return docs, total

    async def dashboard_stats(self, user_id: str) -> Dict[str, int]:
        return {
            "totalRecipes": await self.recipes.count_documents({"userId": user_id}),
            "favoriteRecipes": await self.recipes.count_documents({"userId": user_id, "isFavorite": True}),
            "recentSearches": await self.history.count_documents(
                {"userId": user_id}, limit=RECENT_SEARCH_WINDOW
            ),
        }
