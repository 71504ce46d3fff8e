import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from recipe_app.core.config import Settings
from recipe_app.core.deps import get_current_user
from recipe_app.db.models.recipe import HistoryDoc, RecipeDoc, RecipeTranslation
from recipe_app.db.store import page_skip
from recipe_app.main import create_app
from recipe_app.services.identity import AuthUser

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class FakeStore:
    """In-memory stand-in for RecipeStore with the same coroutine surface."""

    def __init__(self):
        self.recipes: Dict[str, Dict[str, Any]] = {}
        self.history: List[Dict[str, Any]] = []
        self.fail_recipe_insert = False
        self.fail_history_insert = False
        self.fail_reads = False

    async def ping(self) -> None:
        return None

    async def insert_recipe(self, doc: RecipeDoc) -> str:
        if self.fail_recipe_insert:
            raise ServerSelectionTimeoutError("store unreachable")
        oid = ObjectId()
        data = doc.model_dump()
        data["_id"] = oid
        self.recipes[str(oid)] = data
        return str(oid)

    async def insert_history(self, doc: HistoryDoc) -> str:
        if self.fail_history_insert:
            raise PyMongoError("history write failed")
        oid = ObjectId()
        data = doc.model_dump()
        data["_id"] = oid
        self.history.append(data)
        return str(oid)

    def _owned(self, recipe_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.recipes.get(recipe_id)
        if doc is None or doc["userId"] != user_id:
            return None
        return doc

    async def find_recipe(self, recipe_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self._owned(recipe_id, user_id)
        return copy.deepcopy(doc) if doc else None

    async def toggle_favorite(self, recipe_id: str, user_id: str) -> Optional[bool]:
        doc = self._owned(recipe_id, user_id)
        if doc is None:
            return None
        doc["isFavorite"] = not doc.get("isFavorite", False)
        return doc["isFavorite"]

    async def mark_saved(self, recipe_id: str, user_id: str) -> bool:
        doc = self._owned(recipe_id, user_id)
        if doc is None:
            return False
        doc["isSaved"] = True
        doc["savedAt"] = datetime.now(timezone.utc)
        return True

    async def add_translation(
        self, recipe_id: str, user_id: str, language: str, translation: RecipeTranslation
    ) -> bool:
        doc = self._owned(recipe_id, user_id)
        if doc is None:
            return False
        doc.setdefault("translations", {})[language] = translation.model_dump()
        return True

    async def list_recipes(
        self, user_id: str, page: int = 1, limit: int = 20, favorites_only: bool = False
    ) -> Tuple[List[Dict[str, Any]], int]:
        if self.fail_reads:
            raise ServerSelectionTimeoutError("store unreachable")
        docs = [d for d in self.recipes.values() if d["userId"] == user_id]
        if favorites_only:
            docs = [d for d in docs if d.get("isFavorite")]
        docs.sort(key=lambda d: d["createdAt"], reverse=True)
        skip = page_skip(page, limit)
        return copy.deepcopy(docs[skip:skip + limit]), len(docs)

    async def recent_recipes(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        docs, _ = await self.list_recipes(user_id, 1, limit)
        return docs

    async def list_history(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        if self.fail_reads:
            raise ServerSelectionTimeoutError("store unreachable")
        docs = sorted(
            (h for h in self.history if h["userId"] == user_id),
            key=lambda h: h["timestamp"],
            reverse=True,
        )
        skip = page_skip(page, limit)
        return docs[skip:skip + limit], len(docs)

    async def dashboard_stats(self, user_id: str) -> Dict[str, int]:
        mine = [d for d in self.recipes.values() if d["userId"] == user_id]
        searches = [h for h in self.history if h["userId"] == user_id]
        return {
            "totalRecipes": len(mine),
            "favoriteRecipes": sum(1 for d in mine if d.get("isFavorite")),
            "recentSearches": min(len(searches), 20),
        }

    # test helper
    def seed(self, user_id: str = USER_ID, age_minutes: int = 0, **fields: Any) -> str:
        oid = ObjectId()
        data = RecipeDoc(
            userId=user_id,
            title=fields.pop("title", "Garlic Rice"),
            ingredients=fields.pop("ingredients", ["1 cup rice", "2 cloves garlic"]),
            instructions=fields.pop("instructions", ["Cook rice.", "Add garlic."]),
            createdAt=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
            **fields,
        ).model_dump()
        data["_id"] = oid
        self.recipes[str(oid)] = data
        return str(oid)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        N8N_WEBHOOK_URL=None,
        N8N_WEBHOOK_TOKEN=None,
        N8N_TRANSLATION_WEBHOOK=None,
        OPENAI_API_KEY=None,
        SUPABASE_URL=None,
    )


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def app(settings: Settings, store: FakeStore):
    app = create_app(settings)
    app.state.store = store
    app.dependency_overrides[get_current_user] = lambda: AuthUser(id=USER_ID, email="cook@example.com")
    return app


@pytest.fixture
def client(app) -> TestClient:
    # no context manager: the lifespan (real Mongo) is not started
    return TestClient(app)


@pytest.fixture
def as_user(app):
    def switch(user_id: str) -> None:
        app.dependency_overrides[get_current_user] = lambda: AuthUser(id=user_id)
    return switch
