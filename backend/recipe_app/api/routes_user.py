# recipe_app/api/routes_user.py
# Per-user views: generation history and dashboard summary

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo.errors import PyMongoError

from recipe_app.core.deps import get_current_user, get_store, get_store_optional
from recipe_app.db.models.schemas import (
    DashboardOut,
    DashboardStatsOut,
    HistoryListOut,
    RecipeSummaryOut,
    build_pagination,
    to_history_out,
)
from recipe_app.db.store import RecipeStore
from recipe_app.services.identity import AuthUser

log = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])

DASHBOARD_RECENT = 10


@router.get("/history", response_model=HistoryListOut)
async def get_history(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: AuthUser = Depends(get_current_user),
    store: Optional[RecipeStore] = Depends(get_store_optional),
):
    if store is None:
        return HistoryListOut(pagination=build_pagination(page, limit, 0, 0))
    try:
        docs, total = await store.list_history(user.id, page, limit)
    except PyMongoError as e:
        log.warning("history lookup failed, returning empty page: %s", e)
        return HistoryListOut(pagination=build_pagination(page, limit, 0, 0))

    return HistoryListOut(
        history=[to_history_out(d) for d in docs],
        pagination=build_pagination(page, limit, total, len(docs)),
    )


@router.get("/dashboard", response_model=DashboardOut)
async def get_dashboard(
    user: AuthUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_store),
):
    recent = await store.recent_recipes(user.id, limit=DASHBOARD_RECENT)
    stats = await store.dashboard_stats(user.id)
    return DashboardOut(
        recentRecipes=[
            RecipeSummaryOut(
                id=str(r["_id"]),
                title=r.get("title") or "",
                servings=r.get("servings"),
                difficulty=r.get("difficulty"),
                cuisine=r.get("cuisine"),
                isFavorite=bool(r.get("isFavorite")),
                createdAt=r.get("createdAt"),
            )
            for r in recent
        ],
        stats=DashboardStatsOut(**stats),
    )
