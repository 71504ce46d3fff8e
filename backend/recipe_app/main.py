# recipe_app/main.py
# App factory, lifespan and router wiring
# The lifespan owns the Mongo client and the outbound adapters; handlers get them through Depends.

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from recipe_app.api.routes_debug import router as debug_router
from recipe_app.api.routes_generate import router as generate_router
from recipe_app.api.routes_recipes import router as recipes_router
from recipe_app.api.routes_user import router as user_router
from recipe_app.core.config import Settings, get_settings
from recipe_app.db import init as db_init
from recipe_app.db.indexes import ensure_indexes
from recipe_app.db.store import RecipeStore
from recipe_app.services.generator import RecipeGenerator
from recipe_app.services.identity import IdentityClient
from recipe_app.services.translate import RecipeTranslator

log = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # 1) DB (retry, then run degraded)
    client, db = await db_init.connect_with_retry(settings)
    app.state.store = RecipeStore(db) if db is not None else None

    # 2) indexes
    if db is not None:
        try:
            await ensure_indexes(db)
            log.info("indexes ensured")
        except PyMongoError as e:
            log.warning("ensure_indexes failed: %s", e)

    log.info("startup complete provider=%s db=%s", app.state.generator.provider_name, "ok" if db is not None else "down")
    try:
        yield
    finally:
        db_init.close(client)
        app.state.store = None


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Recipe Generator - API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = None
    app.state.generator = RecipeGenerator.from_settings(settings)
    app.state.translator = RecipeTranslator.from_settings(settings)
    app.state.identity = IdentityClient(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)

    # CORS: frontend origins from settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        log.error("unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        content = {"detail": "Internal server error"}
        if settings.is_development:
            content["error"] = f"{exc.__class__.__name__}: {exc}"
        return JSONResponse(status_code=500, content=content)

    @app.get("/")
    async def root():
        return {"status": "ok"}

    @app.get("/health")
    async def health():
        ok = {"status": "ok", "db": "down"}
        store = app.state.store
        if store is not None:
            try:
                await store.ping()
                ok["db"] = "ok"
            except PyMongoError as e:
                ok["db"] = f"error: {e}"
        return ok

    app.include_router(generate_router)
    app.include_router(recipes_router)
    app.include_router(user_router)
    app.include_router(debug_router)
    return app


def build() -> FastAPI:
    # uvicorn recipe_app.main:build --factory
    settings = get_settings()
    configure_logging(settings)
    return create_app(settings)
