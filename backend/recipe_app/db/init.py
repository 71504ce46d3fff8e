# recipe_app/db/init.py
# Mongo connection helpers (motor)
# The process entry point (FastAPI lifespan) owns the client; nothing here is global.

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from recipe_app.core.config import Settings

log = logging.getLogger(__name__)


async def connect(settings: Settings) -> Tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
    client = AsyncIOMotorClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
    db = client[settings.MONGODB_DB_NAME]
    try:
        # raises if the server is not ready
        await db.command("ping")
    except PyMongoError:
        client.close()
        raise
    return client, db


async def connect_with_retry(
    settings: Settings, delay: float = 1.0
) -> Tuple[Optional[AsyncIOMotorClient], Optional[AsyncIOMotorDatabase]]:
    """Try DB_CONNECT_ATTEMPTS times; (None, None) when the store never came up."""
    attempts = max(1, settings.DB_CONNECT_ATTEMPTS)
    for i in range(attempts):
        try:
            return await connect(settings)
        except PyMongoError as e:
            log.warning("db connect retry %d/%d: %s", i + 1, attempts, e)
            if i + 1 < attempts:
                await asyncio.sleep(delay)
    log.error("db connect failed after %d attempts; running without persistence", attempts)
    return None, None


def close(client: Optional[AsyncIOMotorClient]) -> None:
    if client is not None:
        client.close()
