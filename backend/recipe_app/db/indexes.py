# Collection indexes
# Called once from the app lifespan after the connection is up.

from motor.motor_asyncio import AsyncIOMotorDatabase

from recipe_app.db.store import HISTORY, RECIPES


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    # owner listing, newest first
    await db[RECIPES].create_index([("userId", 1), ("createdAt", -1)])
    # favorites filter + dashboard count
    await db[RECIPES].create_index([("userId", 1), ("isFavorite", 1)])

    await db[HISTORY].create_index([("userId", 1), ("timestamp", -1)])
