# Shared FastAPI dependencies
# Everything handlers need comes off app.state, which the lifespan fills in.
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from recipe_app.core.config import Settings
from recipe_app.db.store import RecipeStore
from recipe_app.services.generator import RecipeGenerator
from recipe_app.services.identity import AuthUser, IdentityClient, InvalidToken
from recipe_app.services.translate import RecipeTranslator

bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store_optional(request: Request) -> Optional[RecipeStore]:
    # None when the DB never came up (generation degrades instead of failing)
    return getattr(request.app.state, "store", None)


def get_store(store: Optional[RecipeStore] = Depends(get_store_optional)) -> RecipeStore:
    if store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable")
    return store


def get_generator(request: Request) -> RecipeGenerator:
    return request.app.state.generator


def get_translator(request: Request) -> RecipeTranslator:
    return request.app.state.translator


def get_identity(request: Request) -> IdentityClient:
    return request.app.state.identity


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    identity: IdentityClient = Depends(get_identity),
) -> AuthUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        return await identity.get_user(credentials.credentials)
    except InvalidToken:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
