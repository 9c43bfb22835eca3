from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError

from app.yardgate.core.clock import Clock, SystemClock
from app.yardgate.core.config import settings
from app.yardgate.core.error_catalog import AppError, ErrorCatalog
from app.yardgate.core.security import SYSTEM_ACTOR, TokenData, bearer_scheme, decode_token
from app.yardgate.core.yards import YardRegistry, default_registry
from app.yardgate.services.object_storage import ObjectStorageService


def get_current_token_data(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenData | None:
    if settings.AUTH_DISABLED:
        return None
    if credentials is None or not credentials.credentials:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    try:
        payload = decode_token(credentials.credentials)
        return TokenData(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def get_current_actor(
    request: Request,
    token_data: TokenData | None = Depends(get_current_token_data),
) -> dict:
    actor = dict(SYSTEM_ACTOR) if token_data is None else token_data.to_actor()
    request.state.actor_id = actor["id"]
    return actor


def get_object_storage() -> ObjectStorageService:
    return ObjectStorageService()


def get_clock() -> Clock:
    return SystemClock()


def get_yard_registry() -> YardRegistry:
    return default_registry


__all__ = [
    "get_current_token_data",
    "get_current_actor",
    "get_object_storage",
    "get_clock",
    "get_yard_registry",
]
