from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import HTTPBearer
from jose import jwt
from pydantic import BaseModel

from app.yardgate.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)

SYSTEM_ACTOR = {"id": "system", "displayName": "system", "email": None}


class TokenData(BaseModel):
    sub: str
    name: str | None = None
    email: str | None = None

    def to_actor(self) -> dict[str, Any]:
        return {"id": self.sub, "displayName": self.name or self.email or self.sub, "email": self.email}


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
