from __future__ import annotations

from app.yardgate.core.config import settings

MOVEMENTS_NAMESPACE = "movements"


def temp_prefix() -> str:
    return f"{settings.S3_TEMP_FOLDER.strip('/')}/"


def is_temp_key(key: str | None) -> bool:
    return bool(key) and key.startswith(temp_prefix())


def entity_final_prefix(namespace: str, entity_id: str, folder: str) -> str:
    root = settings.S3_SUBMISSIONS_FOLDER.strip("/")
    return f"{root}/{namespace}/{entity_id}/{folder}"


def filename_of(key: str) -> str:
    return key.rstrip("/").rsplit("/", 1)[-1]
