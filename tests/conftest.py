import importlib
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

os.environ.setdefault("SECRET_KEY", "test-secret")


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client calls the service makes."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple[str, dict]] = []
        self._failures: dict[str, set[int]] = {}
        self._counts: dict[str, int] = {}

    def put(self, key: str, body: bytes = b"data") -> None:
        self.objects[key] = body

    def fail(self, operation: str, *, on_call: int = 1) -> None:
        """Make the ``on_call``-th invocation of ``operation`` raise a ClientError."""
        self._failures.setdefault(operation, set()).add(on_call)

    def _enter(self, operation: str, kwargs: dict) -> None:
        self.calls.append((operation, kwargs))
        count = self._counts.get(operation, 0) + 1
        self._counts[operation] = count
        if count in self._failures.get(operation, set()):
            raise ClientError(
                {"Error": {"Code": "InternalError", "Message": f"injected {operation} failure"}},
                operation,
            )

    def calls_for(self, operation: str) -> list[dict]:
        return [kwargs for name, kwargs in self.calls if name == operation]

    def copy_object(self, **kwargs):
        self._enter("copy_object", kwargs)
        source_key = kwargs["CopySource"]["Key"]
        if source_key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}}, "CopyObject")
        self.objects[kwargs["Key"]] = self.objects[source_key]
        return {}

    def delete_object(self, **kwargs):
        self._enter("delete_object", kwargs)
        self.objects.pop(kwargs["Key"], None)
        return {}


def _setup_app(database_url: str):
    os.environ["DATABASE_URL"] = database_url

    import app.yardgate.core.config as config
    import app.yardgate.db.session as session
    import app.main as main

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)

    return main.create_app(), session


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


@pytest.fixture()
def fake_s3():
    return FakeS3Client()


@pytest.fixture()
def storage(monkeypatch, fake_s3):
    from app.yardgate.services.object_storage import ObjectStorageService

    service = ObjectStorageService()
    monkeypatch.setattr(service, "_bucket", "yard-bucket")
    monkeypatch.setattr(service, "_region", "us-east-1")
    monkeypatch.setattr(service, "_public_base_url", "")
    monkeypatch.setattr(service, "_build_s3_client", lambda: fake_s3)
    return service


@pytest.fixture()
def clock():
    from app.yardgate.core.clock import FixedClock

    return FixedClock(datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc))


@pytest.fixture()
def app(tmp_path: Path, storage, clock):
    from app.yardgate.core.deps import get_clock, get_object_storage
    from app.yardgate.core.metrics import metrics

    database_url = f"sqlite+pysqlite:///{tmp_path / 'test.db'}"
    _run_migrations(database_url)
    application, session = _setup_app(database_url)
    application.dependency_overrides[get_object_storage] = lambda: storage
    application.dependency_overrides[get_clock] = lambda: clock
    metrics.reset()

    yield application

    session.engine.dispose()


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def db_session(client):
    from app.yardgate.db.session import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
