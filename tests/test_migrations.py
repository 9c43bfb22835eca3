import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def test_migrations_apply(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrations.db'}"
    _run_migrations(database_url)

    inspector = inspect(create_engine(database_url, future=True))

    assert {"trailers", "movements", "yard_day_stats"} <= set(inspector.get_table_names())
    movement_uniques = inspector.get_unique_constraints("movements")
    assert any(constraint["column_names"] == ["request_id"] for constraint in movement_uniques)
    stat_uniques = inspector.get_unique_constraints("yard_day_stats")
    assert any(constraint["column_names"] == ["yard_id", "day_key"] for constraint in stat_uniques)
    trailer_indexes = {index["name"]: index for index in inspector.get_indexes("trailers")}
    assert trailer_indexes["ix_trailers_trailer_number"]["unique"]
