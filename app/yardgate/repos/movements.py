from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import delete, select, update

from app.yardgate.db.models import Movement


class MovementRepository:
    def __init__(self, db):
        self.db = db

    def get_by_request_id(self, request_id: str) -> Movement | None:
        return self.db.execute(select(Movement).where(Movement.request_id == request_id)).scalars().first()

    def get_by_id(self, movement_id: uuid.UUID) -> Movement | None:
        return self.db.execute(select(Movement).where(Movement.id == movement_id)).scalars().first()

    def create(self, movement: Movement) -> Movement:
        self.db.add(movement)
        self.db.commit()
        self.db.refresh(movement)
        return movement

    def update_sections(self, movement_id: uuid.UUID, sections: dict[str, Any]) -> None:
        self.db.execute(
            update(Movement)
            .where(Movement.id == movement_id)
            .values(**sections)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    def delete(self, movement_id: uuid.UUID) -> int:
        result = self.db.execute(delete(Movement).where(Movement.id == movement_id))
        self.db.commit()
        return result.rowcount
