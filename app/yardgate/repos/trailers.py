from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import delete, func, or_, select, update

from app.yardgate.core.enums import TrailerStatus
from app.yardgate.db.models import Trailer


class TrailerRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, trailer_id: uuid.UUID) -> Trailer | None:
        return self.db.execute(select(Trailer).where(Trailer.id == trailer_id)).scalars().first()

    def find_conflicting(self, *, trailer_number: str, vin: str | None) -> Trailer | None:
        conditions = [Trailer.trailer_number == trailer_number]
        if vin:
            conditions.append(Trailer.vin == vin)
        return self.db.execute(select(Trailer).where(or_(*conditions))).scalars().first()

    def count_in_yard(self, yard_id: str) -> int:
        query = (
            select(func.count())
            .select_from(Trailer)
            .where(Trailer.yard_id == yard_id, Trailer.status == TrailerStatus.IN.value)
        )
        return int(self.db.execute(query).scalar_one() or 0)

    def create(self, trailer: Trailer) -> Trailer:
        self.db.add(trailer)
        self.db.commit()
        self.db.refresh(trailer)
        return trailer

    def apply_changes(
        self,
        trailer_id: uuid.UUID,
        values: dict[str, Any],
        *,
        increment_movements: bool = False,
        expected_status: str | None = None,
    ) -> bool:
        """Write snapshot columns in one UPDATE; returns False when no row matched."""
        changes = dict(values)
        if increment_movements:
            changes["total_movements"] = Trailer.total_movements + 1
        stmt = update(Trailer).where(Trailer.id == trailer_id)
        if expected_status is not None:
            stmt = stmt.where(Trailer.status == expected_status)
        result = self.db.execute(stmt.values(**changes).execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount == 1

    def delete(self, trailer_id: uuid.UUID) -> int:
        result = self.db.execute(delete(Trailer).where(Trailer.id == trailer_id))
        self.db.commit()
        return result.rowcount
