from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update

from app.yardgate.db.models import YardDayStat

COUNTER_COLUMNS = ("in_count", "out_count", "inspection_count", "damage_count")


class YardDayStatRepository:
    def __init__(self, db):
        self.db = db

    def get(self, yard_id: str, day_key: str) -> YardDayStat | None:
        query = select(YardDayStat).where(YardDayStat.yard_id == yard_id, YardDayStat.day_key == day_key)
        return self.db.execute(query).scalars().first()

    def increment(self, yard_id: str, day_key: str, counts: dict[str, int]) -> bool:
        """Atomically add ``counts`` to an existing row; False when the row is missing."""
        unknown = set(counts) - set(COUNTER_COLUMNS)
        if unknown:
            raise ValueError(f"unknown counters: {', '.join(sorted(unknown))}")
        values = {name: getattr(YardDayStat, name) + amount for name, amount in counts.items()}
        values["updated_at"] = datetime.utcnow()
        result = self.db.execute(
            update(YardDayStat)
            .where(YardDayStat.yard_id == yard_id, YardDayStat.day_key == day_key)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def create(self, stat: YardDayStat) -> YardDayStat:
        self.db.add(stat)
        self.db.commit()
        self.db.refresh(stat)
        return stat
