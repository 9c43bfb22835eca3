from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

from sqlalchemy.exc import IntegrityError

from app.yardgate.core.clock import to_naive_utc
from app.yardgate.core.enums import MovementType
from app.yardgate.db.models import YardDayStat
from app.yardgate.repos.yard_day_stats import YardDayStatRepository
from app.yardgate.schemas.movements import DamageItem

logger = logging.getLogger(__name__)

_TYPE_COUNTERS = {
    MovementType.IN: "in_count",
    MovementType.OUT: "out_count",
    MovementType.INSPECTION: "inspection_count",
}


@dataclass(frozen=True)
class StatsDelta:
    yard_id: str
    day_key: str
    counts: dict[str, int]

    def inverse(self) -> dict[str, int]:
        return {name: -amount for name, amount in self.counts.items()}


@dataclass(frozen=True)
class DayWindow:
    day_key: str
    day_start_utc: datetime


def local_day(ts: datetime, tz_name: str) -> DayWindow:
    zone = ZoneInfo(tz_name)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    local_date = ts.astimezone(zone).date()
    midnight = datetime.combine(local_date, time.min, tzinfo=zone)
    return DayWindow(day_key=local_date.isoformat(), day_start_utc=to_naive_utc(midnight))


def counts_for(movement_type: MovementType, damages: list[DamageItem] | None) -> dict[str, int]:
    counts = {_TYPE_COUNTERS[MovementType(movement_type)]: 1}
    if any(item.new_damage for item in damages or []):
        counts["damage_count"] = 1
    return counts


class YardStatsAggregator:
    """Per-yard, per-local-day movement counters."""

    def __init__(self, repo: YardDayStatRepository, tz_name: str) -> None:
        self.repo = repo
        self.tz_name = tz_name

    def apply(
        self,
        movement_type: MovementType,
        yard_id: str | None,
        ts: datetime,
        damages: list[DamageItem] | None,
    ) -> StatsDelta | None:
        if not yard_id:
            return None
        window = local_day(ts, self.tz_name)
        counts = counts_for(movement_type, damages)
        self._upsert(yard_id, window, counts)
        return StatsDelta(yard_id=yard_id, day_key=window.day_key, counts=counts)

    def revert(self, delta: StatsDelta) -> bool:
        reverted = self.repo.increment(delta.yard_id, delta.day_key, delta.inverse())
        if not reverted:
            logger.warning(
                "yard_stats_revert_missing_row",
                extra={"yard_id": delta.yard_id, "day_key": delta.day_key},
            )
        return reverted

    def _upsert(self, yard_id: str, window: DayWindow, counts: dict[str, int]) -> None:
        if self.repo.increment(yard_id, window.day_key, counts):
            return
        stat = YardDayStat(
            yard_id=yard_id,
            day_key=window.day_key,
            tz=self.tz_name,
            day_start_utc=window.day_start_utc,
            **counts,
        )
        try:
            self.repo.create(stat)
        except IntegrityError:
            # Another request inserted the row first.
            self.repo.db.rollback()
            if not self.repo.increment(yard_id, window.day_key, counts):
                raise
