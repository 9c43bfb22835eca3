from datetime import datetime, timezone

from sqlalchemy import select

from app.yardgate.core.enums import MovementType
from app.yardgate.db.models import YardDayStat
from app.yardgate.repos.yard_day_stats import YardDayStatRepository
from app.yardgate.schemas.movements import DamageItem
from app.yardgate.services.yard_stats import StatsDelta, YardStatsAggregator, counts_for, local_day
from tests.movement_helpers import damage


def _aggregator(db) -> YardStatsAggregator:
    return YardStatsAggregator(YardDayStatRepository(db), "America/Toronto")


def _row(db, yard_id: str, day_key: str) -> YardDayStat:
    db.expire_all()
    return db.execute(
        select(YardDayStat).where(YardDayStat.yard_id == yard_id, YardDayStat.day_key == day_key)
    ).scalar_one()


def test_local_day_uses_application_timezone():
    late_evening = datetime(2026, 1, 15, 3, 30, tzinfo=timezone.utc)

    window = local_day(late_evening, "America/Toronto")

    assert window.day_key == "2026-01-14"
    assert window.day_start_utc == datetime(2026, 1, 14, 5, 0)


def test_counts_for_new_damage():
    damages = [DamageItem.model_validate(damage(new_damage=False)), DamageItem.model_validate(damage())]

    assert counts_for(MovementType.OUT, damages) == {"out_count": 1, "damage_count": 1}
    assert counts_for(MovementType.INSPECTION, None) == {"inspection_count": 1}


def test_apply_creates_then_increments(db_session):
    aggregator = _aggregator(db_session)
    ts = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)

    first = aggregator.apply(MovementType.IN, "yard1", ts, None)
    aggregator.apply(MovementType.IN, "yard1", ts, None)
    aggregator.apply(MovementType.OUT, "yard1", ts, [DamageItem.model_validate(damage())])

    assert first == StatsDelta(yard_id="yard1", day_key="2026-03-10", counts={"in_count": 1})
    row = _row(db_session, "yard1", "2026-03-10")
    assert (row.in_count, row.out_count, row.inspection_count, row.damage_count) == (2, 1, 0, 1)
    assert row.tz == "America/Toronto"
    assert row.day_start_utc == datetime(2026, 3, 10, 4, 0)


def test_no_yard_writes_nothing(db_session):
    delta = _aggregator(db_session).apply(MovementType.INSPECTION, None, datetime.now(timezone.utc), None)

    assert delta is None
    assert db_session.execute(select(YardDayStat)).scalars().all() == []


def test_revert_applies_exact_inverse(db_session):
    aggregator = _aggregator(db_session)
    ts = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)
    aggregator.apply(MovementType.IN, "yard2", ts, None)
    delta = aggregator.apply(MovementType.OUT, "yard2", ts, [DamageItem.model_validate(damage())])

    assert aggregator.revert(delta) is True

    row = _row(db_session, "yard2", "2026-03-10")
    assert (row.in_count, row.out_count, row.damage_count) == (1, 0, 0)


def test_revert_without_row_reports_false(db_session):
    delta = StatsDelta(yard_id="yard3", day_key="2026-03-10", counts={"in_count": 1})

    assert _aggregator(db_session).revert(delta) is False
