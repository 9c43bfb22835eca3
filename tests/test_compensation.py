import uuid
from datetime import date, datetime, timezone

from app.yardgate.core.enums import MovementType
from app.yardgate.db.models import Movement, Trailer
from app.yardgate.repos.movements import MovementRepository
from app.yardgate.repos.trailers import TrailerRepository
from app.yardgate.repos.yard_day_stats import YardDayStatRepository
from app.yardgate.services.compensation import CompensationManager, SagaProgress
from app.yardgate.services.yard_stats import YardStatsAggregator


def _manager(db, storage) -> CompensationManager:
    return CompensationManager(
        movements=MovementRepository(db),
        trailers=TrailerRepository(db),
        stats=YardStatsAggregator(YardDayStatRepository(db), "America/Toronto"),
        storage=storage,
    )


def _trailer(db, number: str = "CMP-1", status: str = "OUT") -> Trailer:
    return TrailerRepository(db).create(
        Trailer(
            trailer_number=number,
            owner="Owner",
            make="Make",
            model="Model",
            year=2020,
            license_plate="PLATE",
            state_or_province="ON",
            trailer_type="DRY_VAN",
            safety_inspection_expiry_date=date(2027, 1, 1),
            status=status,
        )
    )


def _movement(db, trailer: Trailer, request_id: str = "cmp-req") -> Movement:
    return MovementRepository(db).create(
        Movement(
            request_id=request_id,
            type="IN",
            trailer_id=trailer.id,
            yard_id="yard1",
            ts=datetime(2026, 3, 10, 15, 30),
            actor={"id": "guard"},
            carrier={},
            trip={},
            documents=[],
            angles={},
            axles=[],
            damage_checklist={},
            damages=[],
            ctpat={},
        )
    )


def test_nothing_to_undo_is_a_no_op(db_session, storage, fake_s3):
    report = _manager(db_session, storage).compensate(SagaProgress(request_id="noop"))

    assert report.complete
    assert fake_s3.calls == []


def test_undoes_every_recorded_step(db_session, storage, fake_s3):
    trailer = _trailer(db_session)
    movement = _movement(db_session, trailer)
    movement_id, trailer_id = movement.id, trailer.id
    stats = YardStatsAggregator(YardDayStatRepository(db_session), "America/Toronto")
    delta = stats.apply(MovementType.IN, "yard1", datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc), None)
    fake_s3.put("submissions/movements/x/documents/a.pdf")
    fake_s3.put("submissions/movements/x/tires/b.jpeg")
    progress = SagaProgress(
        request_id="cmp-req",
        movement_id=movement_id,
        created_trailer_id=trailer_id,
        trailer_id=trailer_id,
        stats_delta=delta,
        promoted_keys=["submissions/movements/x/documents/a.pdf", "submissions/movements/x/tires/b.jpeg"],
    )

    report = _manager(db_session, storage).compensate(progress)

    assert report.complete
    assert MovementRepository(db_session).get_by_id(movement_id) is None
    assert TrailerRepository(db_session).get_by_id(trailer_id) is None
    db_session.expire_all()
    assert YardDayStatRepository(db_session).get("yard1", "2026-03-10").in_count == 0
    assert fake_s3.objects == {}


def test_restores_snapshot_of_existing_trailer(db_session, storage):
    trailer = _trailer(db_session, number="CMP-2")
    snapshot = {"status": "OUT", "yard_id": None, "load_state": "UNKNOWN", "total_movements": 0}
    repo = TrailerRepository(db_session)
    repo.apply_changes(trailer.id, {"status": "IN", "yard_id": "yard1"}, increment_movements=True)

    _manager(db_session, storage).compensate(
        SagaProgress(request_id="restore", trailer_id=trailer.id, trailer_snapshot=snapshot)
    )

    db_session.expire_all()
    restored = repo.get_by_id(trailer.id)
    assert (restored.status, restored.yard_id, restored.total_movements) == ("OUT", None, 0)


def test_failed_step_does_not_stop_the_rest(db_session, storage, fake_s3, caplog):
    fake_s3.put("submissions/movements/y/a.jpeg")
    fake_s3.put("submissions/movements/y/b.jpeg")
    fake_s3.fail("delete_object", on_call=1)
    progress = SagaProgress(
        request_id="partial",
        movement_id=uuid.uuid4(),
        promoted_keys=["submissions/movements/y/a.jpeg", "submissions/movements/y/b.jpeg"],
    )

    with caplog.at_level("ERROR"):
        report = _manager(db_session, storage).compensate(progress)

    assert report.failed_steps == ["delete_object"]
    assert "submissions/movements/y/a.jpeg" in fake_s3.objects
    assert "submissions/movements/y/b.jpeg" not in fake_s3.objects
    assert any(record.getMessage() == "movement_compensation_step_failed" for record in caplog.records)
