from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from app.yardgate.core.clock import Clock, to_naive_utc
from app.yardgate.core.config import settings
from app.yardgate.core.enums import MovementType, TrailerLoadState
from app.yardgate.core.error_catalog import AppError, ErrorCatalog
from app.yardgate.core.metrics import metrics
from app.yardgate.core.yards import YardRegistry
from app.yardgate.db.models import Movement, Trailer
from app.yardgate.repos.movements import MovementRepository
from app.yardgate.repos.trailers import TrailerRepository
from app.yardgate.repos.yard_day_stats import YardDayStatRepository
from app.yardgate.schemas.movements import MovementSubmission
from app.yardgate.services.asset_finalizer import AssetFinalizer
from app.yardgate.services.compensation import CompensationManager, SagaProgress
from app.yardgate.services.idempotency import IdempotencyGuard
from app.yardgate.services.movement_validation import MovementValidator
from app.yardgate.services.object_storage import ObjectStorageService
from app.yardgate.services.state_guard import StateTransitionGuard
from app.yardgate.services.trailer_resolver import ResolvedTrailer, TrailerResolver
from app.yardgate.services.yard_stats import YardStatsAggregator

logger = logging.getLogger(__name__)

_SNAPSHOT_FIELDS = ("status", "yard_id", "load_state", "last_move_io_ts", "total_movements", "updated_at")


@dataclass
class SubmissionResult:
    movement: Movement
    trailer: Trailer | None = None
    referenced_temp_keys: list[str] = field(default_factory=list)
    replayed: bool = False


class _RequestAlreadyRecorded(Exception):
    def __init__(self, movement: Movement) -> None:
        super().__init__(movement.request_id)
        self.movement = movement


def _dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def movement_sections(submission: MovementSubmission) -> dict[str, Any]:
    return {
        "carrier": _dump(submission.carrier),
        "trip": _dump(submission.trip),
        "documents": [_dump(item) for item in submission.documents],
        "angles": {key: _dump(item) for key, item in submission.angles.items()},
        "axles": [_dump(axle) for axle in submission.axles],
        "damage_checklist": dict(submission.damage_checklist),
        "damages": [_dump(item) for item in submission.damages or []],
        "ctpat": dict(submission.ctpat),
    }


def asset_sections(submission: MovementSubmission) -> dict[str, Any]:
    sections = movement_sections(submission)
    return {name: sections[name] for name in ("documents", "angles", "axles", "damages")}


def trailer_changes(submission: MovementSubmission, ts: datetime) -> tuple[dict[str, Any], bool]:
    """Snapshot columns to write for this movement and whether it counts as a move."""
    load_state = TrailerLoadState.LOADED if submission.trip.is_loaded else TrailerLoadState.EMPTY
    values: dict[str, Any] = {"load_state": load_state.value, "updated_at": ts}
    if submission.type == MovementType.INSPECTION:
        return values, False
    values["status"] = submission.type.value
    values["yard_id"] = submission.yard_id if submission.type == MovementType.IN else None
    values["last_move_io_ts"] = ts
    return values, True


def trailer_snapshot(trailer: Trailer) -> dict[str, Any]:
    return {name: getattr(trailer, name) for name in _SNAPSHOT_FIELDS}


class MovementSubmissionService:
    """Runs a movement submission as a saga across the database and object store.

    Nothing is written until the payload is valid, the request is new and the
    state guard admits the movement. After the first write, any failure
    triggers compensation and the original error is re-raised. Temporary
    uploads are deleted only after every write has succeeded, so a
    compensated request can be retried with the same uploads.
    """

    def __init__(
        self,
        db,
        *,
        storage: ObjectStorageService,
        clock: Clock,
        yard_registry: YardRegistry,
        tz_name: str | None = None,
        status_cas: bool | None = None,
    ) -> None:
        self.db = db
        self.storage = storage
        self.clock = clock
        self.movements = MovementRepository(db)
        self.trailers = TrailerRepository(db)
        self.stats = YardStatsAggregator(YardDayStatRepository(db), tz_name or settings.APP_TIMEZONE)
        self.validator = MovementValidator(yard_registry)
        self.idempotency = IdempotencyGuard(self.movements)
        self.resolver = TrailerResolver(self.trailers)
        self.guard = StateTransitionGuard(yard_registry, self.trailers.count_in_yard)
        self.compensation = CompensationManager(
            movements=self.movements,
            trailers=self.trailers,
            stats=self.stats,
            storage=storage,
        )
        self.status_cas = settings.TRAILER_STATUS_CAS if status_cas is None else status_cas

    def submit(self, payload: Any, *, actor: dict[str, Any]) -> SubmissionResult:
        submission = self.validator.validate(payload)

        replay = self.idempotency.lookup(submission.request_id)
        if replay is not None:
            return self._replayed(submission, replay.movement)

        resolved = self.resolver.resolve(submission)
        self.guard.check(submission.type, resolved.trailer, submission.yard_id, is_new_trailer=resolved.is_new)

        progress = SagaProgress(request_id=submission.request_id)
        try:
            result = self._apply(submission, resolved, actor, progress)
        except _RequestAlreadyRecorded as duplicate:
            self.compensation.compensate(progress)
            metrics.increment_idempotency_replay()
            return self._replayed(submission, duplicate.movement)
        except Exception:
            self.db.rollback()
            self.compensation.compensate(progress)
            metrics.record_movement_submission(movement_type=submission.type.value, result="failed")
            raise

        self._release_temp_sources(submission.request_id, result.referenced_temp_keys)
        metrics.record_movement_submission(movement_type=submission.type.value, result="created")
        logger.info(
            "movement_submitted",
            extra={
                "request_id": submission.request_id,
                "movement_id": str(result.movement.id),
                "trailer_id": str(result.movement.trailer_id),
                "type": submission.type.value,
                "yard_id": submission.yard_id,
                "promoted_keys": len(progress.promoted_keys),
            },
        )
        return result

    def _apply(
        self,
        submission: MovementSubmission,
        resolved: ResolvedTrailer,
        actor: dict[str, Any],
        progress: SagaProgress,
    ) -> SubmissionResult:
        now = self.clock.now()
        ts = to_naive_utc(now)

        trailer = resolved.trailer
        if resolved.is_new:
            trailer = self.resolver.persist(resolved)
            progress.created_trailer_id = trailer.id
        trailer_id = trailer.id
        progress.trailer_id = trailer_id
        expected_status = trailer.status
        snapshot = trailer_snapshot(trailer)

        movement = self._create_movement(submission, trailer_id, ts, actor)
        progress.movement_id = movement.id
        movement_id = movement.id

        finalizer = AssetFinalizer(self.storage, on_promoted=progress.track_promoted)
        finalized = finalizer.finalize(submission, str(movement_id))
        self.movements.update_sections(movement_id, asset_sections(finalized.submission))

        changes, counts_as_move = trailer_changes(submission, ts)
        cas_status = expected_status if self.status_cas and counts_as_move else None
        applied = self.trailers.apply_changes(
            trailer_id, changes, increment_movements=counts_as_move, expected_status=cas_status
        )
        if not applied:
            raise AppError(
                ErrorCatalog.TRAILER_STATE_CHANGED,
                details={"trailer_id": str(trailer_id), "expected_status": expected_status},
            )
        if not resolved.is_new:
            progress.trailer_snapshot = snapshot

        progress.stats_delta = self.stats.apply(submission.type, submission.yard_id, now, submission.damages)

        return SubmissionResult(
            movement=self.movements.get_by_id(movement_id),
            trailer=self.trailers.get_by_id(trailer_id),
            referenced_temp_keys=finalized.source_keys,
        )

    def _release_temp_sources(self, request_id: str, keys: list[str]) -> None:
        """Delete the temporary uploads once their copies are committed."""
        if not keys:
            return
        _, failed = self.storage.delete_objects(keys)
        if failed:
            logger.warning("temp_source_cleanup_failed", extra={"request_id": request_id, "keys": failed})

    def _create_movement(
        self,
        submission: MovementSubmission,
        trailer_id: uuid.UUID,
        ts: datetime,
        actor: dict[str, Any],
    ) -> Movement:
        movement = Movement(
            id=uuid.uuid4(),
            request_id=submission.request_id,
            type=submission.type.value,
            trailer_id=trailer_id,
            yard_id=submission.yard_id,
            ts=ts,
            actor=actor,
            **movement_sections(submission),
        )
        try:
            return self.movements.create(movement)
        except IntegrityError as exc:
            self.db.rollback()
            existing = self.movements.get_by_request_id(submission.request_id)
            if existing is not None:
                raise _RequestAlreadyRecorded(existing) from exc
            raise

    def _replayed(self, submission: MovementSubmission, movement: Movement) -> SubmissionResult:
        metrics.record_movement_submission(movement_type=submission.type.value, result="replayed")
        logger.info(
            "movement_replayed",
            extra={"request_id": submission.request_id, "movement_id": str(movement.id)},
        )
        return SubmissionResult(movement=movement, replayed=True)
