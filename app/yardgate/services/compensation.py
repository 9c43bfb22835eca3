from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable

from app.yardgate.core.metrics import metrics
from app.yardgate.repos.movements import MovementRepository
from app.yardgate.repos.trailers import TrailerRepository
from app.yardgate.services.object_storage import ObjectStorageService
from app.yardgate.services.yard_stats import StatsDelta, YardStatsAggregator

logger = logging.getLogger(__name__)


@dataclass
class SagaProgress:
    """Everything a submission has persisted so far."""

    request_id: str
    movement_id: uuid.UUID | None = None
    created_trailer_id: uuid.UUID | None = None
    trailer_id: uuid.UUID | None = None
    trailer_snapshot: dict[str, Any] | None = None
    stats_delta: StatsDelta | None = None
    promoted_keys: list[str] = field(default_factory=list)

    def track_promoted(self, key: str) -> None:
        self.promoted_keys.append(key)

    @property
    def has_writes(self) -> bool:
        return bool(
            self.movement_id
            or self.created_trailer_id
            or self.trailer_snapshot is not None
            or self.stats_delta
            or self.promoted_keys
        )


@dataclass
class CompensationReport:
    failed_steps: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_steps


class CompensationManager:
    """Best-effort undo of a partially applied submission.

    Every step runs even if an earlier one failed. Failures are logged and
    counted, never raised, so the caller can surface the original error.
    """

    def __init__(
        self,
        *,
        movements: MovementRepository,
        trailers: TrailerRepository,
        stats: YardStatsAggregator,
        storage: ObjectStorageService,
    ) -> None:
        self.movements = movements
        self.trailers = trailers
        self.stats = stats
        self.storage = storage

    def compensate(self, progress: SagaProgress) -> CompensationReport:
        report = CompensationReport()
        if not progress.has_writes:
            return report

        logger.info(
            "movement_compensation_started",
            extra={
                "request_id": progress.request_id,
                "movement_id": str(progress.movement_id) if progress.movement_id else None,
                "promoted_keys": len(progress.promoted_keys),
            },
        )

        if progress.movement_id is not None:
            self._run(report, progress, "delete_movement", lambda: self.movements.delete(progress.movement_id))

        if progress.created_trailer_id is not None:
            self._run(
                report, progress, "delete_trailer", lambda: self.trailers.delete(progress.created_trailer_id)
            )
        elif progress.trailer_snapshot is not None and progress.trailer_id is not None:
            self._run(
                report,
                progress,
                "restore_trailer",
                lambda: self.trailers.apply_changes(progress.trailer_id, progress.trailer_snapshot),
            )

        if progress.stats_delta is not None:
            self._run(report, progress, "revert_stats", lambda: self.stats.revert(progress.stats_delta))

        for key in progress.promoted_keys:
            self._run(report, progress, "delete_object", lambda key=key: self.storage.delete_object(key), key=key)

        return report

    def _run(
        self,
        report: CompensationReport,
        progress: SagaProgress,
        step: str,
        action: Callable[[], Any],
        *,
        key: str | None = None,
    ) -> None:
        try:
            action()
        except Exception as exc:
            self._rollback_quietly()
            report.failed_steps.append(step)
            metrics.record_compensation_step(step=step, result="failed")
            logger.exception(
                "movement_compensation_step_failed",
                extra={
                    "request_id": progress.request_id,
                    "step": step,
                    "key": key,
                    "exception_type": type(exc).__name__,
                },
            )
            return
        metrics.record_compensation_step(step=step, result="ok")

    def _rollback_quietly(self) -> None:
        try:
            self.movements.db.rollback()
        except Exception:
            logger.exception("movement_compensation_rollback_failed")
