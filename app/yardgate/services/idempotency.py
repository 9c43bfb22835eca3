from __future__ import annotations

from dataclasses import dataclass

from app.yardgate.core.metrics import metrics
from app.yardgate.db.models import Movement
from app.yardgate.repos.movements import MovementRepository

IDEMPOTENCY_RESULT_HEADER = "X-Idempotency-Result"


@dataclass
class IdempotentReplay:
    movement: Movement


class IdempotencyGuard:
    """Short-circuits submissions whose ``requestId`` already produced a movement."""

    def __init__(self, repo: MovementRepository) -> None:
        self.repo = repo

    def lookup(self, request_id: str) -> IdempotentReplay | None:
        existing = self.repo.get_by_request_id(request_id)
        if existing is None:
            return None
        metrics.increment_idempotency_replay()
        return IdempotentReplay(movement=existing)
