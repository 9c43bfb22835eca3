from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from app.yardgate.core.enums import TrailerCondition, TrailerLoadState, TrailerStatus
from app.yardgate.core.error_catalog import AppError, ErrorCatalog
from app.yardgate.db.models import Trailer
from app.yardgate.repos.trailers import TrailerRepository
from app.yardgate.schemas.movements import MovementSubmission, NewTrailer


@dataclass
class ResolvedTrailer:
    trailer: Trailer
    is_new: bool


def parse_trailer_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError) as exc:
        raise AppError(ErrorCatalog.TRAILER_NOT_FOUND, details={"trailer_id": value}) from exc


def build_trailer(definition: NewTrailer) -> Trailer:
    return Trailer(
        id=uuid.uuid4(),
        trailer_number=definition.trailer_number,
        owner=definition.owner,
        make=definition.make,
        model=definition.model,
        year=definition.year,
        vin=definition.vin,
        license_plate=definition.license_plate,
        state_or_province=definition.state_or_province,
        trailer_type=definition.trailer_type.value,
        safety_inspection_expiry_date=definition.safety_inspection_expiry_date,
        comments=definition.comments,
        status=TrailerStatus.OUT.value,
        yard_id=None,
        load_state=TrailerLoadState.UNKNOWN.value,
        condition=TrailerCondition.ACTIVE.value,
        last_move_io_ts=None,
        total_movements=0,
    )


class TrailerResolver:
    """Finds the referenced trailer or builds (without saving) an inline one."""

    def __init__(self, repo: TrailerRepository) -> None:
        self.repo = repo

    def resolve(self, submission: MovementSubmission) -> ResolvedTrailer:
        if submission.trailer_id:
            trailer = self.repo.get_by_id(parse_trailer_id(submission.trailer_id))
            if trailer is None:
                raise AppError(ErrorCatalog.TRAILER_NOT_FOUND, details={"trailer_id": submission.trailer_id})
            return ResolvedTrailer(trailer=trailer, is_new=False)

        definition = submission.trailer
        existing = self.repo.find_conflicting(trailer_number=definition.trailer_number, vin=definition.vin)
        if existing is not None:
            raise AppError(
                ErrorCatalog.TRAILER_ALREADY_EXISTS,
                details={"trailer_number": definition.trailer_number, "trailer_id": str(existing.id)},
            )
        return ResolvedTrailer(trailer=build_trailer(definition), is_new=True)

    def persist(self, resolved: ResolvedTrailer) -> Trailer:
        try:
            return self.repo.create(resolved.trailer)
        except IntegrityError as exc:
            self.repo.db.rollback()
            raise AppError(
                ErrorCatalog.TRAILER_ALREADY_EXISTS,
                details={"trailer_number": resolved.trailer.trailer_number},
            ) from exc
