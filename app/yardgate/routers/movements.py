from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, Response

from app.yardgate.core.deps import get_clock, get_current_actor, get_object_storage, get_yard_registry
from app.yardgate.core.error_catalog import ErrorCatalog
from app.yardgate.db.models import Movement, Trailer
from app.yardgate.db.session import get_db
from app.yardgate.schemas.movements import MovementResponse, MovementSubmissionResponse, TrailerResponse
from app.yardgate.services.idempotency import IDEMPOTENCY_RESULT_HEADER
from app.yardgate.services.movement_submission import MovementSubmissionService

router = APIRouter()


def _utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _movement_response(movement: Movement) -> MovementResponse:
    return MovementResponse(
        id=str(movement.id),
        request_id=movement.request_id,
        type=movement.type,
        trailer_id=str(movement.trailer_id),
        yard_id=movement.yard_id,
        ts=_utc(movement.ts),
        actor=movement.actor,
        carrier=movement.carrier,
        trip=movement.trip,
        documents=movement.documents,
        angles=movement.angles,
        axles=movement.axles,
        damage_checklist=movement.damage_checklist,
        damages=movement.damages,
        ctpat=movement.ctpat,
        created_at=_utc(movement.created_at),
    )


def _trailer_response(trailer: Trailer) -> TrailerResponse:
    return TrailerResponse(
        id=str(trailer.id),
        trailer_number=trailer.trailer_number,
        owner=trailer.owner,
        make=trailer.make,
        model=trailer.model,
        year=trailer.year,
        vin=trailer.vin,
        license_plate=trailer.license_plate,
        state_or_province=trailer.state_or_province,
        trailer_type=trailer.trailer_type,
        safety_inspection_expiry_date=trailer.safety_inspection_expiry_date,
        comments=trailer.comments,
        status=trailer.status,
        yard_id=trailer.yard_id,
        load_state=trailer.load_state,
        condition=trailer.condition,
        last_move_io_ts=_utc(trailer.last_move_io_ts),
        total_movements=trailer.total_movements,
        created_at=_utc(trailer.created_at),
        updated_at=_utc(trailer.updated_at),
    )


@router.post("/api/v1/guard/movements", response_model=MovementSubmissionResponse)
def submit_movement(
    response: Response,
    payload: Any = Body(...),
    actor=Depends(get_current_actor),
    storage=Depends(get_object_storage),
    clock=Depends(get_clock),
    yard_registry=Depends(get_yard_registry),
    db=Depends(get_db),
):
    service = MovementSubmissionService(db, storage=storage, clock=clock, yard_registry=yard_registry)
    result = service.submit(payload, actor=actor)
    if result.replayed:
        response.headers[IDEMPOTENCY_RESULT_HEADER] = ErrorCatalog.IDEMPOTENCY_REPLAY.code
    return MovementSubmissionResponse(
        movement=_movement_response(result.movement),
        trailer=_trailer_response(result.trailer) if result.trailer is not None else None,
        referenced_temp_keys=result.referenced_temp_keys,
        replayed=result.replayed,
    )
