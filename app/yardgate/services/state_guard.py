from __future__ import annotations

from app.yardgate.core.enums import MovementType, TrailerStatus
from app.yardgate.core.error_catalog import AppError, ErrorCatalog
from app.yardgate.core.yards import OccupancyQuery, YardRegistry
from app.yardgate.db.models import Trailer


class StateTransitionGuard:
    """Admits or rejects a movement against the trailer's current status and yard capacity.

    Occupancy is read, not locked; two concurrent IN submissions can both be
    admitted for the last slot.
    """

    def __init__(self, yard_registry: YardRegistry, occupancy_query: OccupancyQuery) -> None:
        self.yard_registry = yard_registry
        self.occupancy_query = occupancy_query

    def check(
        self,
        movement_type: MovementType,
        trailer: Trailer,
        yard_id: str | None,
        *,
        is_new_trailer: bool = False,
    ) -> None:
        if movement_type == MovementType.IN:
            if not is_new_trailer and trailer.status == TrailerStatus.IN.value:
                raise AppError(
                    ErrorCatalog.TRAILER_ALREADY_IN,
                    details={"trailer_id": str(trailer.id), "yard_id": trailer.yard_id},
                )
            self._check_capacity(yard_id)
        elif movement_type == MovementType.OUT:
            if not is_new_trailer and trailer.status == TrailerStatus.OUT.value:
                raise AppError(ErrorCatalog.TRAILER_ALREADY_OUT, details={"trailer_id": str(trailer.id)})

    def _check_capacity(self, yard_id: str | None) -> None:
        capacity = self.yard_registry.capacity_of(yard_id) if yard_id else None
        if capacity is None:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"errors": [{"field": "yardId", "message": f"Invalid yardId: {yard_id}", "type": "value_error"}]},
                message=f"Invalid yardId: {yard_id}",
            )
        occupied = self.occupancy_query(yard_id)
        if occupied >= capacity:
            raise AppError(
                ErrorCatalog.YARD_CAPACITY_REACHED,
                details={"yard_id": yard_id, "capacity": capacity, "occupied": occupied},
            )
