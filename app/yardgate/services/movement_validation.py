from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from app.yardgate.core.error_catalog import AppError, ErrorCatalog
from app.yardgate.core.yards import YardRegistry
from app.yardgate.schemas.movements import MovementSubmission

_UNION_TAGS = {"temporary", "final"}


def _loc_to_field(loc: tuple[Any, ...]) -> str | None:
    parts = [str(part) for part in loc if part not in _UNION_TAGS]
    return ".".join(parts) or None


def _clean_message(message: str) -> str:
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


def validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors(include_url=False):
        errors.append(
            {
                "field": _loc_to_field(tuple(error.get("loc", ()))),
                "message": _clean_message(error.get("msg", "invalid value")),
                "type": error.get("type"),
            }
        )
    return errors


def validation_app_error(errors: list[dict[str, Any]]) -> AppError:
    fields = [error["field"] for error in errors if error.get("field")]
    if fields:
        message = f"Invalid movement payload: {', '.join(dict.fromkeys(fields))}"
    else:
        message = errors[0]["message"] if errors else ErrorCatalog.VALIDATION_ERROR.message
    return AppError(ErrorCatalog.VALIDATION_ERROR, details={"errors": errors}, message=message)


class MovementValidator:
    """Turns an untrusted request body into a ``MovementSubmission``."""

    def __init__(self, yard_registry: YardRegistry) -> None:
        self.yard_registry = yard_registry

    def validate(self, payload: Any) -> MovementSubmission:
        if not isinstance(payload, dict):
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"errors": [{"field": None, "message": "body must be a JSON object", "type": "dict_type"}]},
                message="Request body must be a JSON object",
            )
        try:
            return MovementSubmission.model_validate(payload, context={"yard_ids": self.yard_registry.ids()})
        except ValidationError as exc:
            raise validation_app_error(validation_errors(exc)) from exc


def validate_movement_payload(body: Any, *, yard_registry: YardRegistry) -> MovementSubmission:
    return MovementValidator(yard_registry).validate(body)
