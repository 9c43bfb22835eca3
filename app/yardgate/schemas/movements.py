from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictBool,
    StringConstraints,
    Tag,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from app.yardgate.core.enums import (
    CTPAT_ITEMS,
    DAMAGE_CHECKLIST_ITEMS,
    AngleKey,
    AxleType,
    DamageLocation,
    DamageType,
    MovementType,
    TireCondition,
    TrailerBound,
    TrailerType,
)
from app.yardgate.core.storage_keys import is_temp_key
from app.yardgate.core.tire_brands import TIRE_BRAND_NAMES, canonical_tire_brand

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

_DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

_MOVEMENT_EXAMPLE_PHOTO = {
    "key": "temp-files/movements/angles-front/1718000000000-7f0c.jpeg",
    "url": "https://bucket.s3.us-east-1.amazonaws.com/temp-files/movements/angles-front/1718000000000-7f0c.jpeg",
    "mimeType": "image/jpeg",
    "sizeBytes": 183211,
    "originalName": "front.jpg",
}


def _coerce_date(value: Any) -> Any:
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def _require_keys(value: dict, keys: tuple[str, ...], label: str) -> dict:
    missing = [key for key in keys if key not in value]
    if missing:
        raise ValueError(f"{label} is missing required keys: {', '.join(missing)}")
    return {key: value[key] for key in keys}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileAsset(CamelModel):
    key: NonEmptyStr = Field(validation_alias=AliasChoices("key", "s3Key"))
    url: str | None = None
    mime_type: NonEmptyStr
    size_bytes: int | None = Field(default=None, ge=0)
    original_name: str | None = None

    @field_validator("mime_type")
    @classmethod
    def _known_mime_family(cls, value: str) -> str:
        normalized = value.lower()
        if not (normalized.startswith("image/") or normalized in _DOCUMENT_MIME_TYPES):
            raise ValueError(f"unsupported mime type: {value}")
        return normalized


class TemporaryFileAsset(FileAsset):
    """Upload living under the scratch prefix; must be promoted before it is durable."""


class FinalFileAsset(FileAsset):
    """Upload already stored under an entity-scoped permanent prefix."""


def _file_asset_kind(value: Any) -> str:
    if isinstance(value, dict):
        key = value.get("key", value.get("s3Key"))
    else:
        key = getattr(value, "key", None)
    if isinstance(key, str) and is_temp_key(key.strip()):
        return "temporary"
    return "final"


FileRef = Annotated[
    Union[
        Annotated[TemporaryFileAsset, Tag("temporary")],
        Annotated[FinalFileAsset, Tag("final")],
    ],
    Discriminator(_file_asset_kind),
]


class MovementActor(CamelModel):
    id: str | None = None
    display_name: str
    email: str | None = None


class CarrierInfo(CamelModel):
    carrier_name: NonEmptyStr
    driver_name: NonEmptyStr
    truck_number: str | None = None


class TripInfo(CamelModel):
    safety_inspection_expiry: date
    customer_name: NonEmptyStr
    destination: NonEmptyStr
    order_number: NonEmptyStr
    is_loaded: StrictBool
    trailer_bound: TrailerBound

    _parse_expiry = field_validator("safety_inspection_expiry", mode="before")(_coerce_date)


class DocumentItem(CamelModel):
    description: NonEmptyStr
    photo: FileRef


class AngleItem(CamelModel):
    photo: FileRef


class TireSpec(CamelModel):
    brand: NonEmptyStr
    psi: float = Field(strict=True, ge=0, le=200)
    condition: TireCondition

    @field_validator("brand")
    @classmethod
    def _canonical_brand(cls, value: str) -> str:
        canonical = canonical_tire_brand(value)
        if canonical is None:
            raise ValueError(f"must be a known brand. Allowed: {', '.join(TIRE_BRAND_NAMES)}")
        return canonical


class SideTires(CamelModel):
    photo: FileRef
    outer: TireSpec
    inner: TireSpec | None = None


class Axle(CamelModel):
    axle_number: int = Field(strict=True, ge=1, le=6)
    type: AxleType
    left: SideTires
    right: SideTires

    @model_validator(mode="after")
    def _dual_axle_has_inner_tires(self) -> "Axle":
        if self.type is AxleType.DUAL:
            missing = [side for side in ("left", "right") if getattr(self, side).inner is None]
            if missing:
                raise ValueError(f"inner tire is required on the {' and '.join(missing)} side of a DUAL axle")
        return self


class DamageItem(CamelModel):
    location: DamageLocation
    type: DamageType
    comment: str | None = None
    photo: FileRef
    new_damage: StrictBool


class NewTrailer(CamelModel):
    trailer_number: NonEmptyStr
    owner: NonEmptyStr
    make: NonEmptyStr
    model: NonEmptyStr
    year: int = Field(strict=True, ge=1900, le=9999)
    vin: str | None = None
    license_plate: NonEmptyStr
    state_or_province: NonEmptyStr
    trailer_type: TrailerType
    safety_inspection_expiry_date: date
    comments: str | None = None

    _parse_expiry = field_validator("safety_inspection_expiry_date", mode="before")(_coerce_date)

    @field_validator("trailer_type", mode="before")
    @classmethod
    def _upper_trailer_type(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("license_plate", "state_or_province")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @field_validator("vin")
    @classmethod
    def _upper_vin(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().upper() or None


class MovementSubmission(CamelModel):
    """Accepted, strongly-typed movement payload.

    ``ts`` and ``actor`` sent by clients are ignored; the server assigns both.
    """

    type: MovementType
    request_id: NonEmptyStr
    yard_id: str | None = None
    trailer_id: str | None = None
    trailer: NewTrailer | None = None
    carrier: CarrierInfo
    trip: TripInfo
    documents: list[DocumentItem]
    angles: dict[str, AngleItem]
    axles: list[Axle] = Field(min_length=2, max_length=6)
    damage_checklist: dict[str, StrictBool]
    damages: list[DamageItem] | None = None
    ctpat: dict[str, StrictBool]

    model_config = {
        "json_schema_extra": {
            "example": {
                "requestId": "req_12345",
                "type": "IN",
                "yardId": "yard2",
                "trailerId": "7d3f3c1e-8d9b-4a51-9d7e-1f0b2a3c4d5e",
                "carrier": {"carrierName": "Acme", "driverName": "Jane Doe", "truckNumber": "T-778"},
                "trip": {
                    "safetyInspectionExpiry": "2026-01-15",
                    "customerName": "Shipper A",
                    "destination": "Toronto",
                    "orderNumber": "SO-8891",
                    "isLoaded": True,
                    "trailerBound": "NORTH_BOUND",
                },
                "documents": [{"description": "BOL", "photo": _MOVEMENT_EXAMPLE_PHOTO}],
            }
        }
    }

    @field_validator("yard_id", "trailer_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("angles")
    @classmethod
    def _all_angles_present(cls, value: dict[str, AngleItem]) -> dict[str, AngleItem]:
        return _require_keys(value, tuple(key.value for key in AngleKey), "angles")

    @field_validator("damage_checklist")
    @classmethod
    def _full_damage_checklist(cls, value: dict[str, bool]) -> dict[str, bool]:
        return _require_keys(value, DAMAGE_CHECKLIST_ITEMS, "damageChecklist")

    @field_validator("ctpat")
    @classmethod
    def _full_ctpat_checklist(cls, value: dict[str, bool]) -> dict[str, bool]:
        return _require_keys(value, CTPAT_ITEMS, "ctpat")

    @field_validator("axles")
    @classmethod
    def _unique_axle_numbers(cls, value: list[Axle]) -> list[Axle]:
        seen: set[int] = set()
        for axle in value:
            if axle.axle_number in seen:
                raise ValueError(f"axleNumber must be unique (duplicate {axle.axle_number})")
            seen.add(axle.axle_number)
        return value

    @model_validator(mode="after")
    def _check_references(self, info: ValidationInfo) -> "MovementSubmission":
        if not self.trailer_id and self.trailer is None:
            raise ValueError("Provide either trailerId for an existing trailer or a trailer object to create")

        yard_ids = (info.context or {}).get("yard_ids")
        if self.type in (MovementType.IN, MovementType.OUT) and not self.yard_id:
            raise ValueError("yardId is required for IN and OUT movements")
        if self.yard_id is not None and yard_ids is not None and self.yard_id not in yard_ids:
            raise ValueError(f"Invalid yardId: {self.yard_id}")
        return self


class MovementResponse(CamelModel):
    id: str
    request_id: str
    type: MovementType
    trailer_id: str
    yard_id: str | None
    ts: datetime
    actor: dict
    carrier: dict
    trip: dict
    documents: list[dict]
    angles: dict
    axles: list[dict]
    damage_checklist: dict
    damages: list[dict]
    ctpat: dict
    created_at: datetime


class TrailerResponse(CamelModel):
    id: str
    trailer_number: str
    owner: str
    make: str
    model: str
    year: int
    vin: str | None
    license_plate: str
    state_or_province: str
    trailer_type: str
    safety_inspection_expiry_date: date
    comments: str | None
    status: str
    yard_id: str | None
    load_state: str
    condition: str
    last_move_io_ts: datetime | None
    total_movements: int
    created_at: datetime
    updated_at: datetime


class MovementSubmissionResponse(CamelModel):
    movement: MovementResponse
    trailer: TrailerResponse | None = None
    referenced_temp_keys: list[str] = Field(default_factory=list)
    replayed: bool = False
