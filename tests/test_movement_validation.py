import pytest

from app.yardgate.core.error_catalog import AppError
from app.yardgate.core.yards import default_registry
from app.yardgate.schemas.movements import FinalFileAsset, TemporaryFileAsset
from app.yardgate.services.movement_validation import validate_movement_payload
from tests.movement_helpers import axle, damage, movement_payload, photo


def _validate(payload):
    return validate_movement_payload(payload, yard_registry=default_registry)


def _error_fields(exc_info) -> list:
    return [error["field"] for error in exc_info.value.details["errors"]]


def test_valid_payload_is_accepted():
    submission = _validate(movement_payload(request_id="req-valid"))

    assert submission.request_id == "req-valid"
    assert submission.type.value == "IN"
    assert list(submission.angles) == [
        "FRONT",
        "LEFT_FRONT",
        "LEFT_REAR",
        "REAR",
        "RIGHT_REAR",
        "RIGHT_FRONT",
        "TRAILER_NUMBER_VIN",
        "LANDING_GEAR_UNDERCARRIAGE",
    ]
    assert isinstance(submission.documents[0].photo, TemporaryFileAsset)


def test_inline_trailer_fields_are_normalized():
    submission = _validate(movement_payload())

    trailer = submission.trailer
    assert trailer.license_plate == "AB 1234"
    assert trailer.state_or_province == "ON"
    assert trailer.trailer_type.value == "DRY_VAN"
    assert trailer.vin == "1ABC234DEF567890X"


def test_tire_brand_is_coerced_to_canonical_spelling():
    payload = movement_payload()
    payload["axles"][0]["left"]["outer"]["brand"] = "good-year"
    payload["axles"][1]["right"]["outer"]["brand"] = "DOUBLE COIN"

    submission = _validate(payload)

    assert submission.axles[0].left.outer.brand == "Goodyear"
    assert submission.axles[1].right.outer.brand == "Double Coin"


def test_unknown_tire_brand_is_rejected():
    payload = movement_payload()
    payload["axles"][0]["left"]["outer"]["brand"] = "NoNameRubber"

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert exc_info.value.error.code == "VALIDATION_ERROR"
    assert "axles.0.left.outer.brand" in _error_fields(exc_info)


def test_s3key_alias_and_final_keys_are_understood():
    payload = movement_payload()
    document_photo = payload["documents"][0]["photo"]
    document_photo["s3Key"] = document_photo.pop("key")
    payload["angles"]["FRONT"]["photo"] = photo("submissions/movements/abc/angles/front/front.jpeg")

    submission = _validate(payload)

    assert isinstance(submission.documents[0].photo, TemporaryFileAsset)
    assert submission.documents[0].photo.key.startswith("temp-files/")
    assert isinstance(submission.angles["FRONT"].photo, FinalFileAsset)


def test_missing_angle_is_reported():
    payload = movement_payload()
    del payload["angles"]["REAR"]

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert _error_fields(exc_info) == ["angles"]
    assert "REAR" in exc_info.value.details["errors"][0]["message"]
    assert exc_info.value.message.startswith("Invalid movement payload: angles")


def test_unsupported_mime_type_is_reported_without_variant_tag():
    payload = movement_payload()
    payload["documents"][0]["photo"]["mimeType"] = "text/plain"

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert _error_fields(exc_info) == ["documents.0.photo.mimeType"]


def test_in_requires_yard():
    with pytest.raises(AppError) as exc_info:
        _validate(movement_payload(yard_id=None))

    assert "yardId is required" in exc_info.value.message


def test_unknown_yard_is_rejected_even_for_inspection():
    with pytest.raises(AppError) as exc_info:
        _validate(movement_payload(movement_type="INSPECTION", yard_id="yard99"))

    assert "Invalid yardId" in exc_info.value.message


def test_inspection_without_yard_is_allowed():
    submission = _validate(movement_payload(movement_type="INSPECTION", yard_id=None))

    assert submission.yard_id is None


def test_trailer_reference_is_required():
    payload = movement_payload()
    del payload["trailer"]

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert "trailerId" in exc_info.value.message


def test_trailer_id_alone_references_existing_trailer():
    payload = movement_payload(trailer_id="7d3f3c1e-8d9b-4a51-9d7e-1f0b2a3c4d5e")

    submission = _validate(payload)
    assert submission.trailer_id == "7d3f3c1e-8d9b-4a51-9d7e-1f0b2a3c4d5e"


def test_dual_axle_requires_inner_tires():
    payload = movement_payload()
    payload["axles"][0]["left"].pop("inner")

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert _error_fields(exc_info) == ["axles.0"]


def test_single_axle_does_not_need_inner_tires():
    payload = movement_payload()
    payload["axles"] = [axle(1, axle_type="SINGLE"), axle(2, axle_type="SINGLE")]

    submission = _validate(payload)

    assert submission.axles[0].left.inner is None


@pytest.mark.parametrize("count", [1, 7])
def test_axle_count_bounds(count):
    payload = movement_payload()
    payload["axles"] = [axle(number % 6 + 1) for number in range(count)]

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert "axles" in _error_fields(exc_info)


def test_axle_numbers_must_be_unique():
    payload = movement_payload()
    payload["axles"] = [axle(1), axle(1)]

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert _error_fields(exc_info) == ["axles"]


def test_psi_must_stay_in_range():
    payload = movement_payload()
    payload["axles"][1]["right"]["outer"]["psi"] = 250

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    assert _error_fields(exc_info) == ["axles.1.right.outer.psi"]


def test_checklists_require_strict_booleans_and_every_key():
    payload = movement_payload()
    payload["damageChecklist"]["MUD_FLAPS"] = "yes"
    del payload["ctpat"]["AGRICULTURE"]
    payload["trip"]["isLoaded"] = "true"

    with pytest.raises(AppError) as exc_info:
        _validate(payload)

    fields = _error_fields(exc_info)
    assert "damageChecklist.MUD_FLAPS" in fields
    assert "ctpat" in fields
    assert "trip.isLoaded" in fields


def test_trip_expiry_accepts_iso_datetime():
    payload = movement_payload()
    payload["trip"]["safetyInspectionExpiry"] = "2026-12-31T05:00:00.000Z"

    submission = _validate(payload)

    assert submission.trip.safety_inspection_expiry.isoformat() == "2026-12-31"


def test_damages_are_optional_and_validated_when_present():
    assert _validate(movement_payload()).damages is None

    bad = damage()
    bad["newDamage"] = "no"
    with pytest.raises(AppError) as exc_info:
        _validate(movement_payload(damages=[bad]))

    assert _error_fields(exc_info) == ["damages.0.newDamage"]


def test_client_timestamp_and_actor_are_ignored():
    payload = movement_payload()
    payload["ts"] = "1999-01-01T00:00:00Z"
    payload["actor"] = {"id": "spoofed"}

    submission = _validate(payload)

    assert not hasattr(submission, "ts")
    assert not hasattr(submission, "actor")


def test_non_object_body_is_rejected():
    with pytest.raises(AppError) as exc_info:
        _validate(["not", "an", "object"])

    assert exc_info.value.error.status_code == 400
