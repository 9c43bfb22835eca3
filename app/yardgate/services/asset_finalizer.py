from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from app.yardgate.core.enums import AngleKey
from app.yardgate.core.storage_keys import MOVEMENTS_NAMESPACE, entity_final_prefix, filename_of
from app.yardgate.schemas.movements import (
    FileAsset,
    FinalFileAsset,
    MovementSubmission,
    TemporaryFileAsset,
)
from app.yardgate.services.object_storage import ObjectStorageService

logger = logging.getLogger(__name__)

DOCUMENTS_FOLDER = "documents"
TIRES_FOLDER = "tires"
DAMAGES_FOLDER = "damages"


def angle_folder(angle_key: str) -> str:
    return f"angles/{angle_key.lower()}"


@dataclass
class FinalizedAssets:
    submission: MovementSubmission
    promoted_keys: list[str] = field(default_factory=list)
    source_keys: list[str] = field(default_factory=list)


class AssetFinalizer:
    """Promotes every temporary upload referenced by a submission to a movement-scoped key.

    A temporary key referenced in several places is copied once; later
    references reuse the first result. Already-final assets pass through
    untouched. Temporary sources are left in place and reported in
    ``source_keys`` for the caller to delete once the submission sticks.
    """

    def __init__(
        self,
        storage: ObjectStorageService,
        *,
        on_promoted: Callable[[str], None] | None = None,
    ) -> None:
        self.storage = storage
        self.on_promoted = on_promoted

    def finalize(self, submission: MovementSubmission, movement_id: str) -> FinalizedAssets:
        run = _FinalizerRun(self.storage, movement_id, self.on_promoted)

        documents = [
            item.model_copy(update={"photo": run.promote(item.photo, DOCUMENTS_FOLDER)})
            for item in submission.documents
        ]

        angles = {
            key.value: submission.angles[key.value].model_copy(
                update={"photo": run.promote(submission.angles[key.value].photo, angle_folder(key.value))}
            )
            for key in AngleKey
        }

        finalized_axles = {}
        for axle in sorted(submission.axles, key=lambda item: item.axle_number):
            sides = {
                side: getattr(axle, side).model_copy(
                    update={"photo": run.promote(getattr(axle, side).photo, TIRES_FOLDER)}
                )
                for side in ("left", "right")
            }
            finalized_axles[axle.axle_number] = axle.model_copy(update=sides)
        axles = [finalized_axles[axle.axle_number] for axle in submission.axles]

        damages = None
        if submission.damages is not None:
            damages = [
                item.model_copy(update={"photo": run.promote(item.photo, DAMAGES_FOLDER)})
                for item in submission.damages
            ]

        finalized = submission.model_copy(
            update={"documents": documents, "angles": angles, "axles": axles, "damages": damages}
        )
        return FinalizedAssets(
            submission=finalized,
            promoted_keys=list(run.promoted_keys),
            source_keys=list(run.cache),
        )


class _FinalizerRun:
    def __init__(self, storage: ObjectStorageService, movement_id: str, on_promoted) -> None:
        self.storage = storage
        self.movement_id = movement_id
        self.on_promoted = on_promoted
        self.cache: dict[str, FinalFileAsset] = {}
        self.promoted_keys: list[str] = []

    def promote(self, asset: FileAsset, folder: str) -> FileAsset:
        if not isinstance(asset, TemporaryFileAsset):
            return asset
        cached = self.cache.get(asset.key)
        if cached is not None:
            return cached

        dest_key = f"{entity_final_prefix(MOVEMENTS_NAMESPACE, self.movement_id, folder)}/{filename_of(asset.key)}"
        self.storage.copy_object(asset.key, dest_key)
        self.promoted_keys.append(dest_key)
        if self.on_promoted is not None:
            self.on_promoted(dest_key)
        logger.info(
            "asset_promoted",
            extra={"movement_id": self.movement_id, "source_key": asset.key, "dest_key": dest_key},
        )
        final = FinalFileAsset(
            key=dest_key,
            url=self.storage.public_url(dest_key),
            mime_type=asset.mime_type,
            size_bytes=asset.size_bytes,
            original_name=asset.original_name,
        )
        self.cache[asset.key] = final
        return final
