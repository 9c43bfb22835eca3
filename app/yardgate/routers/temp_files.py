from fastapi import APIRouter, Depends

from app.yardgate.core.config import settings
from app.yardgate.core.deps import get_current_actor, get_object_storage
from app.yardgate.core.error_catalog import AppError, ErrorCatalog
from app.yardgate.core.storage_keys import is_temp_key
from app.yardgate.schemas.temp_files import DeleteTempFilesRequest, DeleteTempFilesResponse

router = APIRouter()


@router.post("/api/v1/delete-temp-files", response_model=DeleteTempFilesResponse)
def delete_temp_files(
    payload: DeleteTempFilesRequest,
    actor=Depends(get_current_actor),
    storage=Depends(get_object_storage),
):
    invalid_keys = [key for key in payload.keys if not is_temp_key(key)]
    if invalid_keys:
        raise AppError(
            ErrorCatalog.TEMP_KEY_REQUIRED,
            details={"keys": invalid_keys},
            message=f"Deletion only allowed for '{settings.S3_TEMP_FOLDER}'. Invalid keys: {', '.join(invalid_keys)}",
        )
    deleted, failed = storage.delete_objects(list(dict.fromkeys(payload.keys)))
    return DeleteTempFilesResponse(deleted=deleted, failed=failed)
