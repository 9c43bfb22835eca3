from pydantic import BaseModel, Field, StrictStr


class DeleteTempFilesRequest(BaseModel):
    keys: list[StrictStr] = Field(min_length=1)


class DeleteTempFilesResponse(BaseModel):
    deleted: list[str]
    failed: list[str]
