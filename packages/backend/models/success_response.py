from pydantic import BaseModel

from models.tomato import TomatoRecord


class SuccessResponse(BaseModel):
    success: bool = True


class TomatoResponse(SuccessResponse):
    data: TomatoRecord
    message: str | None = None


class TomatoListResponse(SuccessResponse):
    data: list[TomatoRecord]
    count: int


class DeletedData(BaseModel):
    id: str


class DeleteResponse(SuccessResponse):
    message: str
    data: DeletedData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
