"""Response envelopes shared by all endpoints."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope: stable code, human message, payload."""

    code: str = Field(default="SUCCEED", description="Machine-readable result code")
    message: str = Field(default="", description="Human-readable message")
    data: DataT | None = None


class ErrorResponse(BaseModel):
    """Failure body. HTTP status is derived from code."""

    code: str
    message: str
