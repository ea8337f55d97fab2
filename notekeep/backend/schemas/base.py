"""
Response envelope.

Every JSON body the API returns has the same four keys:
``success``, ``data``, ``error`` and ``metadata``.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from notekeep.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now, description="Server time, UTC")
    request_id: str | None = Field(default=None, description="Correlation id of the request")


class ErrorDetail(BaseModel):
    """Machine-readable code, human message, optional field-level details."""

    code: str = Field(examples=["RES_NOT_FOUND"])
    message: str
    details: dict[str, Any] | None = None


class _Envelope(BaseModel):
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ApiResponse(_Envelope, Generic[DataT]):
    """Successful response carrying ``data``."""

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(_Envelope):
    """Failed response; ``data`` is always null."""

    success: bool = False
    data: None = None
    error: ErrorDetail
