"""Response envelope of the tracking backend."""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BackendResponse(BaseModel, Generic[T]):
    """Every backend reply: ``{"success", "message", "data"}``.

    On success: ``data`` is populated (``None`` for bare acknowledgements).
    On failure: ``success`` is False and ``message`` says why.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = True
    message: str = ""
    data: T | None = None
    count: int | None = Field(default=None, ge=0)
    received_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @classmethod
    def ok(cls, data: T, message: str = "") -> "BackendResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str, **extra: Any) -> "BackendResponse[T]":
        return cls(success=False, message=message, **extra)
