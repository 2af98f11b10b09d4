from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""

    code: int
    message: str
    data: Optional[T] = None
    errors: Optional[Any] = None
