"""Pydantic building blocks shared by every HTTP-facing model.

JSON bodies use camelCase field names. Successful responses are wrapped in
``{"success": true, "message": ..., "data": ...}``; the error envelope is
produced by ``NotebaseError.to_response``.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None
