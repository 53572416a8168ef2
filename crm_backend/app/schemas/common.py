"""
Response envelopes shared by all endpoints.

Successful responses wrap their payload as ``{"data": ...}``; deletes answer
``{"success": true}``.
"""

from pydantic import BaseModel
from typing import Generic, TypeVar

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Schema for the ``{"data": ...}`` envelope."""
    data: T


class SuccessResponse(BaseModel):
    """Schema for delete acknowledgements."""
    success: bool = True
