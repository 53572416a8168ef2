"""
Geo-Interest Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime


class GeoInterestCreate(BaseModel):
    """Schema for creating (or resolving) a geo-interest."""
    city: str = Field(..., min_length=1, max_length=200)
    country: str = Field(..., min_length=1, max_length=200)


class GeoInterestResponse(BaseModel):
    """Schema for geo-interest response."""
    id: str
    display_id: str
    city: str
    country: str
    created_at: datetime

    class Config:
        from_attributes = True
