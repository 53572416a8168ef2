"""
Route Interest Pydantic schemas.

Defines request and response models for route interests and the city
autocomplete.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class RouteInterestCreate(BaseModel):
    """Schema for creating (or resolving) a route interest."""
    origin_city: str = Field(..., min_length=1, max_length=200)
    origin_country: str = Field(..., min_length=1, max_length=200)
    destination_city: str = Field(..., min_length=1, max_length=200)
    destination_country: str = Field(..., min_length=1, max_length=200)


class RouteInterestResponse(BaseModel):
    """Schema for route interest response."""
    id: str
    display_id: str
    origin_city: str
    origin_country: str
    destination_city: str
    destination_country: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RouteInterestWithCounts(RouteInterestResponse):
    """Route interest with expression statistics (list view)."""
    human_count: int
    expression_count: int


class RouteInterestExpressionBrief(BaseModel):
    """Expression as embedded in a route interest detail."""
    id: str
    display_id: str
    human_id: str
    route_interest_id: str
    activity_id: Optional[str]
    frequency: str
    travel_year: Optional[int]
    travel_month: Optional[int]
    travel_day: Optional[int]
    notes: Optional[str]
    created_at: datetime
    human_name: Optional[str]
    activity_subject: Optional[str]


class RouteInterestDetail(RouteInterestResponse):
    """Route interest with its enriched expressions."""
    expressions: List[RouteInterestExpressionBrief]


class CityResponse(BaseModel):
    """Autocomplete candidate."""
    city: str
    country: str
