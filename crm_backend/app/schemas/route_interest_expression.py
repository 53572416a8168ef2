"""
Route Interest Expression Pydantic schemas.

Defines request and response models for expressions.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional
from crm_backend.app.models.route_interest_enums import RouteInterestFrequency


class RouteInterestExpressionCreate(BaseModel):
    """
    Schema for creating an expression.

    Either ``route_interest_id`` or all four origin/destination fields
    must be supplied.
    """
    human_id: str = Field(..., min_length=1)
    route_interest_id: Optional[str] = Field(None, min_length=1)
    origin_city: Optional[str] = Field(None, min_length=1, max_length=200)
    origin_country: Optional[str] = Field(None, min_length=1, max_length=200)
    destination_city: Optional[str] = Field(None, min_length=1, max_length=200)
    destination_country: Optional[str] = Field(None, min_length=1, max_length=200)
    activity_id: Optional[str] = Field(None, min_length=1)
    frequency: RouteInterestFrequency = RouteInterestFrequency.ONE_TIME
    travel_year: Optional[int] = Field(None, ge=2020, le=2100)
    travel_month: Optional[int] = Field(None, ge=1, le=12)
    travel_day: Optional[int] = Field(None, ge=1, le=31)
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_route_reference(self):
        has_route = all((
            self.origin_city, self.origin_country,
            self.destination_city, self.destination_country,
        ))
        if not self.route_interest_id and not has_route:
            raise ValueError(
                "Either route_interest_id or all four origin/destination city/country fields are required"
            )
        return self


class RouteInterestExpressionUpdate(BaseModel):
    """
    Schema for patching an expression.

    Only fields present in the payload are applied; explicit null clears a
    nullable field.
    """
    frequency: Optional[RouteInterestFrequency] = None
    travel_year: Optional[int] = Field(None, ge=2020, le=2100)
    travel_month: Optional[int] = Field(None, ge=1, le=12)
    travel_day: Optional[int] = Field(None, ge=1, le=31)
    notes: Optional[str] = Field(None, max_length=2000)
    activity_id: Optional[str] = Field(None, min_length=1)

    @field_validator("frequency")
    @classmethod
    def frequency_not_null(cls, value):
        if value is None:
            raise ValueError("frequency cannot be null")
        return value


class RouteInterestExpressionResponse(BaseModel):
    """Schema for a stored expression."""
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

    class Config:
        from_attributes = True


class RouteInterestExpressionListItem(RouteInterestExpressionResponse):
    """Expression enriched with human, route and activity details."""
    human_name: Optional[str]
    origin_city: Optional[str]
    origin_country: Optional[str]
    destination_city: Optional[str]
    destination_country: Optional[str]
    activity_subject: Optional[str]


class RouteInterestExpressionDetail(RouteInterestExpressionListItem):
    """Single expression view, adds display ids of the related rows."""
    human_display_id: Optional[str]
    route_display_id: Optional[str]
