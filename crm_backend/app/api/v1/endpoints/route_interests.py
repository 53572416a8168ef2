"""
Route Interest API Endpoints.

List, inspect, create (idempotent on the route tuple) and delete route
interests, plus the city autocomplete used by the route entry form.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from crm_backend.app.db.session import get_db
from crm_backend.app.domain.route_interests.city_autocomplete import search_cities
from crm_backend.app.domain.route_interests.resolver import RouteInterestResolver
from crm_backend.app.schemas.common import DataResponse, SuccessResponse
from crm_backend.app.schemas.route_interest import (
    CityResponse,
    RouteInterestCreate,
    RouteInterestDetail,
    RouteInterestResponse,
    RouteInterestWithCounts,
)

router = APIRouter(prefix="/route-interests", tags=["Route Interests"])


@router.get("", response_model=DataResponse[List[RouteInterestWithCounts]])
async def list_route_interests(db: AsyncSession = Depends(get_db)):
    """
    List all route interests with human and expression counts.
    """
    rows = await RouteInterestResolver.list_with_counts(db)

    return DataResponse[List[RouteInterestWithCounts]](data=[
        RouteInterestWithCounts(
            **RouteInterestResponse.model_validate(route_interest).model_dump(),
            human_count=human_count,
            expression_count=expression_count
        )
        for route_interest, human_count, expression_count in rows
    ])


# Declared before /{route_interest_id} so "cities" is not taken for an id
@router.get("/cities", response_model=DataResponse[List[CityResponse]])
async def autocomplete_cities(
    q: str = Query("", description="Text contained in the city name"),
    db: AsyncSession = Depends(get_db)
):
    """
    City autocomplete across route interests and geo-interests.

    Returns unique (city, country) pairs sorted by city.
    """
    cities = await search_cities(db, q)
    return DataResponse[List[CityResponse]](data=[CityResponse(**city) for city in cities])


@router.get("/{route_interest_id}", response_model=DataResponse[RouteInterestDetail])
async def get_route_interest(route_interest_id: str, db: AsyncSession = Depends(get_db)):
    """
    Get a route interest with its expressions.

    Returns 404 if the route interest does not exist.
    """
    detail = await RouteInterestResolver.get_detail(db, route_interest_id)
    return DataResponse[RouteInterestDetail](data=RouteInterestDetail(**detail))


@router.post("", response_model=DataResponse[RouteInterestResponse], status_code=status.HTTP_201_CREATED)
async def create_route_interest(
    route_data: RouteInterestCreate,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a route interest.

    Idempotent on (origin_city, origin_country, destination_city,
    destination_country): an existing row is returned with 200 instead
    of 201.
    """
    route_interest, created = await RouteInterestResolver.create(
        db,
        origin_city=route_data.origin_city,
        origin_country=route_data.origin_country,
        destination_city=route_data.destination_city,
        destination_country=route_data.destination_country
    )

    if not created:
        response.status_code = status.HTTP_200_OK

    return DataResponse[RouteInterestResponse](data=RouteInterestResponse.model_validate(route_interest))


@router.delete("/{route_interest_id}", response_model=SuccessResponse)
async def delete_route_interest(route_interest_id: str, db: AsyncSession = Depends(get_db)):
    """
    Delete a route interest and all of its expressions.
    """
    await RouteInterestResolver.delete(db, route_interest_id)
    return SuccessResponse()
