"""
Geo-Interest API Endpoints.

Geo-interests are standalone (city, country) records; they also feed the
route city autocomplete.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from crm_backend.app.db.session import get_db
from crm_backend.app.schemas.common import DataResponse, SuccessResponse
from crm_backend.app.schemas.geo_interest import GeoInterestCreate, GeoInterestResponse
from crm_backend.app.services.geo_interests import (
    create_geo_interest,
    delete_geo_interest,
    list_geo_interests,
    search_geo_interests,
)

router = APIRouter(prefix="/geo-interests", tags=["Geo Interests"])


@router.get("", response_model=DataResponse[List[GeoInterestResponse]])
async def list_all(db: AsyncSession = Depends(get_db)):
    geo_interests = await list_geo_interests(db)
    return DataResponse[List[GeoInterestResponse]](
        data=[GeoInterestResponse.model_validate(gi) for gi in geo_interests]
    )


@router.get("/search", response_model=DataResponse[List[GeoInterestResponse]])
async def search(
    q: str = Query("", description="Text contained in the city or country"),
    db: AsyncSession = Depends(get_db)
):
    """
    Search geo-interests by city or country.
    """
    geo_interests = await search_geo_interests(db, q)
    return DataResponse[List[GeoInterestResponse]](
        data=[GeoInterestResponse.model_validate(gi) for gi in geo_interests]
    )


@router.post("", response_model=DataResponse[GeoInterestResponse], status_code=status.HTTP_201_CREATED)
async def create(
    geo_data: GeoInterestCreate,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a geo-interest (idempotent on city + country).
    """
    geo_interest, created = await create_geo_interest(db, geo_data.city, geo_data.country)
    if not created:
        response.status_code = status.HTTP_200_OK
    return DataResponse[GeoInterestResponse](data=GeoInterestResponse.model_validate(geo_interest))


@router.delete("/{geo_interest_id}", response_model=SuccessResponse)
async def delete(geo_interest_id: str, db: AsyncSession = Depends(get_db)):
    await delete_geo_interest(db, geo_interest_id)
    return SuccessResponse()
