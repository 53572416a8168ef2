"""
Geo-interest service.

Maintains the (city, country) registry that feeds the city autocomplete.
"""

import logging
from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.app.core.exceptions import GeoInterestNotFoundError
from crm_backend.app.models.geo_interest import GeoInterest
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix
from crm_backend.app.services.display_ids import new_id, next_display_id

logger = logging.getLogger(__name__)


async def create_geo_interest(
    db: AsyncSession,
    city: str,
    country: str
) -> Tuple[GeoInterest, bool]:
    """
    Create a geo-interest, reusing an existing row for the same pair.

    Args:
        db: Database session
        city: City name (exact match)
        country: Country name (exact match)

    Returns:
        (geo_interest, was_created)
    """
    result = await db.execute(
        select(GeoInterest).where(
            GeoInterest.city == city,
            GeoInterest.country == country
        )
    )
    existing = result.scalars().first()
    if existing is not None:
        return existing, False

    geo_interest = GeoInterest(
        id=new_id(),
        display_id=await next_display_id(db, DisplayIdPrefix.GEO_INTEREST),
        city=city,
        country=country,
        created_at=datetime.now(timezone.utc)
    )
    db.add(geo_interest)
    await db.commit()

    logger.info("Created geo-interest %s (%s, %s)", geo_interest.display_id, city, country)
    return geo_interest, True


async def list_geo_interests(db: AsyncSession) -> List[GeoInterest]:
    result = await db.execute(
        select(GeoInterest).order_by(GeoInterest.city, GeoInterest.country)
    )
    return result.scalars().all()


async def search_geo_interests(db: AsyncSession, query: str) -> List[GeoInterest]:
    """
    Find geo-interests whose city or country contains ``query``.

    A blank query returns an empty list.
    """
    if not query or not query.strip():
        return []

    result = await db.execute(
        select(GeoInterest).where(
            or_(
                GeoInterest.city.icontains(query, autoescape=True),
                GeoInterest.country.icontains(query, autoescape=True)
            )
        ).order_by(GeoInterest.city, GeoInterest.country)
    )
    return result.scalars().all()


async def delete_geo_interest(db: AsyncSession, geo_interest_id: str) -> None:
    """
    Delete a geo-interest.

    Raises:
        GeoInterestNotFoundError: If the id does not resolve
    """
    geo_interest = await db.get(GeoInterest, geo_interest_id)
    if geo_interest is None:
        raise GeoInterestNotFoundError(geo_interest_id)

    await db.delete(geo_interest)
    await db.commit()
    logger.info("Deleted geo-interest %s", geo_interest.display_id)
