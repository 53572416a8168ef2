"""
City autocomplete for route entry.

Merges candidate cities from two independent sources:
- route interests (both origin and destination)
- geo-interests

Results are unique per exact (city, country) pair and sorted by city name.
"""

import locale
import logging
import unicodedata
from typing import Dict, List, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.app.models.geo_interest import GeoInterest
from crm_backend.app.models.route_interest import RouteInterest

logger = logging.getLogger(__name__)


def configure_collation(name: str = "") -> None:
    """
    Select the LC_COLLATE locale used by ``city_sort_key``.

    An empty name takes the locale from the environment. An unknown name
    leaves the current collation in place.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error:
        logger.warning(
            "Collation locale %r is not available, keeping %s",
            name, locale.setlocale(locale.LC_COLLATE)
        )


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def city_sort_key(city: str) -> Tuple[str, str]:
    """
    Collation key for city names.

    Primary order ignores case and accents ("amsterdam" < "Évora" < "Zurich"),
    then the raw name breaks ties so the order is total.
    """
    return locale.strxfrm(_fold(city)), locale.strxfrm(city)


async def search_cities(db: AsyncSession, query: str) -> List[Dict[str, str]]:
    """
    Return cities whose name contains ``query``.

    Matching rules:
    1. Blank query -> [] without touching the database
    2. Store-side substring pre-filter on both sources
    3. Route-interest cities are re-checked case-insensitively in memory,
       origin and destination independently
    4. Geo-interest rows are admitted as returned by the store
    5. Deduplicate on (city, country), first occurrence wins
    6. Sort by city, ignoring case and accents, under the LC_COLLATE locale

    Args:
        db: Database session
        query: Text typed by the user

    Returns:
        List of {"city": ..., "country": ...} dicts
    """
    if not query or not query.strip():
        return []

    # autoescape: "%" and "_" in the query are matched as literal characters
    route_rows = (await db.execute(
        select(
            RouteInterest.origin_city,
            RouteInterest.origin_country,
            RouteInterest.destination_city,
            RouteInterest.destination_country,
        ).where(
            or_(
                RouteInterest.origin_city.icontains(query, autoescape=True),
                RouteInterest.destination_city.icontains(query, autoescape=True),
            )
        )
    )).all()

    geo_rows = (await db.execute(
        select(GeoInterest.city, GeoInterest.country).where(
            GeoInterest.city.icontains(query, autoescape=True)
        )
    )).all()

    needle = query.lower()
    cities: Dict[Tuple[str, str], Dict[str, str]] = {}

    for row in route_rows:
        for city, country in (
            (row.origin_city, row.origin_country),
            (row.destination_city, row.destination_country),
        ):
            if needle in city.lower():
                cities.setdefault((city, country), {"city": city, "country": country})

    for row in geo_rows:
        cities.setdefault((row.city, row.country), {"city": row.city, "country": row.country})

    return sorted(cities.values(), key=lambda c: city_sort_key(c["city"]))
