"""
Route Interest Resolver (Domain Logic).

Owns create / dedupe / read / delete of route interests.

A route interest is identified by its exact
(origin_city, origin_country, destination_city, destination_country) tuple;
every write path goes through ``resolve_or_create`` so identical tuples
collapse onto one row.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, distinct, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.app.core.exceptions import RouteInterestNotFoundError
from crm_backend.app.domain.route_interests.enrichment import (
    activity_subject,
    human_name,
    load_by_ids,
    row_to_dict,
)
from crm_backend.app.models.activity import Activity
from crm_backend.app.models.human import Human
from crm_backend.app.models.route_interest import RouteInterest
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix
from crm_backend.app.models.route_interest_expression import RouteInterestExpression
from crm_backend.app.services.display_ids import new_id, next_display_id

logger = logging.getLogger(__name__)


class RouteInterestResolver:

    @staticmethod
    async def find_by_route(
        db: AsyncSession,
        origin_city: str,
        origin_country: str,
        destination_city: str,
        destination_country: str,
    ) -> Optional[RouteInterest]:
        """Exact, case-sensitive lookup on all four route fields."""
        result = await db.execute(
            select(RouteInterest).where(
                RouteInterest.origin_city == origin_city,
                RouteInterest.origin_country == origin_country,
                RouteInterest.destination_city == destination_city,
                RouteInterest.destination_country == destination_country,
            )
        )
        return result.scalars().first()

    @staticmethod
    async def resolve_or_create(
        db: AsyncSession,
        origin_city: str,
        origin_country: str,
        destination_city: str,
        destination_country: str,
    ) -> Tuple[RouteInterest, bool]:
        """
        Return the route interest for a 4-tuple, creating it if needed.

        The new row is flushed, not committed; the caller owns the
        transaction.

        Flow:
        1. Exact lookup -> found: return it, no write
        2. Allocate id + ROI display id, stamp timestamps, insert
        3. Unique violation on the 4-tuple (a concurrent writer won):
           roll back and return the winner

        Returns:
            (route_interest, was_created)
        """
        route = (origin_city, origin_country, destination_city, destination_country)

        existing = await RouteInterestResolver.find_by_route(db, *route)
        if existing is not None:
            return existing, False

        now = datetime.now(timezone.utc)
        route_interest = RouteInterest(
            id=new_id(),
            display_id=await next_display_id(db, DisplayIdPrefix.ROUTE_INTEREST),
            origin_city=origin_city,
            origin_country=origin_country,
            destination_city=destination_city,
            destination_country=destination_country,
            created_at=now,
            updated_at=now,
        )
        db.add(route_interest)

        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            winner = await RouteInterestResolver.find_by_route(db, *route)
            if winner is None:
                raise
            logger.info("Route interest %s created concurrently, reusing it", winner.display_id)
            return winner, False

        logger.info(
            "Created route interest %s (%s, %s -> %s, %s)",
            route_interest.display_id, *route
        )
        return route_interest, True

    @staticmethod
    async def create(
        db: AsyncSession,
        origin_city: str,
        origin_country: str,
        destination_city: str,
        destination_country: str,
    ) -> Tuple[RouteInterest, bool]:
        """Idempotent create: resolve_or_create and commit."""
        route_interest, created = await RouteInterestResolver.resolve_or_create(
            db, origin_city, origin_country, destination_city, destination_country
        )
        if created:
            await db.commit()
        return route_interest, created

    @staticmethod
    async def list_with_counts(db: AsyncSession) -> List[Tuple[RouteInterest, int, int]]:
        """
        List every route interest with its expression statistics.

        Returns:
            (route_interest, human_count, expression_count) tuples, where
            human_count counts distinct humans across the expressions
        """
        query = (
            select(
                RouteInterest,
                func.count(distinct(RouteInterestExpression.human_id)),
                func.count(RouteInterestExpression.id),
            )
            .outerjoin(
                RouteInterestExpression,
                RouteInterestExpression.route_interest_id == RouteInterest.id,
            )
            .group_by(RouteInterest.id)
            .order_by(RouteInterest.created_at, RouteInterest.id)
        )
        result = await db.execute(query)
        return [(ri, human_count, expression_count) for ri, human_count, expression_count in result.all()]

    @staticmethod
    async def get(db: AsyncSession, route_interest_id: str) -> RouteInterest:
        route_interest = await db.get(RouteInterest, route_interest_id)
        if route_interest is None:
            raise RouteInterestNotFoundError(route_interest_id)
        return route_interest

    @staticmethod
    async def get_detail(db: AsyncSession, route_interest_id: str) -> Dict[str, Any]:
        """
        Fetch a route interest with its expressions.

        Each expression carries ``human_name`` ("first last") and
        ``activity_subject``; both are None when the related row is missing.

        Raises:
            RouteInterestNotFoundError: If the id does not resolve
        """
        route_interest = await RouteInterestResolver.get(db, route_interest_id)

        result = await db.execute(
            select(RouteInterestExpression)
            .where(RouteInterestExpression.route_interest_id == route_interest_id)
            .order_by(RouteInterestExpression.created_at, RouteInterestExpression.id)
        )
        expressions = result.scalars().all()

        humans = await load_by_ids(db, Human, (e.human_id for e in expressions))
        activities = await load_by_ids(db, Activity, (e.activity_id for e in expressions))

        detail = row_to_dict(route_interest)
        detail["expressions"] = [
            {
                **row_to_dict(expr),
                "human_name": human_name(humans.get(expr.human_id)),
                "activity_subject": activity_subject(activities.get(expr.activity_id)),
            }
            for expr in expressions
        ]
        return detail

    @staticmethod
    async def delete(db: AsyncSession, route_interest_id: str) -> None:
        """
        Delete a route interest and every expression attached to it.

        Expressions go first, then the parent row; both statements commit
        together.

        Raises:
            RouteInterestNotFoundError: If the id does not resolve
        """
        route_interest = await RouteInterestResolver.get(db, route_interest_id)

        removed = await db.execute(
            delete(RouteInterestExpression).where(
                RouteInterestExpression.route_interest_id == route_interest_id
            )
        )
        await db.execute(delete(RouteInterest).where(RouteInterest.id == route_interest_id))
        await db.commit()

        logger.info(
            "Deleted route interest %s with %d expression(s)",
            route_interest.display_id, removed.rowcount
        )
