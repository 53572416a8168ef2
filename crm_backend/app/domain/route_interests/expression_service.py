"""
Route Interest Expression Service (Domain Logic).

Handles create / read / update / delete of expressions: one human's stated
interest in one route, optionally evidenced by an activity.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_backend.app.core.exceptions import (
    ActivityNotFoundError,
    HumanNotFoundError,
    RouteExpressionNotFoundError,
)
from crm_backend.app.domain.route_interests.enrichment import (
    activity_subject,
    human_name,
    load_by_ids,
    row_to_dict,
)
from crm_backend.app.domain.route_interests.resolver import RouteInterestResolver
from crm_backend.app.models.activity import Activity
from crm_backend.app.models.human import Human
from crm_backend.app.models.route_interest import RouteInterest
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix, RouteInterestFrequency
from crm_backend.app.models.route_interest_expression import RouteInterestExpression
from crm_backend.app.services.display_ids import new_id, next_display_id

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"frequency", "travel_year", "travel_month", "travel_day", "notes", "activity_id"}
)


def _route_fields(route_interest: Optional[RouteInterest]) -> Dict[str, Optional[str]]:
    return {
        "origin_city": route_interest.origin_city if route_interest else None,
        "origin_country": route_interest.origin_country if route_interest else None,
        "destination_city": route_interest.destination_city if route_interest else None,
        "destination_country": route_interest.destination_country if route_interest else None,
    }


class RouteInterestExpressionService:

    @staticmethod
    async def create(
        db: AsyncSession,
        human_id: str,
        route_interest_id: Optional[str] = None,
        origin_city: Optional[str] = None,
        origin_country: Optional[str] = None,
        destination_city: Optional[str] = None,
        destination_country: Optional[str] = None,
        activity_id: Optional[str] = None,
        frequency: Optional[str] = None,
        travel_year: Optional[int] = None,
        travel_month: Optional[int] = None,
        travel_day: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> RouteInterestExpression:
        """
        Create an expression, resolving its route interest first.

        Flow:
        1. Verify the human exists
        2. No route_interest_id but all four city/country fields: resolve or
           create the route interest. A route_interest_id given directly is
           used as-is.
        3. Verify the activity exists (if given)
        4. Insert the expression with REX display id and defaults

        The route interest and the expression commit together.

        Raises:
            HumanNotFoundError: If human_id does not resolve
            ActivityNotFoundError: If activity_id is given and does not resolve
            ValueError: If no route can be determined
        """
        human = await db.get(Human, human_id)
        if human is None:
            raise HumanNotFoundError(human_id)

        route = (origin_city, origin_country, destination_city, destination_country)
        if not route_interest_id and all(route):
            route_interest, _ = await RouteInterestResolver.resolve_or_create(db, *route)
            route_interest_id = route_interest.id

        if not route_interest_id:
            raise ValueError(
                "Either route_interest_id or all four origin/destination city/country fields are required"
            )

        if activity_id:
            activity = await db.get(Activity, activity_id)
            if activity is None:
                raise ActivityNotFoundError(activity_id)

        expression = RouteInterestExpression(
            id=new_id(),
            display_id=await next_display_id(db, DisplayIdPrefix.ROUTE_EXPRESSION),
            human_id=human_id,
            route_interest_id=route_interest_id,
            activity_id=activity_id,
            frequency=frequency or RouteInterestFrequency.ONE_TIME.value,
            travel_year=travel_year,
            travel_month=travel_month,
            travel_day=travel_day,
            notes=notes,
            created_at=datetime.now(timezone.utc),
        )
        db.add(expression)
        await db.commit()
        await db.refresh(expression)

        logger.info(
            "Created route interest expression %s (human=%s, route_interest=%s)",
            expression.display_id, human_id, route_interest_id
        )
        return expression

    @staticmethod
    async def get(db: AsyncSession, expression_id: str) -> RouteInterestExpression:
        expression = await db.get(RouteInterestExpression, expression_id)
        if expression is None:
            raise RouteExpressionNotFoundError(expression_id)
        return expression

    @staticmethod
    async def get_detail(db: AsyncSession, expression_id: str) -> Dict[str, Any]:
        """
        Fetch one expression with its human, route and activity details.

        A missing related row yields None fields rather than an error.

        Raises:
            RouteExpressionNotFoundError: If the id does not resolve
        """
        expression = await RouteInterestExpressionService.get(db, expression_id)

        route_interest = await db.get(RouteInterest, expression.route_interest_id)
        human = await db.get(Human, expression.human_id)
        activity = await db.get(Activity, expression.activity_id) if expression.activity_id else None

        return {
            **row_to_dict(expression),
            "human_name": human_name(human),
            "human_display_id": human.display_id if human else None,
            **_route_fields(route_interest),
            "route_display_id": route_interest.display_id if route_interest else None,
            "activity_subject": activity_subject(activity),
        }

    @staticmethod
    async def list(
        db: AsyncSession,
        human_id: Optional[str] = None,
        route_interest_id: Optional[str] = None,
        activity_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List expressions matching every given filter.

        No filters returns all expressions. Each entry is enriched with
        ``human_name``, the route's city/country fields and
        ``activity_subject``.
        """
        query = select(RouteInterestExpression)
        if human_id:
            query = query.where(RouteInterestExpression.human_id == human_id)
        if route_interest_id:
            query = query.where(RouteInterestExpression.route_interest_id == route_interest_id)
        if activity_id:
            query = query.where(RouteInterestExpression.activity_id == activity_id)

        result = await db.execute(
            query.order_by(RouteInterestExpression.created_at, RouteInterestExpression.id)
        )
        expressions = result.scalars().all()

        humans = await load_by_ids(db, Human, (e.human_id for e in expressions))
        routes = await load_by_ids(db, RouteInterest, (e.route_interest_id for e in expressions))
        activities = await load_by_ids(db, Activity, (e.activity_id for e in expressions))

        return [
            {
                **row_to_dict(expr),
                "human_name": human_name(humans.get(expr.human_id)),
                **_route_fields(routes.get(expr.route_interest_id)),
                "activity_subject": activity_subject(activities.get(expr.activity_id)),
            }
            for expr in expressions
        ]

    @staticmethod
    async def update(
        db: AsyncSession,
        expression_id: str,
        changes: Dict[str, Any],
    ) -> RouteInterestExpression:
        """
        Apply a partial patch to an expression.

        Keys absent from ``changes`` are left untouched; keys present are
        written verbatim, None included. activity_id is not re-validated.

        Raises:
            RouteExpressionNotFoundError: If the id does not resolve
            ValueError: If ``changes`` names a field that cannot be updated
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        expression = await RouteInterestExpressionService.get(db, expression_id)

        for field, value in changes.items():
            setattr(expression, field, value)

        await db.commit()
        await db.refresh(expression)
        return expression

    @staticmethod
    async def delete(db: AsyncSession, expression_id: str) -> None:
        """
        Delete a single expression.

        Raises:
            RouteExpressionNotFoundError: If the id does not resolve
        """
        expression = await RouteInterestExpressionService.get(db, expression_id)
        await db.delete(expression)
        await db.commit()
        logger.info("Deleted route interest expression %s", expression.display_id)
