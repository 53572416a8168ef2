"""
Route Interest Expression API Endpoints.

An expression records that a human is interested in a route. Creating one
with city/country fields instead of a route_interest_id resolves (or
creates) the route interest on the fly.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from crm_backend.app.db.session import get_db
from crm_backend.app.domain.route_interests.expression_service import RouteInterestExpressionService
from crm_backend.app.schemas.common import DataResponse, SuccessResponse
from crm_backend.app.schemas.route_interest_expression import (
    RouteInterestExpressionCreate,
    RouteInterestExpressionDetail,
    RouteInterestExpressionListItem,
    RouteInterestExpressionResponse,
    RouteInterestExpressionUpdate,
)

router = APIRouter(prefix="/route-interest-expressions", tags=["Route Interest Expressions"])


@router.get("", response_model=DataResponse[List[RouteInterestExpressionListItem]])
async def list_expressions(
    human_id: Optional[str] = Query(None, description="Only expressions of this human"),
    route_interest_id: Optional[str] = Query(None, description="Only expressions of this route"),
    activity_id: Optional[str] = Query(None, description="Only expressions evidenced by this activity"),
    db: AsyncSession = Depends(get_db)
):
    """
    List expressions, optionally filtered (filters are AND-combined).
    """
    expressions = await RouteInterestExpressionService.list(
        db,
        human_id=human_id,
        route_interest_id=route_interest_id,
        activity_id=activity_id
    )
    return DataResponse[List[RouteInterestExpressionListItem]](
        data=[RouteInterestExpressionListItem(**expr) for expr in expressions]
    )


@router.get("/{expression_id}", response_model=DataResponse[RouteInterestExpressionDetail])
async def get_expression(expression_id: str, db: AsyncSession = Depends(get_db)):
    """
    Get one expression with its human, route and activity details.
    """
    detail = await RouteInterestExpressionService.get_detail(db, expression_id)
    return DataResponse[RouteInterestExpressionDetail](data=RouteInterestExpressionDetail(**detail))


@router.post("", response_model=DataResponse[RouteInterestExpressionResponse], status_code=status.HTTP_201_CREATED)
async def create_expression(
    expression_data: RouteInterestExpressionCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an expression.

    Returns 404 if the human or the activity does not exist.
    """
    expression = await RouteInterestExpressionService.create(
        db, **expression_data.model_dump(mode="json")
    )
    return DataResponse[RouteInterestExpressionResponse](
        data=RouteInterestExpressionResponse.model_validate(expression)
    )


@router.patch("/{expression_id}", response_model=DataResponse[RouteInterestExpressionResponse])
async def update_expression(
    expression_id: str,
    expression_data: RouteInterestExpressionUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update an expression.

    Omitted fields are left as they are; fields sent as null are cleared.
    """
    # Update fields (only if provided)
    changes = expression_data.model_dump(mode="json", exclude_unset=True)
    expression = await RouteInterestExpressionService.update(db, expression_id, changes)
    return DataResponse[RouteInterestExpressionResponse](
        data=RouteInterestExpressionResponse.model_validate(expression)
    )


@router.delete("/{expression_id}", response_model=SuccessResponse)
async def delete_expression(expression_id: str, db: AsyncSession = Depends(get_db)):
    await RouteInterestExpressionService.delete(db, expression_id)
    return SuccessResponse()
