"""
Integration tests for the Route Interest resolver.

Covers dedupe-on-write, counts, detail enrichment and cascade delete, both
through the service layer and the HTTP API.
"""

import pytest
from unittest.mock import patch
from sqlalchemy import func, select

from crm_backend.app.core.exceptions import RouteInterestNotFoundError
from crm_backend.app.domain.route_interests.expression_service import RouteInterestExpressionService
from crm_backend.app.domain.route_interests.resolver import RouteInterestResolver
from crm_backend.app.models.route_interest import RouteInterest
from crm_backend.app.models.route_interest_expression import RouteInterestExpression

LONDON_PARIS = ("London", "United Kingdom", "Paris", "France")
PARIS_LONDON = ("Paris", "France", "London", "United Kingdom")


async def count_rows(db, model, *criteria):
    result = await db.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar()


# TEST 1: Idempotent creation
@pytest.mark.asyncio
async def test_resolve_or_create_is_idempotent(db_session):
    """Same 4-tuple twice -> same row, created only the first time."""
    first, created_first = await RouteInterestResolver.create(db_session, *LONDON_PARIS)
    second, created_second = await RouteInterestResolver.create(db_session, *LONDON_PARIS)

    assert created_first is True
    assert created_second is False
    assert first.id == second.id
    assert first.display_id == "ROI-alpha-001"
    assert first.created_at == first.updated_at
    assert await count_rows(db_session, RouteInterest) == 1


# TEST 2: Direction and case matter
@pytest.mark.asyncio
async def test_reversed_route_is_distinct(db_session):
    forward, _ = await RouteInterestResolver.create(db_session, *LONDON_PARIS)
    backward, created = await RouteInterestResolver.create(db_session, *PARIS_LONDON)

    assert created is True
    assert forward.id != backward.id
    assert await count_rows(db_session, RouteInterest) == 2


@pytest.mark.asyncio
async def test_route_match_is_case_sensitive(db_session):
    await RouteInterestResolver.create(db_session, *LONDON_PARIS)
    _, created = await RouteInterestResolver.create(
        db_session, "london", "United Kingdom", "Paris", "France"
    )

    assert created is True
    assert await count_rows(db_session, RouteInterest) == 2


@pytest.mark.asyncio
async def test_concurrent_create_returns_existing_row(db_session, session_factory):
    """
    Another writer commits the same 4-tuple between our lookup and insert:
    the unique constraint fires and the committed row is returned.
    """
    async with session_factory() as other:
        winner, created = await RouteInterestResolver.create(other, *LONDON_PARIS)
    assert created is True

    real_find = RouteInterestResolver.find_by_route
    lookups = []

    async def stale_first_lookup(db, *route):
        lookups.append(route)
        if len(lookups) == 1:
            return None
        return await real_find(db, *route)

    with patch.object(RouteInterestResolver, "find_by_route", stale_first_lookup):
        route_interest, created = await RouteInterestResolver.resolve_or_create(
            db_session, *LONDON_PARIS
        )

    assert created is False
    assert route_interest.id == winner.id
    assert len(lookups) == 2
    assert await count_rows(db_session, RouteInterest) == 1


# TEST 3: Counts
@pytest.mark.asyncio
async def test_list_with_counts_counts_distinct_humans(db_session, make_human):
    """3 expressions from 2 humans -> human_count 2, expression_count 3."""
    ada = await make_human("Ada", "Lovelace")
    alan = await make_human("Alan", "Turing")
    route, _ = await RouteInterestResolver.create(db_session, *LONDON_PARIS)
    empty_route, _ = await RouteInterestResolver.create(db_session, *PARIS_LONDON)

    for human in (ada, ada, alan):
        await RouteInterestExpressionService.create(
            db_session, human_id=human.id, route_interest_id=route.id
        )

    rows = await RouteInterestResolver.list_with_counts(db_session)
    counts = {ri.id: (humans, expressions) for ri, humans, expressions in rows}

    assert counts[route.id] == (2, 3)
    assert counts[empty_route.id] == (0, 0)


# TEST 4: Detail enrichment
@pytest.mark.asyncio
async def test_get_detail_enriches_expressions(db_session, make_human, make_activity):
    human = await make_human("Grace", "Hopper")
    activity = await make_activity("Asked about summer flights", human.id)
    route, _ = await RouteInterestResolver.create(db_session, *LONDON_PARIS)

    with_activity = await RouteInterestExpressionService.create(
        db_session, human_id=human.id, route_interest_id=route.id, activity_id=activity.id
    )
    without_activity = await RouteInterestExpressionService.create(
        db_session, human_id=human.id, route_interest_id=route.id
    )

    detail = await RouteInterestResolver.get_detail(db_session, route.id)

    assert detail["id"] == route.id
    assert detail["origin_city"] == "London"
    by_id = {expr["id"]: expr for expr in detail["expressions"]}
    assert by_id[with_activity.id]["human_name"] == "Grace Hopper"
    assert by_id[with_activity.id]["activity_subject"] == "Asked about summer flights"
    assert by_id[without_activity.id]["activity_subject"] is None


@pytest.mark.asyncio
async def test_get_detail_unknown_id(db_session):
    with pytest.raises(RouteInterestNotFoundError):
        await RouteInterestResolver.get_detail(db_session, "missing")


# TEST 5: Cascade delete
@pytest.mark.asyncio
async def test_delete_cascades_to_own_expressions_only(db_session, make_human):
    human = await make_human()
    doomed, _ = await RouteInterestResolver.create(db_session, *LONDON_PARIS)
    kept, _ = await RouteInterestResolver.create(db_session, *PARIS_LONDON)

    for _ in range(3):
        await RouteInterestExpressionService.create(db_session, human_id=human.id, route_interest_id=doomed.id)
    survivor = await RouteInterestExpressionService.create(
        db_session, human_id=human.id, route_interest_id=kept.id
    )

    await RouteInterestResolver.delete(db_session, doomed.id)

    assert await count_rows(db_session, RouteInterest, RouteInterest.id == doomed.id) == 0
    assert await count_rows(
        db_session, RouteInterestExpression, RouteInterestExpression.route_interest_id == doomed.id
    ) == 0
    assert await count_rows(
        db_session, RouteInterestExpression, RouteInterestExpression.id == survivor.id
    ) == 1


@pytest.mark.asyncio
async def test_delete_unknown_id(db_session):
    with pytest.raises(RouteInterestNotFoundError):
        await RouteInterestResolver.delete(db_session, "missing")


# TEST 6: HTTP API
ROUTE_PAYLOAD = {
    "origin_city": "London",
    "origin_country": "United Kingdom",
    "destination_city": "Paris",
    "destination_country": "France",
}


@pytest.mark.asyncio
async def test_api_create_is_idempotent(client):
    """201 on first create, 200 with the same row afterwards."""
    first = await client.post("/v1/route-interests", json=ROUTE_PAYLOAD)
    second = await client.post("/v1/route-interests", json=ROUTE_PAYLOAD)

    assert first.status_code == 201
    assert second.status_code == 200
    assert first.json()["data"]["id"] == second.json()["data"]["id"]
    assert first.json()["data"]["display_id"].startswith("ROI-")


@pytest.mark.asyncio
async def test_api_create_rejects_blank_city(client):
    response = await client.post("/v1/route-interests", json={**ROUTE_PAYLOAD, "origin_city": ""})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_api_list_and_detail(client, make_human):
    human = await make_human("Ada", "Lovelace")
    created = await client.post("/v1/route-interests", json=ROUTE_PAYLOAD)
    route_id = created.json()["data"]["id"]
    await client.post(
        "/v1/route-interest-expressions",
        json={"human_id": human.id, "route_interest_id": route_id, "notes": "Summer"},
    )

    listing = await client.get("/v1/route-interests")
    assert listing.status_code == 200
    [item] = listing.json()["data"]
    assert item["human_count"] == 1
    assert item["expression_count"] == 1

    detail = await client.get(f"/v1/route-interests/{route_id}")
    assert detail.status_code == 200
    [expression] = detail.json()["data"]["expressions"]
    assert expression["human_name"] == "Ada Lovelace"
    assert expression["notes"] == "Summer"


@pytest.mark.asyncio
async def test_api_not_found_body(client):
    response = await client.get("/v1/route-interests/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "ROUTE_INTEREST_NOT_FOUND"
    assert "error" in body


@pytest.mark.asyncio
async def test_api_delete(client):
    created = await client.post("/v1/route-interests", json=ROUTE_PAYLOAD)
    route_id = created.json()["data"]["id"]

    response = await client.delete(f"/v1/route-interests/{route_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    again = await client.delete(f"/v1/route-interests/{route_id}")
    assert again.status_code == 404
