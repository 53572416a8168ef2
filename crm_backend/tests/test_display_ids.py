"""
Unit tests for display ID allocation and formatting.
"""

import pytest
from crm_backend.app.models.route_interest_enums import DisplayIdPrefix
from crm_backend.app.services.display_ids import (
    MAX_COUNTER,
    format_display_id,
    new_id,
    next_display_id,
    parse_display_id,
)


def test_format_boundaries():
    """Counters roll over to the next Greek letter every 999."""
    assert format_display_id(DisplayIdPrefix.ROUTE_INTEREST, 1) == "ROI-alpha-001"
    assert format_display_id(DisplayIdPrefix.ROUTE_INTEREST, 999) == "ROI-alpha-999"
    assert format_display_id(DisplayIdPrefix.ROUTE_INTEREST, 1000) == "ROI-beta-001"
    assert format_display_id(DisplayIdPrefix.ROUTE_EXPRESSION, MAX_COUNTER) == "REX-omega-999"


@pytest.mark.parametrize("counter", [0, -1, MAX_COUNTER + 1])
def test_format_rejects_out_of_range(counter):
    with pytest.raises(ValueError):
        format_display_id(DisplayIdPrefix.ROUTE_INTEREST, counter)


def test_parse_display_id():
    parsed = parse_display_id("REX-beta-042")
    assert parsed.prefix == "REX"
    assert parsed.letter == "beta"
    assert parsed.number == 42
    assert parsed.counter == 999 + 42


@pytest.mark.parametrize("value", ["ROI-alpha", "ROI-aleph-001", "ROI-alpha-000", "ROI-alpha-1000", "ROI-alpha-x1"])
def test_parse_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_display_id(value)


def test_new_id_is_unique():
    ids = {new_id() for _ in range(100)}
    assert len(ids) == 100


@pytest.mark.asyncio
async def test_next_display_id_counts_per_prefix(db_session):
    """Each prefix keeps its own sequence."""
    first = await next_display_id(db_session, DisplayIdPrefix.ROUTE_INTEREST)
    second = await next_display_id(db_session, DisplayIdPrefix.ROUTE_INTEREST)
    other = await next_display_id(db_session, DisplayIdPrefix.ROUTE_EXPRESSION)
    await db_session.commit()

    assert first == "ROI-alpha-001"
    assert second == "ROI-alpha-002"
    assert other == "REX-alpha-001"
