"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from crm_backend.app.api.v1.endpoints import (
    route_interests, route_interest_expressions, geo_interests
)

router = APIRouter()

# Route interests + city autocomplete
router.include_router(route_interests.router)

# Expressions of interest in a route
router.include_router(route_interest_expressions.router)

# Geo-interests (second city source for autocomplete)
router.include_router(geo_interests.router)
