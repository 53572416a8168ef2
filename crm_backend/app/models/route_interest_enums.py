"""
Route-interest enumerations.
"""

import enum


class RouteInterestFrequency(str, enum.Enum):
    """How often the human expects to travel the route."""
    ONE_TIME = "one_time"
    REPEAT = "repeat"


class DisplayIdPrefix(str, enum.Enum):
    """Prefixes for human-readable display IDs."""
    HUMAN = "HUM"
    ACTIVITY = "ACT"
    GEO_INTEREST = "GEO"
    ROUTE_INTEREST = "ROI"
    ROUTE_EXPRESSION = "REX"
