"""
Route Interest Expression database model.

One human's declared interest in one route, optionally evidenced by an
activity.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from crm_backend.app.db.session import Base
from crm_backend.app.models.route_interest_enums import RouteInterestFrequency


class RouteInterestExpression(Base):
    """
    Route Interest Expression model.

    Belongs to exactly one Human and one RouteInterest. Travel date parts
    are independent and nullable; no calendar validation happens here.
    """
    __tablename__ = "route_interest_expressions"

    id = Column(String(36), primary_key=True)
    display_id = Column(String(32), unique=True, nullable=False)

    # References
    human_id = Column(String(36), ForeignKey('humans.id'), nullable=False, index=True)
    route_interest_id = Column(String(36), ForeignKey('route_interests.id'), nullable=False, index=True)
    activity_id = Column(String(36), ForeignKey('activities.id'), nullable=True)

    # Stored as plain text; allowed values are enforced by the request schemas
    frequency = Column(String(20), nullable=False, default=RouteInterestFrequency.ONE_TIME.value)

    travel_year = Column(Integer, nullable=True)
    travel_month = Column(Integer, nullable=True)
    travel_day = Column(Integer, nullable=True)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return (
            f"<RouteInterestExpression(id={self.id}, human_id={self.human_id}, "
            f"route_interest_id={self.route_interest_id}, frequency='{self.frequency}')>"
        )
