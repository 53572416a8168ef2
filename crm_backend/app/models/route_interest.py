"""
Route Interest database model.

A deduplicated origin -> destination pair that humans can express
interest in.
"""

from sqlalchemy import Column, String, DateTime, UniqueConstraint
from crm_backend.app.db.session import Base


class RouteInterest(Base):
    """
    Route Interest model.

    At most one row exists per exact (origin_city, origin_country,
    destination_city, destination_country) tuple. Comparison is
    case-sensitive and direction matters: A -> B and B -> A are two rows.
    """
    __tablename__ = "route_interests"
    __table_args__ = (
        UniqueConstraint(
            "origin_city", "origin_country", "destination_city", "destination_country",
            name="route_interests_origin_dest_unique",
        ),
    )

    id = Column(String(36), primary_key=True)
    display_id = Column(String(32), unique=True, nullable=False)

    # Route endpoints
    origin_city = Column(String(200), nullable=False)
    origin_country = Column(String(200), nullable=False)
    destination_city = Column(String(200), nullable=False)
    destination_country = Column(String(200), nullable=False)

    # Timestamps (stamped by the resolver, both equal on creation)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return (
            f"<RouteInterest(id={self.id}, display_id='{self.display_id}', "
            f"route='{self.origin_city}, {self.origin_country} -> "
            f"{self.destination_city}, {self.destination_country}')>"
        )
