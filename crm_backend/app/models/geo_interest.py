"""
Geo-Interest database model.

A (city, country) place of interest, recorded independently of routes.
Feeds the city autocomplete alongside route interests.
"""

from sqlalchemy import Column, String, DateTime, UniqueConstraint
from crm_backend.app.db.session import Base


class GeoInterest(Base):
    __tablename__ = "geo_interests"
    __table_args__ = (
        UniqueConstraint("city", "country", name="geo_interests_city_country_unique"),
    )

    id = Column(String(36), primary_key=True)
    display_id = Column(String(32), unique=True, nullable=False)

    city = Column(String(200), nullable=False, index=True)
    country = Column(String(200), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<GeoInterest(id={self.id}, city='{self.city}', country='{self.country}')>"
