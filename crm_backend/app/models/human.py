"""
Human database model.

Only the columns the route-interest subsystem reads are mapped here:
names for display and the human-readable display id.
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from crm_backend.app.db.session import Base


class Human(Base):
    """A contact tracked by the CRM."""
    __tablename__ = "humans"

    id = Column(String(36), primary_key=True)
    display_id = Column(String(32), unique=True, nullable=False)

    first_name = Column(String(200), nullable=False)
    last_name = Column(String(200), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Human(id={self.id}, display_id='{self.display_id}', name='{self.full_name}')>"
