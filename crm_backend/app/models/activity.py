"""
Activity database model.

An activity (email, call, meeting...) can serve as evidence for a
route-interest expression; only its subject is surfaced by the API.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from crm_backend.app.db.session import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True)
    display_id = Column(String(32), unique=True, nullable=False)

    type = Column(String(50), nullable=False, default="email")
    subject = Column(String(500), nullable=False)
    activity_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    human_id = Column(String(36), ForeignKey('humans.id'), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Activity(id={self.id}, subject='{self.subject}')>"
