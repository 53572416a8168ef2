"""
Display ID counter model.

One row per display-id prefix holding the last counter handed out.
"""

from sqlalchemy import Column, Integer, String
from crm_backend.app.db.session import Base


class DisplayIdCounter(Base):
    __tablename__ = "display_id_counters"

    prefix = Column(String(8), primary_key=True)
    counter = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<DisplayIdCounter(prefix='{self.prefix}', counter={self.counter})>"
