"""Activity model definitions."""

from sqlalchemy import Column, Date, DateTime, String
from slotboard.database import Base


class Activity(Base):
    """Audit entry written for every booking and cancellation."""
    __tablename__ = "activities"

    id = Column(String, primary_key=True)
    member_id = Column(String)
    member_name = Column(String, nullable=False)
    action = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    device_info = Column(String)
    created_at = Column(DateTime(timezone=True), nullable=False)
