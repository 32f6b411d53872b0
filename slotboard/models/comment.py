"""Comment model definitions."""

from sqlalchemy import Column, Date, DateTime, String, Text
from slotboard.database import Base


class Comment(Base):
    """Free-text note left on a date."""
    __tablename__ = "comments"

    id = Column(String, primary_key=True)
    member_id = Column(String, nullable=False)
    member_name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
