"""Member model definitions."""

from sqlalchemy import Column, DateTime, String
from slotboard.database import Base


class Member(Base):
    """A person who can hold one of the daily slots."""
    __tablename__ = "members"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    initials = Column(String, nullable=False)
    avatar_color = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True))
