"""Booking model definitions."""

from sqlalchemy import Column, Date, DateTime, String, UniqueConstraint
from slotboard.database import Base


class Booking(Base):
    """One member holding one slot on one weekday."""
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("member_id", "date", name="uq_bookings_member_date"),
    )

    id = Column(String, primary_key=True)
    member_id = Column(String, nullable=False, index=True)
    member_name = Column(String)  # copied at booking time
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
