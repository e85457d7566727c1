"""Roster and roster entry models."""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from calendar import monthrange
from rosterdesk.database import Base


class Roster(Base):
    """Roster model: the single container per project and month."""

    __tablename__ = "rosters"

    id = Column(String(36), primary_key=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Unique constraint: one roster per project per month
    __table_args__ = (
        UniqueConstraint('project_id', 'year', 'month', name='uq_roster_project_period'),
    )

    # Relationships
    project = relationship("Project", back_populates="rosters")
    entries = relationship("RosterEntry", back_populates="roster", cascade="all, delete-orphan")

    @property
    def days_in_month(self) -> int:
        return monthrange(self.year, self.month)[1]

    def __repr__(self) -> str:
        return f"<Roster(id={self.id}, project_id={self.project_id}, period={self.year}-{self.month})>"

    def validate(self) -> None:
        """Validate roster data."""
        if not self.id:
            raise ValueError("Roster ID is required")
        if not self.project_id:
            raise ValueError("Project ID is required")
        if not self.year:
            raise ValueError("Year is required")
        if not self.month:
            raise ValueError("Month is required")
        if not (1 <= self.month <= 12):
            raise ValueError("Month must be between 1 and 12")


class RosterEntry(Base):
    """Explicit shift override for one staff member on one day."""

    __tablename__ = "roster_entries"

    id = Column(String(36), primary_key=True)
    roster_id = Column(String(36), ForeignKey("rosters.id"), nullable=False, index=True)
    staff_id = Column(String(36), ForeignKey("staff.id"), nullable=False, index=True)
    day = Column(Integer, nullable=False)
    shift_code = Column(String(50), nullable=False)
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Unique constraint: one entry per staff per day in a roster
    __table_args__ = (
        UniqueConstraint('roster_id', 'staff_id', 'day', name='uq_roster_staff_day'),
    )

    # Relationships
    roster = relationship("Roster", back_populates="entries")
    staff = relationship("Staff", back_populates="entries")

    def __repr__(self) -> str:
        return f"<RosterEntry(id={self.id}, staff_id={self.staff_id}, day={self.day}, shift={self.shift_code})>"

    def validate(self) -> None:
        """Validate roster entry data."""
        if not self.id:
            raise ValueError("Roster entry ID is required")
        if not self.roster_id:
            raise ValueError("Roster ID is required")
        if not self.staff_id:
            raise ValueError("Staff ID is required")
        if not self.shift_code:
            raise ValueError("Shift code is required")
        if self.day is None or not (1 <= self.day <= 31):
            raise ValueError("Day must be between 1 and 31")
