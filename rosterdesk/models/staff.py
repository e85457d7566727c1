"""Staff model for rostered security/cleaning personnel."""
from sqlalchemy import Column, String, Integer, Boolean, Numeric, Enum, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from rosterdesk.database import Base


class StaffType(str, enum.Enum):
    """Staff type enumeration. Regular staff sort before spares."""
    REGULAR = "REGULAR"
    SPARE = "SPARE"


class Staff(Base):
    """Staff model with the default shift rule used for days without entries."""

    __tablename__ = "staff"

    id = Column(String(36), primary_key=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    code = Column(String(50), nullable=True)
    name = Column(String(255), nullable=False)
    position = Column(String(255), nullable=False, default="")
    wage_per_day = Column(Numeric(10, 2), nullable=False, default=0)
    staff_type = Column(Enum(StaffType), nullable=False, default=StaffType.REGULAR)
    default_shift = Column(String(50), nullable=False, default="OFF")
    weekly_off_day = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="staff")
    entries = relationship("RosterEntry", back_populates="staff")

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, name={self.name}, project_id={self.project_id})>"

    def validate(self) -> None:
        """Validate staff data."""
        if not self.id:
            raise ValueError("Staff ID is required")
        if not self.project_id:
            raise ValueError("Project ID is required")
        if not self.name:
            raise ValueError("Name is required")
        if self.weekly_off_day is not None and not (0 <= self.weekly_off_day <= 6):
            raise ValueError("Weekly off day must be between 0 and 6")
        if self.wage_per_day is not None and self.wage_per_day < 0:
            raise ValueError("Wage per day must be non-negative")
