"""Project model for building/site projects that own staff and rosters."""
from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from rosterdesk.database import Base
from rosterdesk.config import settings


class Project(Base):
    """Project model holding the roster edit cutoff policy."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    edit_cutoff_day = Column(Integer, nullable=False, default=settings.default_edit_cutoff_day)
    edit_cutoff_next_month = Column(Boolean, nullable=False, default=settings.default_edit_cutoff_next_month)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    staff = relationship("Staff", back_populates="project")
    rosters = relationship("Roster", back_populates="project")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"

    def validate(self) -> None:
        """Validate project data."""
        if not self.id:
            raise ValueError("Project ID is required")
        if not self.name:
            raise ValueError("Name is required")
        if self.edit_cutoff_day is not None and not (1 <= self.edit_cutoff_day <= 31):
            raise ValueError("Edit cutoff day must be between 1 and 31")
