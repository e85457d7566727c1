"""ShiftType model: the catalog of valid shift codes."""
from sqlalchemy import Column, String, Boolean, DateTime
from datetime import datetime
from rosterdesk.database import Base


class ShiftType(Base):
    """Shift type catalog entry."""

    __tablename__ = "shift_types"

    id = Column(String(36), primary_key=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    color = Column(String(20), nullable=True)
    is_work_shift = Column(Boolean, nullable=False, default=True)
    is_system_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ShiftType(code={self.code}, work={self.is_work_shift})>"

    def validate(self) -> None:
        """Validate shift type data."""
        if not self.id:
            raise ValueError("Shift type ID is required")
        if not self.code or not self.code.strip():
            raise ValueError("Code is required")
