"""Roster edit window (edit cutoff) policy and project cutoff settings."""
from datetime import datetime, date
from calendar import monthrange
from dateutil.relativedelta import relativedelta
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from rosterdesk.models.project import Project
from rosterdesk.config import settings as app_settings
from rosterdesk.exceptions import (
    InvalidRangeError,
    MissingFieldError,
    ResourceNotFoundError,
    EditWindowClosedError
)


logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def get_edit_deadline(year: int, month: int, cutoff_day: int, use_next_month: bool) -> datetime:
    """Compute the last instant a roster for (year, month) may be edited.

    The cutoff day is clamped to 1-31 and then to the length of the target
    month, which is the roster month itself or the month after it.

    Args:
        year: Roster year
        month: Roster month (1-12)
        cutoff_day: Project cutoff day of month
        use_next_month: Whether the cutoff falls in the following month

    Returns:
        Naive local datetime at 23:59:59.999 on the cutoff day
    """
    safe_cutoff = _clamp(cutoff_day, 1, 31)
    month = _clamp(month, 1, 12)

    target = date(year, month, 1)
    if use_next_month:
        target += relativedelta(months=1)
    target_year, target_month = target.year, target.month

    day = min(safe_cutoff, monthrange(target_year, target_month)[1])
    return datetime(target_year, target_month, day, 23, 59, 59, 999000)


def is_edit_window_open(
    year: int,
    month: int,
    cutoff_day: int,
    use_next_month: bool,
    now: Optional[datetime] = None
) -> bool:
    """Return True while ``now`` has not passed the edit deadline (inclusive)."""
    if now is None:
        now = datetime.now()
    return now <= get_edit_deadline(year, month, cutoff_day, use_next_month)


class EditWindowService:
    """Service for project edit cutoff settings and edit window checks."""

    def __init__(self, db: Session):
        """Initialize edit window service.

        Args:
            db: Database session
        """
        self.db = db

    @staticmethod
    def _cutoff_of(project: Project):
        cutoff_day = project.edit_cutoff_day
        if cutoff_day is None:
            cutoff_day = app_settings.default_edit_cutoff_day
        use_next_month = project.edit_cutoff_next_month
        if use_next_month is None:
            use_next_month = app_settings.default_edit_cutoff_next_month
        return cutoff_day, bool(use_next_month)

    def _get_project(self, project_id: str) -> Project:
        if not project_id:
            raise MissingFieldError("project_id")
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundError("project", project_id)
        return project

    def describe(
        self,
        project: Project,
        year: int,
        month: int,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Describe the edit window of a project's roster period.

        Returns:
            Dictionary with cutoff settings, deadline and open flag
        """
        if now is None:
            now = datetime.now()
        cutoff_day, use_next_month = self._cutoff_of(project)
        deadline = get_edit_deadline(year, month, cutoff_day, use_next_month)
        return {
            "edit_cutoff_day": cutoff_day,
            "edit_cutoff_next_month": use_next_month,
            "deadline": deadline,
            "is_open": now <= deadline,
        }

    def ensure_open(
        self,
        project: Project,
        year: int,
        month: int,
        now: Optional[datetime] = None
    ) -> None:
        """Raise if the project's roster for (year, month) is no longer editable.

        Raises:
            EditWindowClosedError: If the deadline has passed
        """
        window = self.describe(project, year, month, now)
        if not window["is_open"]:
            logger.warning(
                f"Edit window closed: project={project.id}, period={year}-{month}, "
                f"deadline={window['deadline'].isoformat()}"
            )
            raise EditWindowClosedError(year, month, window["deadline"])

    def get_cutoff(self, project_id: str) -> Dict[str, Any]:
        """Get a project's edit cutoff settings."""
        project = self._get_project(project_id)
        cutoff_day, use_next_month = self._cutoff_of(project)
        return {
            "project_id": project.id,
            "edit_cutoff_day": cutoff_day,
            "edit_cutoff_next_month": use_next_month,
        }

    def set_cutoff(self, project_id: str, cutoff_day: int, use_next_month: bool) -> Project:
        """Set or update a project's edit cutoff.

        Args:
            project_id: Project to update
            cutoff_day: The cutoff day (1-31)
            use_next_month: Whether the cutoff falls in the following month

        Returns:
            The updated Project

        Raises:
            InvalidRangeError: If cutoff_day is not between 1 and 31
            ResourceNotFoundError: If the project does not exist
        """
        if not 1 <= cutoff_day <= 31:
            raise InvalidRangeError("edit_cutoff_day", cutoff_day, 1, 31)

        project = self._get_project(project_id)

        try:
            project.edit_cutoff_day = cutoff_day
            project.edit_cutoff_next_month = bool(use_next_month)
            project.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(project)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update edit cutoff for project {project_id}: {str(e)}", exc_info=True)
            raise

        logger.info(
            f"Edit cutoff updated: project={project_id}, day={cutoff_day}, next_month={bool(use_next_month)}"
        )
        return project
