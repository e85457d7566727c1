"""Staff default rule management."""
from datetime import datetime
from typing import Any, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from rosterdesk.models.staff import Staff
from rosterdesk.models.shift_type import ShiftType
from rosterdesk.services.default_propagation import DefaultChangePropagator, DefaultRule
from rosterdesk.services.roster_matrix import OFF_SHIFT
from rosterdesk.exceptions import (
    ValidationError,
    MissingFieldError,
    InvalidRangeError,
    InvalidShiftCodeError,
    ResourceNotFoundError,
    StaffNotInProjectError
)


logger = logging.getLogger(__name__)


class StaffService:
    """Service for staff operations that affect roster defaults."""

    def __init__(self, db: Session):
        """
        Initialize staff service.

        Args:
            db: Database session
        """
        self.db = db
        self.propagator = DefaultChangePropagator(db)

    def get_staff(self, staff_id: str) -> Staff:
        """Get a staff member or raise ResourceNotFoundError."""
        if not staff_id:
            raise MissingFieldError("staff_id")
        staff = self.db.query(Staff).filter(Staff.id == staff_id).first()
        if not staff:
            raise ResourceNotFoundError("staff", staff_id)
        return staff

    @staticmethod
    def current_rule(staff: Staff) -> DefaultRule:
        """Rule currently used for the staff member's days without entries."""
        return DefaultRule(staff.default_shift or OFF_SHIFT, staff.weekly_off_day)

    def _apply_rule(self, staff: Staff, new_rule: DefaultRule, now: Optional[datetime]) -> Staff:
        """Freeze past rosters with the old rule, then store the new one.

        Both steps commit together; on any failure nothing is written.
        """
        old_rule = self.current_rule(staff)
        try:
            created = self.propagator.propagate(
                staff.id, staff.project_id, old_rule, new_rule, now
            )
            staff.default_shift = new_rule.default_shift
            staff.weekly_off_day = new_rule.weekly_off_day
            staff.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(staff)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to apply default rule for staff {staff.id}: {str(e)}", exc_info=True)
            raise

        logger.info(
            f"Applied default rule for staff {staff.id}: {old_rule} -> {new_rule}, "
            f"froze {created} past entries"
        )
        return staff

    def apply_default_shift(
        self,
        staff_id: str,
        default_shift: str,
        now: Optional[datetime] = None
    ) -> Staff:
        """
        Change a staff member's default shift for the current month onwards.

        Past months are frozen with the old default first.

        Args:
            staff_id: Staff to update
            default_shift: New default shift code
            now: Current time (defaults to now)

        Returns:
            The updated Staff

        Raises:
            MissingFieldError: If default_shift is empty
            InvalidShiftCodeError: If default_shift is not in the catalog
            ResourceNotFoundError: If the staff member does not exist
        """
        if not default_shift or not isinstance(default_shift, str):
            raise MissingFieldError("default_shift")

        shift_type = self.db.query(ShiftType).filter(ShiftType.code == default_shift).first()
        if not shift_type:
            valid = [code for (code,) in self.db.query(ShiftType.code).all()]
            raise InvalidShiftCodeError(default_shift, valid)

        staff = self.get_staff(staff_id)
        new_rule = DefaultRule(default_shift, staff.weekly_off_day)
        return self._apply_rule(staff, new_rule, now)

    def apply_weekly_off_day(
        self,
        staff_id: str,
        weekly_off_day: Optional[Any],
        now: Optional[datetime] = None
    ) -> Staff:
        """
        Change a staff member's weekly off day for the current month onwards.

        Args:
            staff_id: Staff to update
            weekly_off_day: 0 (Sunday) to 6 (Saturday), or None for no fixed off day
            now: Current time (defaults to now)

        Returns:
            The updated Staff

        Raises:
            InvalidRangeError: If weekly_off_day is not 0-6 or None
            ResourceNotFoundError: If the staff member does not exist
        """
        new_off_day = None
        if weekly_off_day is not None:
            try:
                new_off_day = int(weekly_off_day)
            except (TypeError, ValueError):
                raise InvalidRangeError("weekly_off_day", weekly_off_day, 0, 6)
            if isinstance(weekly_off_day, bool) or str(new_off_day) != str(weekly_off_day).strip():
                raise InvalidRangeError("weekly_off_day", weekly_off_day, 0, 6)
            if not 0 <= new_off_day <= 6:
                raise InvalidRangeError("weekly_off_day", weekly_off_day, 0, 6)

        staff = self.get_staff(staff_id)
        new_rule = DefaultRule(staff.default_shift or OFF_SHIFT, new_off_day)
        return self._apply_rule(staff, new_rule, now)

    def toggle_status(self, staff_id: str) -> Staff:
        """Flip a staff member's active flag. Inactive staff leave the live roster."""
        staff = self.get_staff(staff_id)
        try:
            staff.is_active = not staff.is_active
            staff.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(staff)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Staff {staff.id} active={staff.is_active}")
        return staff

    def reorder_staff(self, project_id: str, ordered_staff_ids: List[str]) -> List[Staff]:
        """
        Set display order of every staff member of a project.

        Args:
            project_id: Project whose staff are reordered
            ordered_staff_ids: All staff IDs of the project, in the new order

        Returns:
            The staff in their new order

        Raises:
            MissingFieldError: If project_id or the ID list is empty
            ValidationError: If IDs repeat or do not cover the whole project
            StaffNotInProjectError: If an ID belongs to another project
        """
        if not project_id:
            raise MissingFieldError("project_id")
        if not ordered_staff_ids:
            raise MissingFieldError("ordered_staff_ids")
        if len(set(ordered_staff_ids)) != len(ordered_staff_ids):
            raise ValidationError(
                message="ordered_staff_ids must be unique",
                error_code="DUPLICATE_STAFF_ID"
            )

        project_staff = {
            s.id: s for s in self.db.query(Staff).filter(Staff.project_id == project_id).all()
        }
        outsiders = set(ordered_staff_ids) - set(project_staff)
        if outsiders:
            raise StaffNotInProjectError(project_id, outsiders)
        if len(ordered_staff_ids) != len(project_staff):
            raise ValidationError(
                message="ordered_staff_ids must include all staff in project",
                error_code="INCOMPLETE_STAFF_ORDER",
                details={"expected": len(project_staff), "received": len(ordered_staff_ids)}
            )

        try:
            for index, staff_id in enumerate(ordered_staff_ids, start=1):
                project_staff[staff_id].display_order = index
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return [project_staff[staff_id] for staff_id in ordered_staff_ids]
