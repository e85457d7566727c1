"""Roster management service: period reads and entry mutations."""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import uuid
import logging

from rosterdesk.models.project import Project
from rosterdesk.models.staff import Staff
from rosterdesk.models.roster import Roster, RosterEntry
from rosterdesk.models.shift_type import ShiftType
from rosterdesk.services.edit_window import EditWindowService
from rosterdesk.services.import_validator import (
    ImportEntry,
    normalize_entry,
    validate_entry_values,
    validate_import_batch
)
from rosterdesk.services.roster_matrix import build_matrix, days_in_month
from rosterdesk.exceptions import (
    MissingFieldError,
    InvalidPeriodError,
    ResourceNotFoundError,
    StaffNotInProjectError
)


logger = logging.getLogger(__name__)


def parse_period(year: Any, month: Any) -> tuple:
    """Parse and check a roster period.

    Raises:
        InvalidPeriodError: If year or month is not numeric or month is not 1-12
    """
    try:
        year_num = int(str(year).strip())
        month_num = int(str(month).strip())
    except (TypeError, ValueError):
        raise InvalidPeriodError(year, month)
    if not 1 <= month_num <= 12 or year_num < 1:
        raise InvalidPeriodError(year, month)
    return year_num, month_num


class RosterService:
    """Service for handling roster operations."""

    def __init__(self, db: Session):
        """
        Initialize roster service.

        Args:
            db: Database session
        """
        self.db = db
        self.edit_window = EditWindowService(db)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _get_project(self, project_id: str) -> Project:
        if not project_id:
            raise MissingFieldError("project_id")
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundError("project", project_id)
        return project

    def _get_roster(self, roster_id: str) -> Roster:
        if not roster_id:
            raise MissingFieldError("roster_id")
        roster = self.db.query(Roster).filter(Roster.id == roster_id).first()
        if not roster:
            raise ResourceNotFoundError("roster", roster_id)
        return roster

    def get_valid_shift_codes(self) -> Set[str]:
        """All codes currently present in the shift type catalog."""
        return {code for (code,) in self.db.query(ShiftType.code).all()}

    def get_active_staff(self, project_id: str) -> List[Staff]:
        """Active staff of a project in display order."""
        return self.db.query(Staff).filter(
            Staff.project_id == project_id,
            Staff.is_active.is_(True)
        ).order_by(
            Staff.display_order.asc(),
            Staff.staff_type.asc(),
            Staff.created_at.asc()
        ).all()

    def _project_staff_ids(self, project_id: str) -> Set[str]:
        return {
            staff_id for (staff_id,) in
            self.db.query(Staff.id).filter(Staff.project_id == project_id).all()
        }

    def find_roster(self, project_id: str, year: int, month: int) -> Optional[Roster]:
        return self.db.query(Roster).filter(
            Roster.project_id == project_id,
            Roster.year == year,
            Roster.month == month
        ).first()

    def get_or_create_roster(self, project_id: str, year: int, month: int) -> Roster:
        """
        Find the roster of a project period, creating it on first access.

        A concurrent creator losing the unique constraint race re-reads the
        winner's row, so each period has exactly one roster.
        """
        roster = self.find_roster(project_id, year, month)
        if roster:
            return roster

        roster = Roster(
            id=str(uuid.uuid4()),
            project_id=project_id,
            year=year,
            month=month,
            created_at=datetime.utcnow()
        )
        roster.validate()

        try:
            self.db.add(roster)
            self.db.commit()
            self.db.refresh(roster)
        except IntegrityError:
            self.db.rollback()
            roster = self.find_roster(project_id, year, month)
            if roster is None:
                raise
        logger.info(f"Created roster {roster.id} for project {project_id} ({year}-{month})")
        return roster

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_roster(
        self,
        project_id: str,
        year: Any,
        month: Any,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Get the resolved roster of a project period.

        Args:
            project_id: Project ID
            year: Roster year
            month: Roster month (1-12)
            now: Current time for the edit window flag (defaults to now)

        Returns:
            Dictionary with roster identity, day count, edit window and the
            staff x day matrix

        Raises:
            MissingFieldError: If project_id is empty
            InvalidPeriodError: If year/month are invalid
            ResourceNotFoundError: If the project does not exist
        """
        if not project_id:
            raise MissingFieldError("project_id")
        year_num, month_num = parse_period(year, month)
        project = self._get_project(project_id)

        roster = self.get_or_create_roster(project.id, year_num, month_num)
        active_staff = self.get_active_staff(project.id)
        entries = self.db.query(RosterEntry).filter(
            RosterEntry.roster_id == roster.id
        ).order_by(RosterEntry.day.asc()).all()

        return {
            "id": roster.id,
            "project_id": project.id,
            "project_name": project.name,
            "year": roster.year,
            "month": roster.month,
            "days_in_month": roster.days_in_month,
            "edit_window": self.edit_window.describe(project, roster.year, roster.month, now),
            "matrix": build_matrix(active_staff, entries, roster.year, roster.month),
        }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _check_entries(
        self,
        roster: Roster,
        raw_entries: Iterable[Any]
    ) -> List[ImportEntry]:
        """Shape, range, catalog and membership checks for upserts."""
        last_day = roster.days_in_month
        valid_codes = self.get_valid_shift_codes()
        entries = []
        for index, raw in enumerate(raw_entries):
            entry = normalize_entry(raw, index)
            validate_entry_values(entry, last_day, valid_codes)
            entries.append(entry)

        project_staff = self._project_staff_ids(roster.project_id)
        outsiders = {entry.staff_id for entry in entries} - project_staff
        if outsiders:
            raise StaffNotInProjectError(roster.project_id, outsiders)
        return entries

    def _find_entry(self, roster_id: str, staff_id: str, day: int) -> Optional[RosterEntry]:
        return self.db.query(RosterEntry).filter(
            RosterEntry.roster_id == roster_id,
            RosterEntry.staff_id == staff_id,
            RosterEntry.day == day
        ).first()

    def _upsert(self, roster_id: str, entry: ImportEntry) -> RosterEntry:
        """Insert or update the entry on its (roster, staff, day) key.

        The insert runs in a savepoint; losing the insert race to another
        writer turns it into an update of the winner's row. Must run inside
        the caller's transaction; flushes but does not commit.
        """
        existing = self._find_entry(roster_id, entry.staff_id, entry.day)

        if existing is None:
            row = RosterEntry(
                id=str(uuid.uuid4()),
                roster_id=roster_id,
                staff_id=entry.staff_id,
                day=entry.day,
                shift_code=entry.shift_code,
                notes=entry.notes
            )
            try:
                # Flushed on release, so later entries of the same batch see this row
                with self.db.begin_nested():
                    self.db.add(row)
                return row
            except IntegrityError:
                existing = self._find_entry(roster_id, entry.staff_id, entry.day)
                if existing is None:
                    raise
                logger.info(
                    f"Roster {roster_id}: staff {entry.staff_id} day {entry.day} "
                    f"inserted concurrently, updating instead"
                )

        existing.shift_code = entry.shift_code
        existing.notes = entry.notes
        existing.updated_at = datetime.utcnow()
        return existing

    def upsert_entry(
        self,
        roster_id: str,
        staff_id: str,
        day: Any,
        shift_code: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> RosterEntry:
        """
        Set the shift of one staff member on one day.

        Args:
            roster_id: Roster ID
            staff_id: Staff ID (must belong to the roster's project)
            day: Day of month
            shift_code: Shift code from the catalog
            notes: Optional notes
            now: Current time for the edit window check (defaults to now)

        Returns:
            The created or updated RosterEntry

        Raises:
            ValidationError: Missing field, day out of range, unknown shift code
            ResourceNotFoundError: Roster missing
            EditWindowClosedError: The roster can no longer be edited
            StaffNotInProjectError: Staff belongs to another project
        """
        if not roster_id:
            raise MissingFieldError("roster_id")
        normalize_entry(
            {"staff_id": staff_id, "day": day, "shift_code": shift_code}, 0
        )

        roster = self._get_roster(roster_id)
        self.edit_window.ensure_open(roster.project, roster.year, roster.month, now)

        staff = self.db.query(Staff).filter(Staff.id == str(staff_id).strip()).first()
        if not staff:
            raise ResourceNotFoundError("staff", staff_id)

        (entry,) = self._check_entries(
            roster,
            [{"staff_id": staff_id, "day": day, "shift_code": shift_code, "notes": notes}]
        )

        try:
            row = self._upsert(roster.id, entry)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to upsert roster entry: {str(e)}", exc_info=True)
            raise

        logger.info(
            f"Roster {roster.id}: staff {entry.staff_id} day {entry.day} -> {entry.shift_code}"
        )
        return row

    def batch_upsert_entries(
        self,
        roster_id: str,
        entries: List[Any],
        now: Optional[datetime] = None
    ) -> List[RosterEntry]:
        """
        Upsert many entries of one roster as a single transaction.

        Later entries for the same (staff, day) overwrite earlier ones.

        Raises:
            MissingFieldError: If roster_id or entries are empty
            ValidationError: If any entry is invalid (nothing is written)
            ResourceNotFoundError: Roster missing
            EditWindowClosedError: The roster can no longer be edited
            StaffNotInProjectError: An entry references staff of another project
        """
        if not roster_id:
            raise MissingFieldError("roster_id")
        if not entries:
            raise MissingFieldError("entries")

        roster = self._get_roster(roster_id)
        self.edit_window.ensure_open(roster.project, roster.year, roster.month, now)
        checked = self._check_entries(roster, entries)

        try:
            rows = [self._upsert(roster.id, entry) for entry in checked]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Batch update of roster {roster.id} failed: {str(e)}", exc_info=True)
            raise

        logger.info(f"Roster {roster.id}: batch updated {len(rows)} entries")
        return rows

    def import_roster(
        self,
        project_id: str,
        year: Any,
        month: Any,
        entries: List[Any],
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Replace every entry of a project period with an imported batch.

        The whole batch is validated first; the delete and the insert then
        commit together.

        Returns:
            Dictionary with roster_id and count

        Raises:
            ValidationError: Invalid period or batch
            ConflictError: Duplicate pair or staff outside the project
            ResourceNotFoundError: Project missing
            EditWindowClosedError: The period can no longer be edited
        """
        if not project_id:
            raise MissingFieldError("project_id")
        if entries is None:
            raise MissingFieldError("entries")
        year_num, month_num = parse_period(year, month)

        project = self._get_project(project_id)
        self.edit_window.ensure_open(project, year_num, month_num, now)

        checked = validate_import_batch(
            entries,
            days_in_month(year_num, month_num),
            self.get_valid_shift_codes(),
            self._project_staff_ids(project.id),
            project_id=project.id
        )

        roster = self.get_or_create_roster(project.id, year_num, month_num)

        try:
            self.db.query(RosterEntry).filter(
                RosterEntry.roster_id == roster.id
            ).delete(synchronize_session=False)
            self.db.add_all([
                RosterEntry(
                    id=str(uuid.uuid4()),
                    roster_id=roster.id,
                    staff_id=entry.staff_id,
                    day=entry.day,
                    shift_code=entry.shift_code,
                    notes=entry.notes
                )
                for entry in checked
            ])
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Import into roster {roster.id} failed: {str(e)}", exc_info=True)
            raise

        logger.info(f"Imported {len(checked)} entries into roster {roster.id}")
        return {"roster_id": roster.id, "count": len(checked)}

    def delete_entry(self, entry_id: str, now: Optional[datetime] = None) -> None:
        """
        Delete one roster entry; the day falls back to the staff default.

        Raises:
            ResourceNotFoundError: Entry or roster missing
            EditWindowClosedError: The roster can no longer be edited
        """
        if not entry_id:
            raise MissingFieldError("entry_id")
        entry = self.db.query(RosterEntry).filter(RosterEntry.id == entry_id).first()
        if not entry:
            raise ResourceNotFoundError("roster_entry", entry_id)

        roster = self._get_roster(entry.roster_id)
        self.edit_window.ensure_open(roster.project, roster.year, roster.month, now)

        try:
            self.db.delete(entry)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Deleted roster entry {entry_id} from roster {roster.id}")
