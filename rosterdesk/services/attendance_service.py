"""Monthly attendance, deduction and salary reporting."""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
import logging

from rosterdesk.models.project import Project
from rosterdesk.models.staff import Staff
from rosterdesk.models.roster import Roster, RosterEntry
from rosterdesk.models.shift_type import ShiftType
from rosterdesk.services.roster_matrix import build_matrix
from rosterdesk.services.roster_service import parse_period
from rosterdesk.services.shift_classification import ShiftCategory, ShiftClassifier
from rosterdesk.exceptions import (
    MissingFieldError,
    InvalidRangeError,
    ResourceNotFoundError
)


logger = logging.getLogger(__name__)


TOTAL_FIELDS = {
    "total_work_days": "total_work_days",
    "total_absent": "total_absent",
    "total_sick_leave": "total_sick_leave",
    "total_personal_leave": "total_personal_leave",
    "total_vacation": "total_vacation",
    "total_deduction": "deduction_amount",
    "total_expected_salary": "expected_salary",
    "total_net_salary": "net_salary",
}


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def aggregate_month(
    staff_id: str,
    roster_id: str,
    wage_per_day: Any,
    daily_shift_codes: Iterable[str],
    classifier: Any
) -> Dict[str, Any]:
    """
    Attendance and salary figures of one staff member for one month.

    Absent days are simply not work days, so the net salary equals the
    expected salary; ``deduction_amount`` is reported for display only and
    must not be subtracted a second time.

    Args:
        staff_id: Staff ID
        roster_id: Roster ID
        wage_per_day: Daily wage
        daily_shift_codes: One shift code per day of the month
        classifier: ShiftClassifier, or the ShiftType catalog to build one from

    Returns:
        Dictionary of totals, deduction, expected and net salary
    """
    if not isinstance(classifier, ShiftClassifier):
        classifier = ShiftClassifier.from_catalog(classifier)
    wage = _to_decimal(wage_per_day)
    counts = {category: 0 for category in ShiftCategory}
    for shift_code in daily_shift_codes:
        category = classifier.classify(shift_code)
        if category is not None:
            counts[category] += 1

    total_work_days = counts[ShiftCategory.WORK]
    total_absent = counts[ShiftCategory.ABSENT]
    expected_salary = total_work_days * wage

    return {
        "staff_id": staff_id,
        "roster_id": roster_id,
        "wage_per_day": wage,
        "total_work_days": total_work_days,
        "total_absent": total_absent,
        "total_sick_leave": counts[ShiftCategory.SICK],
        "total_personal_leave": counts[ShiftCategory.PERSONAL],
        "total_vacation": counts[ShiftCategory.VACATION],
        "total_late": 0,
        "deduction_amount": total_absent * wage,
        "expected_salary": expected_salary,
        "net_salary": expected_salary,
    }


def sum_reports(reports: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Project or portfolio rollup: field-wise sums of per-staff results."""
    totals: Dict[str, Any] = {
        name: (Decimal("0") if name in ("total_deduction", "total_expected_salary", "total_net_salary") else 0)
        for name in TOTAL_FIELDS
    }
    for report in reports:
        for total_name, field in TOTAL_FIELDS.items():
            totals[total_name] += report[field]
    return totals


class AttendanceService:
    """Service for attendance reports derived from resolved rosters."""

    def __init__(self, db: Session):
        """
        Initialize attendance service.

        Args:
            db: Database session
        """
        self.db = db

    def get_classifier(self) -> ShiftClassifier:
        """Classifier built from the current shift type catalog."""
        return ShiftClassifier.from_catalog(self.db.query(ShiftType).all())

    def _roster_reports(
        self,
        roster: Roster,
        staff: List[Staff],
        classifier: ShiftClassifier
    ) -> List[Dict[str, Any]]:
        entries = self.db.query(RosterEntry).filter(RosterEntry.roster_id == roster.id).all()
        matrix = build_matrix(
            [member for member in staff if member.is_active], entries, roster.year, roster.month
        )

        reports = []
        for member in staff:
            row = matrix.get(member.id)
            if row is not None:
                codes = [cell["shift_code"] for cell in row["days"].values()]
            else:
                # Inactive staff have no default layer, only stored days count
                codes = [
                    entry.shift_code for entry in entries
                    if entry.staff_id == member.id and 1 <= entry.day <= roster.days_in_month
                ]
            report = aggregate_month(member.id, roster.id, member.wage_per_day, codes, classifier)
            report.update({
                "staff_name": member.name,
                "position": member.position,
                "is_active": member.is_active,
            })
            logger.debug(
                f"[Staff {member.name}] work={report['total_work_days']}, "
                f"absent={report['total_absent']}, sick={report['total_sick_leave']}, "
                f"personal={report['total_personal_leave']}, vacation={report['total_vacation']}"
            )
            reports.append(report)
        return reports

    def _ordered_staff(self, project_id: str, active_only: bool) -> List[Staff]:
        query = self.db.query(Staff).filter(Staff.project_id == project_id)
        if active_only:
            query = query.filter(Staff.is_active.is_(True))
        return query.order_by(
            Staff.display_order.asc(),
            Staff.staff_type.asc(),
            Staff.created_at.asc()
        ).all()

    def get_monthly_report(self, project_id: str, year: Any, month: Any) -> Dict[str, Any]:
        """
        Monthly attendance and deduction report of a project.

        Every staff member of the project is included. Active staff are counted
        from the resolved roster; inactive staff only from their stored entries.

        Raises:
            MissingFieldError: If project_id is empty
            InvalidPeriodError: If year/month are invalid
            ResourceNotFoundError: If the project or its roster does not exist
        """
        if not project_id:
            raise MissingFieldError("project_id")
        year_num, month_num = parse_period(year, month)

        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundError("project", project_id)

        roster = self.db.query(Roster).filter(
            Roster.project_id == project_id,
            Roster.year == year_num,
            Roster.month == month_num
        ).first()
        if not roster:
            raise ResourceNotFoundError("roster", f"{project_id}/{year_num}-{month_num}")

        reports = self._roster_reports(
            roster, self._ordered_staff(project_id, active_only=False), self.get_classifier()
        )

        return {
            "project_id": project.id,
            "project_name": project.name,
            "year": year_num,
            "month": month_num,
            "staff": reports,
            "totals": sum_reports(reports),
        }

    def get_financial_overview(
        self,
        year: Any,
        month: Any,
        project_ids: Optional[Iterable[str]] = None
    ) -> Dict[str, Any]:
        """
        Net salary cost per active project for one month.

        Args:
            year: Year
            month: Month (1-12)
            project_ids: Optional restriction to these projects

        Returns:
            Dictionary with per-project summaries and the grand total
        """
        year_num, month_num = parse_period(year, month)
        classifier = self.get_classifier()

        query = self.db.query(Project).filter(Project.is_active.is_(True))
        if project_ids is not None:
            query = query.filter(Project.id.in_(list(project_ids)))
        projects = query.order_by(Project.name.asc()).all()

        summaries = []
        for project in projects:
            roster = self.db.query(Roster).filter(
                Roster.project_id == project.id,
                Roster.year == year_num,
                Roster.month == month_num
            ).first()

            staff_count = 0
            total_cost = Decimal("0")
            if roster:
                staff = self._ordered_staff(project.id, active_only=True)
                staff_count = len(staff)
                reports = self._roster_reports(roster, staff, classifier)
                total_cost = sum_reports(reports)["total_net_salary"]

            summaries.append({
                "project_id": project.id,
                "project_name": project.name,
                "staff_count": staff_count,
                "total_cost": total_cost,
            })

        return {
            "year": year_num,
            "month": month_num,
            "projects": summaries,
            "grand_total": sum((s["total_cost"] for s in summaries), Decimal("0")),
            "project_count": len(projects),
        }

    def get_day_stats(self, roster_id: str, day: Any) -> Dict[str, Any]:
        """
        Head counts per attendance category for one day of a roster.

        Counts come from the resolved matrix of active staff.

        Raises:
            ResourceNotFoundError: If the roster does not exist
            InvalidRangeError: If day is outside the roster month
        """
        if not roster_id:
            raise MissingFieldError("roster_id")
        roster = self.db.query(Roster).filter(Roster.id == roster_id).first()
        if not roster:
            raise ResourceNotFoundError("roster", roster_id)

        try:
            day_num = int(str(day).strip())
        except (TypeError, ValueError):
            raise InvalidRangeError("day", day, 1, roster.days_in_month)
        if not 1 <= day_num <= roster.days_in_month:
            raise InvalidRangeError("day", day, 1, roster.days_in_month)

        classifier = self.get_classifier()
        staff = self._ordered_staff(roster.project_id, active_only=True)
        entries = self.db.query(RosterEntry).filter(
            RosterEntry.roster_id == roster.id,
            RosterEntry.day == day_num
        ).all()
        matrix = build_matrix(staff, entries, roster.year, roster.month)

        stats: Dict[str, Any] = {
            "day": day_num,
            "total": len(matrix),
            "working": 0,
            "off": 0,
            "absent": 0,
            "sick_leave": 0,
            "personal_leave": 0,
            "vacation": 0,
            "by_shift": {},
        }
        category_keys = {
            ShiftCategory.WORK: "working",
            ShiftCategory.OFF: "off",
            ShiftCategory.ABSENT: "absent",
            ShiftCategory.SICK: "sick_leave",
            ShiftCategory.PERSONAL: "personal_leave",
            ShiftCategory.VACATION: "vacation",
        }

        for row in matrix.values():
            shift_code = row["days"][day_num]["shift_code"]
            category = classifier.classify(shift_code)
            if category is not None:
                stats[category_keys[category]] += 1
            stats["by_shift"][shift_code] = stats["by_shift"].get(shift_code, 0) + 1

        return stats
