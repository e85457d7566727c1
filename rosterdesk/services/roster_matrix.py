"""Roster matrix construction.

A roster is stored sparsely: only days with an explicit RosterEntry are
persisted. The matrix resolves every staff/day cell from two layers, the
staff member's default rule as the base and the persisted entries on top.
"""
from datetime import date
from calendar import monthrange
from typing import Any, Dict, Iterable, Optional

from rosterdesk.config import settings


OFF_SHIFT = settings.off_shift_code


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given calendar month."""
    return monthrange(year, month)[1]


def day_of_week(year: int, month: int, day: int) -> int:
    """Weekday of a calendar date with Sunday=0 .. Saturday=6."""
    return date(year, month, day).isoweekday() % 7


def default_shift_for_day(
    year: int,
    month: int,
    day: int,
    default_shift: Optional[str],
    weekly_off_day: Optional[int]
) -> str:
    """Shift code a staff member gets on a day that has no explicit entry."""
    # 0 (Sunday) is a valid off day, only None means "no weekly off"
    if weekly_off_day is not None and day_of_week(year, month, day) == weekly_off_day:
        return OFF_SHIFT
    return default_shift or OFF_SHIFT


def default_days(year: int, month: int, default_shift: Optional[str],
                 weekly_off_day: Optional[int]) -> Dict[int, str]:
    """Base layer for one staff member: default shift code for every day."""
    return {
        day: default_shift_for_day(year, month, day, default_shift, weekly_off_day)
        for day in range(1, days_in_month(year, month) + 1)
    }


def build_matrix(
    active_staff: Iterable[Any],
    entries: Iterable[Any],
    year: int,
    month: int
) -> Dict[str, Dict[str, Any]]:
    """
    Resolve the staff x day grid of a roster period.

    Args:
        active_staff: Staff records (``id``, ``default_shift``, ``weekly_off_day``),
            already in display order
        entries: Persisted RosterEntry records (``id``, ``staff_id``, ``day``,
            ``shift_code``, ``notes``)
        year: Roster year
        month: Roster month (1-12)

    Returns:
        Mapping of staff ID to ``{"staff": staff, "days": {day: cell}}`` where
        each cell is ``{"shift_code", "notes", "entry_id"}``. Staff keep the
        order they were given in.
    """
    matrix: Dict[str, Dict[str, Any]] = {}

    for staff in active_staff:
        base = default_days(year, month, staff.default_shift, staff.weekly_off_day)
        matrix[staff.id] = {
            "staff": staff,
            "days": {
                day: {"shift_code": shift_code, "notes": None, "entry_id": None}
                for day, shift_code in base.items()
            },
        }

    last_day = days_in_month(year, month)
    for entry in entries:
        row = matrix.get(entry.staff_id)
        # Entries of inactive or foreign staff stay stored but are not shown
        if row is None or not 1 <= entry.day <= last_day:
            continue
        row["days"][entry.day] = {
            "shift_code": entry.shift_code,
            "notes": entry.notes or None,
            "entry_id": entry.id,
        }

    return matrix


def resolve_staff_days(staff: Any, entries: Iterable[Any], year: int, month: int) -> Dict[int, str]:
    """Resolved shift code per day for a single staff member."""
    row = build_matrix([staff], entries, year, month)[staff.id]
    return {day: cell["shift_code"] for day, cell in row["days"].items()}
