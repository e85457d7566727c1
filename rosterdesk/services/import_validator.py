"""Validation of roster import batches (replace all entries of a month)."""
from typing import Any, Collection, Iterable, List, NamedTuple, Optional, Set, Tuple

from rosterdesk.exceptions import (
    ValidationError,
    MissingFieldError,
    InvalidRangeError,
    InvalidShiftCodeError,
    DuplicateEntryError,
    StaffNotInProjectError
)


class ImportEntry(NamedTuple):
    """One normalized roster entry of an import or batch."""
    staff_id: str
    day: int
    shift_code: str
    notes: Optional[str] = None


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def _parse_day(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def normalize_entry(entry: Any, index: int) -> ImportEntry:
    """Check the shape of one raw entry and normalize its fields.

    Raises:
        MissingFieldError: If staff_id or shift_code is empty
        ValidationError: If day is not numeric
    """
    staff_id = _field(entry, "staff_id")
    staff_id = str(staff_id).strip() if staff_id is not None else ""
    if not staff_id:
        raise MissingFieldError("staff_id", index)

    raw_day = _field(entry, "day")
    day = _parse_day(raw_day)
    if day is None:
        raise ValidationError(
            message=f"Entry {index}: day must be a number",
            error_code="INVALID_DAY",
            details={"index": index, "day": raw_day}
        )

    shift_code = _field(entry, "shift_code")
    shift_code = str(shift_code).strip() if shift_code is not None else ""
    if not shift_code:
        raise MissingFieldError("shift_code", index)

    notes = _field(entry, "notes")
    return ImportEntry(staff_id, day, shift_code, str(notes) if notes else None)


def validate_entry_values(
    entry: ImportEntry,
    days_in_month: int,
    valid_shift_codes: Collection[str]
) -> None:
    """Range and catalog checks for one normalized entry."""
    if not 1 <= entry.day <= days_in_month:
        raise InvalidRangeError("day", entry.day, 1, days_in_month)
    if entry.shift_code not in valid_shift_codes:
        raise InvalidShiftCodeError(entry.shift_code, valid_shift_codes)


def validate_import_batch(
    entries: Iterable[Any],
    days_in_month: int,
    valid_shift_codes: Collection[str],
    staff_ids_in_project: Collection[str],
    project_id: Optional[str] = None
) -> List[ImportEntry]:
    """
    Validate a whole import batch before it replaces a roster's entries.

    Checks run in order and the first failure wins: required fields, day
    range, shift code, duplicate (staff, day) pairs, staff membership.
    A failure is raised as an exception, there is no error return value;
    returning at all means the whole batch is valid.

    Args:
        entries: Raw entries (dicts or objects with staff_id/day/shift_code/notes)
        days_in_month: Day count of the roster month
        valid_shift_codes: Codes present in the shift type catalog
        staff_ids_in_project: IDs of every staff member of the project
        project_id: Project ID, reported in membership errors

    Returns:
        The normalized entries, in input order

    Raises:
        ValidationError: Missing field, bad day, unknown shift code, empty batch
        ConflictError: Duplicate (staff, day) pair or staff outside the project
    """
    entries = list(entries)
    if not entries:
        raise ValidationError(
            message="entries must not be empty",
            error_code="EMPTY_BATCH"
        )

    normalized: List[ImportEntry] = []
    seen: Set[Tuple[str, int]] = set()
    for index, raw in enumerate(entries):
        entry = normalize_entry(raw, index)
        validate_entry_values(entry, days_in_month, valid_shift_codes)

        key = (entry.staff_id, entry.day)
        if key in seen:
            raise DuplicateEntryError(entry.staff_id, entry.day)
        seen.add(key)
        normalized.append(entry)

    project_staff = set(staff_ids_in_project)
    outsiders = {entry.staff_id for entry in normalized} - project_staff
    if outsiders:
        raise StaffNotInProjectError(project_id, outsiders)

    return normalized
