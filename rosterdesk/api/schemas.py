"""Request bodies and response serializers for the roster API."""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union

from rosterdesk.models.staff import Staff
from rosterdesk.models.roster import RosterEntry


class EntryIn(BaseModel):
    """One roster cell as sent by clients; checked by the service layer."""
    staff_id: Optional[str] = None
    day: Optional[Union[int, str]] = None
    shift_code: Optional[str] = None
    notes: Optional[str] = None


class UpsertEntryIn(EntryIn):
    roster_id: Optional[str] = None


class BatchEntriesIn(BaseModel):
    roster_id: Optional[str] = None
    entries: List[EntryIn] = Field(default_factory=list)


class ImportRosterIn(BaseModel):
    project_id: Optional[str] = None
    year: Optional[Union[int, str]] = None
    month: Optional[Union[int, str]] = None
    entries: Optional[List[EntryIn]] = None


class DefaultShiftIn(BaseModel):
    default_shift: Optional[str] = None


class WeeklyOffDayIn(BaseModel):
    weekly_off_day: Optional[Union[int, str]] = None


class ReorderStaffIn(BaseModel):
    project_id: Optional[str] = None
    ordered_staff_ids: List[str] = Field(default_factory=list)


class EditCutoffIn(BaseModel):
    edit_cutoff_day: int
    edit_cutoff_next_month: bool = False


def staff_to_dict(staff: Staff) -> Dict[str, Any]:
    return {
        "id": staff.id,
        "project_id": staff.project_id,
        "code": staff.code,
        "name": staff.name,
        "position": staff.position,
        "wage_per_day": staff.wage_per_day,
        "staff_type": staff.staff_type.value if staff.staff_type else None,
        "default_shift": staff.default_shift,
        "weekly_off_day": staff.weekly_off_day,
        "is_active": staff.is_active,
        "display_order": staff.display_order,
    }


def entry_to_dict(entry: RosterEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "roster_id": entry.roster_id,
        "staff_id": entry.staff_id,
        "day": entry.day,
        "shift_code": entry.shift_code,
        "notes": entry.notes,
    }


def roster_to_dict(roster: Dict[str, Any]) -> Dict[str, Any]:
    """Replace ORM staff records inside a resolved roster with plain dicts."""
    matrix = {
        staff_id: {"staff": staff_to_dict(row["staff"]), "days": row["days"]}
        for staff_id, row in roster["matrix"].items()
    }
    return {**roster, "matrix": matrix}
