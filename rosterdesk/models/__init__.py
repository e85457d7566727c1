"""Database models package."""
from rosterdesk.models.project import Project
from rosterdesk.models.staff import Staff, StaffType
from rosterdesk.models.roster import Roster, RosterEntry
from rosterdesk.models.shift_type import ShiftType

__all__ = [
    "Project",
    "Staff",
    "StaffType",
    "Roster",
    "RosterEntry",
    "ShiftType",
]
