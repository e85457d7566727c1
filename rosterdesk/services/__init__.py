"""Business logic services package."""
from rosterdesk.services.edit_window import EditWindowService, get_edit_deadline, is_edit_window_open
from rosterdesk.services.roster_service import RosterService
from rosterdesk.services.staff_service import StaffService
from rosterdesk.services.attendance_service import AttendanceService, aggregate_month
from rosterdesk.services.default_propagation import DefaultChangePropagator, DefaultRule
from rosterdesk.services.import_validator import validate_import_batch

__all__ = [
    "EditWindowService",
    "get_edit_deadline",
    "is_edit_window_open",
    "RosterService",
    "StaffService",
    "AttendanceService",
    "aggregate_month",
    "DefaultChangePropagator",
    "DefaultRule",
    "validate_import_batch",
]
