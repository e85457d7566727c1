"""Custom exceptions and error handling for the roster administration system.

Every error carries a user-facing message, a machine-readable code and the
HTTP status the API layer should answer with.
"""
from typing import Optional, Dict, Any, Iterable


class RosterError(Exception):
    """Base class for domain errors with user-friendly messages."""

    status_code = 400

    def __init__(self, message: str, error_code: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize domain error.

        Args:
            message: User-friendly error message
            error_code: Machine-readable error code
            details: Optional additional error details
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary format for API responses.

        Returns:
            Dictionary with error information
        """
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class ValidationError(RosterError):
    """Malformed input, detected before any write."""

    status_code = 400


class NotFoundError(RosterError):
    """A referenced record does not exist."""

    status_code = 404


class AccessDeniedError(RosterError):
    """The caller may not perform the mutation."""

    status_code = 403


class ConflictError(RosterError):
    """The input contradicts existing data or itself."""

    status_code = 409


class MissingFieldError(ValidationError):
    """Error raised when a required field is missing."""

    def __init__(self, field_name: str, index: Optional[int] = None):
        """
        Initialize missing field error.

        Args:
            field_name: Name of the missing field
            index: Position of the offending entry inside a batch, if any
        """
        message = f"{field_name} is required"
        details: Dict[str, Any] = {"field_name": field_name}
        if index is not None:
            message = f"Entry {index}: {message}"
            details["index"] = index

        super().__init__(
            message=message,
            error_code="MISSING_FIELD",
            details=details
        )


class InvalidRangeError(ValidationError):
    """Error raised when a value is outside the valid range."""

    def __init__(self, field_name: str, value: Any, min_value: Any, max_value: Any):
        """
        Initialize invalid range error.

        Args:
            field_name: Name of the field
            value: The invalid value
            min_value: Minimum valid value
            max_value: Maximum valid value
        """
        message = (
            f"Invalid {field_name} {value} "
            f"(must be {min_value}-{max_value})"
        )

        super().__init__(
            message=message,
            error_code="INVALID_RANGE",
            details={
                "field_name": field_name,
                "value": value,
                "min_value": min_value,
                "max_value": max_value
            }
        )


class InvalidPeriodError(ValidationError):
    """Error raised when a year/month pair cannot be parsed."""

    def __init__(self, year: Any, month: Any):
        super().__init__(
            message="Invalid year or month",
            error_code="INVALID_PERIOD",
            details={"year": year, "month": month}
        )


class InvalidShiftCodeError(ValidationError):
    """Error raised when a shift code is not in the shift type catalog."""

    def __init__(self, shift_code: Any, valid_codes: Iterable[str]):
        """
        Initialize invalid shift code error.

        Args:
            shift_code: The rejected code
            valid_codes: Codes currently present in the catalog
        """
        valid = sorted(valid_codes)
        super().__init__(
            message=f"Invalid shift code: {shift_code}. Valid codes: {', '.join(valid)}",
            error_code="INVALID_SHIFT_CODE",
            details={"shift_code": shift_code, "valid_codes": valid}
        )


class ResourceNotFoundError(NotFoundError):
    """Error raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any):
        """
        Initialize resource not found error.

        Args:
            resource_type: Type of resource (e.g., "roster", "staff", "project")
            resource_id: ID of the resource
        """
        resource_types = {
            "project": "Project",
            "staff": "Staff",
            "roster": "Roster",
            "roster_entry": "Roster entry",
        }

        resource_display = resource_types.get(resource_type, resource_type)
        message = f"{resource_display} not found (ID: {resource_id})"

        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            details={
                "resource_type": resource_type,
                "resource_id": resource_id
            }
        )


class EditWindowClosedError(AccessDeniedError):
    """Error raised when a roster is written after its edit deadline."""

    def __init__(self, year: int, month: int, deadline):
        """
        Initialize edit window closed error.

        Args:
            year: Roster year
            month: Roster month
            deadline: The deadline that has passed
        """
        message = "เกินกำหนดการแก้ไขข้อมูล กรุณาติดต่อเจ้าหน้าที่"
        super().__init__(
            message=message,
            error_code="EDIT_WINDOW_CLOSED",
            details={
                "year": year,
                "month": month,
                "deadline": deadline.isoformat()
            }
        )


class DuplicateEntryError(ConflictError):
    """Error raised when a batch names the same staff/day twice."""

    def __init__(self, staff_id: str, day: int):
        super().__init__(
            message=f"Duplicate entry for staff {staff_id} day {day}",
            error_code="DUPLICATE_ENTRY",
            details={"staff_id": staff_id, "day": day}
        )


class StaffNotInProjectError(ConflictError):
    """Error raised when staff outside the roster's project are referenced."""

    def __init__(self, project_id: str, staff_ids: Iterable[str]):
        staff_ids = sorted(staff_ids)
        super().__init__(
            message="Some staff do not belong to this project",
            error_code="STAFF_NOT_IN_PROJECT",
            details={"project_id": project_id, "staff_ids": staff_ids}
        )


def format_error_for_api(error: RosterError) -> Dict[str, Any]:
    """
    Format domain error for API response.

    Args:
        error: Domain error to format

    Returns:
        Dictionary suitable for JSON API response
    """
    return error.to_dict()
