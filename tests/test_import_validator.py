"""Unit tests for roster import batch validation."""
import pytest

from rosterdesk.services.import_validator import (
    ImportEntry,
    normalize_entry,
    validate_import_batch
)
from rosterdesk.exceptions import (
    ValidationError,
    ConflictError,
    MissingFieldError,
    InvalidRangeError,
    InvalidShiftCodeError,
    DuplicateEntryError,
    StaffNotInProjectError
)


VALID_CODES = {"D", "N", "OFF", "ขาด"}
PROJECT_STAFF = {"s1", "s2"}


def validate(entries, days=30):
    return validate_import_batch(entries, days, VALID_CODES, PROJECT_STAFF, project_id="p1")


def test_valid_batch_is_normalized():
    result = validate([
        {"staff_id": "s1", "day": "1", "shift_code": "D"},
        {"staff_id": " s2 ", "day": 30, "shift_code": "N", "notes": "cover"},
    ])

    assert result == [
        ImportEntry("s1", 1, "D", None),
        ImportEntry("s2", 30, "N", "cover"),
    ]


def test_empty_batch_rejected():
    with pytest.raises(ValidationError) as exc_info:
        validate([])

    assert exc_info.value.error_code == "EMPTY_BATCH"


@pytest.mark.parametrize("field", ["staff_id", "shift_code"])
def test_missing_field_reports_index(field):
    good = {"staff_id": "s1", "day": 1, "shift_code": "D"}
    bad = dict(good, day=2)
    bad[field] = ""

    with pytest.raises(MissingFieldError) as exc_info:
        validate([good, bad])

    assert exc_info.value.details == {"field_name": field, "index": 1}


def test_non_numeric_day_rejected():
    with pytest.raises(ValidationError) as exc_info:
        normalize_entry({"staff_id": "s1", "day": "abc", "shift_code": "D"}, 3)

    assert exc_info.value.error_code == "INVALID_DAY"
    assert exc_info.value.details["index"] == 3


@pytest.mark.parametrize("day", [0, 31, -2])
def test_day_outside_month_rejected(day):
    with pytest.raises(InvalidRangeError):
        validate([{"staff_id": "s1", "day": day, "shift_code": "D"}])


def test_unknown_shift_code_rejected():
    with pytest.raises(InvalidShiftCodeError) as exc_info:
        validate([{"staff_id": "s1", "day": 1, "shift_code": "X"}])

    assert exc_info.value.details["valid_codes"] == sorted(VALID_CODES)


def test_duplicate_pair_rejected():
    with pytest.raises(DuplicateEntryError) as exc_info:
        validate([
            {"staff_id": "s1", "day": 4, "shift_code": "D"},
            {"staff_id": "s1", "day": 4, "shift_code": "N"},
        ])

    assert isinstance(exc_info.value, ConflictError)
    assert exc_info.value.details == {"staff_id": "s1", "day": 4}


def test_duplicate_detection_does_not_confuse_ids_and_days():
    """("s1", 12) and ("s11", 2) are different pairs."""
    result = validate_import_batch(
        [
            {"staff_id": "s1", "day": 12, "shift_code": "D"},
            {"staff_id": "s11", "day": 2, "shift_code": "D"},
        ],
        30, VALID_CODES, {"s1", "s11"}
    )

    assert len(result) == 2


def test_staff_outside_project_rejected():
    with pytest.raises(StaffNotInProjectError) as exc_info:
        validate([
            {"staff_id": "s1", "day": 1, "shift_code": "D"},
            {"staff_id": "intruder", "day": 1, "shift_code": "D"},
        ])

    assert exc_info.value.details == {"project_id": "p1", "staff_ids": ["intruder"]}


def test_field_errors_win_over_membership():
    """The first failing check is reported; range checks run before membership."""
    with pytest.raises(InvalidRangeError):
        validate([
            {"staff_id": "intruder", "day": 1, "shift_code": "D"},
            {"staff_id": "s1", "day": 99, "shift_code": "D"},
        ])


def test_accepts_objects_with_attributes():
    result = validate([ImportEntry("s1", 2, "OFF")])

    assert result[0].shift_code == "OFF"
