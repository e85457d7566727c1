"""Attendance classification of shift codes."""
import enum
from typing import Dict, Iterable, Optional, Sequence, Tuple, Any

from rosterdesk.config import settings


class ShiftCategory(str, enum.Enum):
    """Attendance category of a shift code."""
    WORK = "work"
    OFF = "off"
    ABSENT = "absent"
    SICK = "sick"
    PERSONAL = "personal"
    VACATION = "vacation"


# Preferred code first, then the short form, then the token used when the
# catalog has neither.
LEAVE_CODE_CHAINS: Dict[ShiftCategory, Tuple[Sequence[str], str]] = {
    ShiftCategory.ABSENT: (("ขาด", "ข"), "ขาด"),
    ShiftCategory.SICK: (("ป่วย", "ป"), "ป"),
    ShiftCategory.PERSONAL: (("กิจ", "ก"), "ก"),
    ShiftCategory.VACATION: (("ลา", "พ"), "พ"),
}


class ShiftClassifier:
    """Lookup table from shift code to attendance category.

    Built once per catalog fetch. Work shifts win over every other category;
    codes matching nothing are uncounted.
    """

    def __init__(self, work_codes: Iterable[str], leave_codes: Dict[ShiftCategory, str]):
        self.work_codes = frozenset(work_codes)
        self.leave_codes = dict(leave_codes)

    @classmethod
    def from_catalog(cls, shift_types: Iterable[Any]) -> "ShiftClassifier":
        """Resolve the classification from ShiftType records."""
        shift_types = list(shift_types)
        catalog_codes = {s.code for s in shift_types}
        work_codes = [s.code for s in shift_types if s.is_work_shift]

        leave_codes: Dict[ShiftCategory, str] = {}
        for category, (chain, fallback) in LEAVE_CODE_CHAINS.items():
            leave_codes[category] = next(
                (code for code in chain if code in catalog_codes),
                fallback
            )

        return cls(work_codes, leave_codes)

    def code_for(self, category: ShiftCategory) -> Optional[str]:
        """Resolved code of a leave category."""
        return self.leave_codes.get(category)

    def classify(self, shift_code: str) -> Optional[ShiftCategory]:
        """Attendance category of a shift code, or None if uncounted."""
        if shift_code in self.work_codes:
            return ShiftCategory.WORK
        if shift_code == settings.off_shift_code:
            return ShiftCategory.OFF
        for category, code in self.leave_codes.items():
            if shift_code == code:
                return category
        return None
