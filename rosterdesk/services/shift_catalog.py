"""Default shift type catalog."""
from typing import List
from sqlalchemy.orm import Session
import uuid
import logging

from rosterdesk.models.shift_type import ShiftType


logger = logging.getLogger(__name__)


DEFAULT_SHIFT_TYPES = [
    {"code": "OFF", "name": "หยุด", "color": "#6b7280", "is_work_shift": False},
    {"code": "ขาด", "name": "ขาดงาน", "color": "#ef4444", "is_work_shift": False,
     "is_system_default": True},
    {"code": "1", "name": "กะเช้า", "start_time": "08:00", "end_time": "16:00",
     "color": "#3b82f6", "is_work_shift": True},
    {"code": "2", "name": "กะบ่าย", "start_time": "16:00", "end_time": "00:00",
     "color": "#10b981", "is_work_shift": True},
    {"code": "ดึก", "name": "กะดึก", "start_time": "00:00", "end_time": "08:00",
     "color": "#8b5cf6", "is_work_shift": True},
    {"code": "ลา", "name": "ลาพักร้อน", "color": "#f59e0b", "is_work_shift": False},
    {"code": "ป่วย", "name": "ลาป่วย", "color": "#fbbf24", "is_work_shift": False},
    {"code": "กิจ", "name": "ลากิจ", "color": "#f97316", "is_work_shift": False},
]


def seed_default_shift_types(db: Session) -> List[ShiftType]:
    """Insert or refresh the default shift types, keyed by code."""
    seeded = []
    for data in DEFAULT_SHIFT_TYPES:
        shift_type = db.query(ShiftType).filter(ShiftType.code == data["code"]).first()
        if shift_type is None:
            shift_type = ShiftType(id=str(uuid.uuid4()), code=data["code"])
            db.add(shift_type)
        shift_type.name = data["name"]
        shift_type.start_time = data.get("start_time")
        shift_type.end_time = data.get("end_time")
        shift_type.color = data.get("color")
        shift_type.is_work_shift = data["is_work_shift"]
        shift_type.is_system_default = data.get("is_system_default", False)
        seeded.append(shift_type)

    db.commit()
    logger.info(f"Seeded {len(seeded)} shift types")
    return seeded
