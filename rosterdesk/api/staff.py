"""Staff routes that change roster defaults."""
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from rosterdesk.database import get_db
from rosterdesk.config import settings
from rosterdesk.services.staff_service import StaffService
from rosterdesk.api.schemas import DefaultShiftIn, WeeklyOffDayIn, ReorderStaffIn, staff_to_dict


router = APIRouter(prefix=f"{settings.api_prefix}/staff", tags=["staff"])


@router.post("/{staff_id}/default-shift")
async def apply_default_shift(staff_id: str, body: DefaultShiftIn, db: Session = Depends(get_db)):
    """
    Apply a new default shift from the current month on.

    Past months are frozen with the previous default first.
    """
    staff = StaffService(db).apply_default_shift(staff_id, body.default_shift)
    return JSONResponse(content=jsonable_encoder({"staff": staff_to_dict(staff)}))


@router.post("/{staff_id}/weekly-off-day")
async def apply_weekly_off_day(staff_id: str, body: WeeklyOffDayIn, db: Session = Depends(get_db)):
    """
    Apply a new weekly off day (0-6, or null) from the current month on.
    """
    staff = StaffService(db).apply_weekly_off_day(staff_id, body.weekly_off_day)
    return JSONResponse(content=jsonable_encoder({"staff": staff_to_dict(staff)}))


@router.post("/{staff_id}/toggle-status")
async def toggle_status(staff_id: str, db: Session = Depends(get_db)):
    """Enable or disable a staff member."""
    staff = StaffService(db).toggle_status(staff_id)
    return JSONResponse(content=jsonable_encoder({"staff": staff_to_dict(staff)}))


@router.post("/reorder")
async def reorder_staff(body: ReorderStaffIn, db: Session = Depends(get_db)):
    """Set the display order of all staff in a project."""
    StaffService(db).reorder_staff(body.project_id, body.ordered_staff_ids)
    return JSONResponse(content={"success": True})
