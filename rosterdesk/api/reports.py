"""Attendance report routes."""
from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from rosterdesk.database import get_db
from rosterdesk.config import settings
from rosterdesk.services.attendance_service import AttendanceService


router = APIRouter(prefix=f"{settings.api_prefix}/reports", tags=["reports"])


@router.get("/monthly")
async def get_monthly_report(
    project_id: str = Query(...),
    year: str = Query(...),
    month: str = Query(...),
    db: Session = Depends(get_db)
):
    """Monthly attendance and deduction report of one project."""
    report = AttendanceService(db).get_monthly_report(project_id, year, month)
    return JSONResponse(content=jsonable_encoder({"report": report}))


@router.get("/overview")
async def get_financial_overview(
    year: str = Query(...),
    month: str = Query(...),
    db: Session = Depends(get_db)
):
    """Net salary cost of every active project for one month."""
    overview = AttendanceService(db).get_financial_overview(year, month)
    return JSONResponse(content=jsonable_encoder({"overview": overview}))
