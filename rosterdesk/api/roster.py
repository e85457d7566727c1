"""Roster routes: period reads and entry mutations."""
from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from rosterdesk.database import get_db
from rosterdesk.config import settings
from rosterdesk.services.roster_service import RosterService
from rosterdesk.services.attendance_service import AttendanceService
from rosterdesk.api.schemas import (
    UpsertEntryIn,
    BatchEntriesIn,
    ImportRosterIn,
    entry_to_dict,
    roster_to_dict
)


router = APIRouter(prefix=f"{settings.api_prefix}/rosters", tags=["rosters"])


@router.get("")
async def get_roster(
    project_id: str = Query(...),
    year: str = Query(...),
    month: str = Query(...),
    db: Session = Depends(get_db)
):
    """
    Get the resolved roster of a project month, creating the roster on first access.
    """
    roster = RosterService(db).get_roster(project_id, year, month)
    return JSONResponse(content=jsonable_encoder({"roster": roster_to_dict(roster)}))


@router.put("/entries")
async def upsert_entry(body: UpsertEntryIn, db: Session = Depends(get_db)):
    """Set one staff member's shift on one day."""
    entry = RosterService(db).upsert_entry(
        body.roster_id, body.staff_id, body.day, body.shift_code, body.notes
    )
    return JSONResponse(content=jsonable_encoder({"entry": entry_to_dict(entry)}))


@router.put("/entries/batch")
async def batch_upsert_entries(body: BatchEntriesIn, db: Session = Depends(get_db)):
    """Upsert many entries of one roster atomically."""
    entries = RosterService(db).batch_upsert_entries(
        body.roster_id, [entry.model_dump() for entry in body.entries]
    )
    return JSONResponse(content=jsonable_encoder({
        "entries": [entry_to_dict(entry) for entry in entries],
        "count": len(entries)
    }))


@router.post("/import")
async def import_roster(body: ImportRosterIn, db: Session = Depends(get_db)):
    """Replace every entry of a project month with the imported batch."""
    entries = None if body.entries is None else [entry.model_dump() for entry in body.entries]
    result = RosterService(db).import_roster(body.project_id, body.year, body.month, entries)
    return JSONResponse(content={"success": True, **result})


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: str, db: Session = Depends(get_db)):
    """Delete one roster entry."""
    RosterService(db).delete_entry(entry_id)
    return JSONResponse(content={"success": True, "message": "Roster entry deleted successfully"})


@router.get("/{roster_id}/stats")
async def get_day_stats(
    roster_id: str,
    day: str = Query(...),
    db: Session = Depends(get_db)
):
    """Head counts per attendance category for one day."""
    stats = AttendanceService(db).get_day_stats(roster_id, day)
    return JSONResponse(content=jsonable_encoder({"stats": stats}))
