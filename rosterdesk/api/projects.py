"""Project edit cutoff routes."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from rosterdesk.database import get_db
from rosterdesk.config import settings
from rosterdesk.services.edit_window import EditWindowService
from rosterdesk.api.schemas import EditCutoffIn


router = APIRouter(prefix=f"{settings.api_prefix}/projects", tags=["projects"])


@router.get("/{project_id}/edit-cutoff")
async def get_edit_cutoff(project_id: str, db: Session = Depends(get_db)):
    """Get a project's roster edit cutoff."""
    return JSONResponse(content=EditWindowService(db).get_cutoff(project_id))


@router.put("/{project_id}/edit-cutoff")
async def set_edit_cutoff(project_id: str, body: EditCutoffIn, db: Session = Depends(get_db)):
    """Update a project's roster edit cutoff."""
    service = EditWindowService(db)
    service.set_cutoff(project_id, body.edit_cutoff_day, body.edit_cutoff_next_month)
    return JSONResponse(content={
        "status": "success",
        **service.get_cutoff(project_id)
    })
