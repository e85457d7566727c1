"""HTTP routes package."""
from rosterdesk.api.roster import router as roster_router
from rosterdesk.api.staff import router as staff_router
from rosterdesk.api.reports import router as reports_router
from rosterdesk.api.projects import router as projects_router

__all__ = [
    "roster_router",
    "staff_router",
    "reports_router",
    "projects_router",
]
