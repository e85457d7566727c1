"""Main application entry point."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from rosterdesk.config import settings
from rosterdesk.database import init_db
from rosterdesk.exceptions import RosterError, format_error_for_api
from rosterdesk.api import roster_router, staff_router, reports_router, projects_router


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Roster Desk",
    description="Staff roster edit window and attendance deduction service",
    version="1.0.0",
    debug=settings.debug
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(roster_router)
app.include_router(staff_router)
app.include_router(reports_router)
app.include_router(projects_router)


@app.exception_handler(RosterError)
async def roster_error_handler(request: Request, exc: RosterError):
    """Render domain errors with their status and error code."""
    return JSONResponse(status_code=exc.status_code, content=format_error_for_api(exc))


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("Application starting up...")
    if settings.auto_create_tables:
        init_db()
    logger.info("Application startup complete")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Roster Desk"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    import os
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.debug
    )
