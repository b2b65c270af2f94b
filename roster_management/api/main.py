"""
FastAPI application for team roster management.

Provides REST API endpoints for:
- Previewing and publishing rotation rosters
- Downloading the published roster as iCalendar or CSV
- Logging wellbeing check-ins and reading burnout trends
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from .. import __version__
from ..config import runtime_config
from ..exceptions import InvalidConfiguration, RosterNotFound, ScheduleConflict
from ..rostering.manager import RosterManager
from ..rostering.models import RosterTable
from ..storage import CheckInRepository, DocumentStore, JsonFileDocumentStore, RosterRepository
from ..wellbeing.assistant import AssistantClient, analyze_wellbeing
from ..wellbeing.session import CheckInSession
from ..wellbeing.trends import burnout_grid, recent_trend, risk_level


MAX_WEEKS = 104


# Pydantic models for API
class StaffEntry(BaseModel):
    name: str
    id: Optional[str] = None


class TaskEntry(BaseModel):
    name: str
    id: Optional[str] = None
    weekend_coverage: bool = False


class RosterConfigRequest(BaseModel):
    staff: List[Union[str, StaffEntry]]
    tasks: List[Union[str, TaskEntry]]
    startDate: str
    weeks: int = Field(le=MAX_WEEKS)

    def to_config_dict(self) -> Dict[str, Any]:
        def entry(value):
            return value if isinstance(value, str) else value.model_dump(exclude_none=True)

        return {
            'staff': [entry(s) for s in self.staff],
            'tasks': [entry(t) for t in self.tasks],
            'startDate': self.startDate,
            'weeks': self.weeks
        }


class RosterResponse(BaseModel):
    roster: Dict[str, List[Dict[str, Any]]]
    workload_balance: Dict[str, int]
    summary_stats: Dict[str, Any]


class CheckInRequest(BaseModel):
    staff_id: Optional[str] = None
    phase: str
    energy: int = Field(ge=0, le=100)
    note: str = ""


class AnalyzeRequest(BaseModel):
    text: str = Field(min_length=1)


class HealthResponse(BaseModel):
    status: str
    version: str
    roster_published: bool


def _roster_response(table: RosterTable) -> RosterResponse:
    return RosterResponse(
        roster=table.to_dict(),
        workload_balance=table.workload_balance(),
        summary_stats=table.summary_stats()
    )


def create_app(store: Optional[DocumentStore] = None,
               assistant: Optional[AssistantClient] = None) -> FastAPI:
    """
    Build the API around a document store.

    Args:
        store: Backing store (default: JSON files under ROSTER_DATA_DIR)
        assistant: Client for free-text wellbeing analysis; without one
            /wellbeing/analyze answers 503
    """
    if store is None:
        store = JsonFileDocumentStore(runtime_config().data_dir)

    roster_manager = RosterManager(RosterRepository(store))
    checkins = CheckInRepository(store)

    app = FastAPI(
        title="Team Roster API",
        description="API for rotation rosters and wellbeing check-ins",
        version=__version__
    )

    @app.exception_handler(InvalidConfiguration)
    async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration):
        return JSONResponse(status_code=400, content={"detail": exc.message, "field": exc.field})

    @app.exception_handler(ScheduleConflict)
    async def schedule_conflict_handler(request: Request, exc: ScheduleConflict):
        return JSONResponse(
            status_code=409,
            content={"detail": str(exc), "date": exc.date.isoformat(), "task": exc.task}
        )

    @app.exception_handler(RosterNotFound)
    async def roster_not_found_handler(request: Request, exc: RosterNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            roster_published=roster_manager.current() is not None
        )

    @app.post("/roster/preview", response_model=RosterResponse)
    def preview_roster(request: RosterConfigRequest):
        """
        Generate a roster for review. Nothing is stored.
        """
        return _roster_response(roster_manager.preview(request.to_config_dict()))

    @app.post("/roster/generate", response_model=RosterResponse)
    def generate_roster(request: RosterConfigRequest):
        """
        Generate a roster and replace the published one.
        """
        return _roster_response(roster_manager.publish(request.to_config_dict()))

    @app.get("/roster", response_model=RosterResponse)
    async def get_roster():
        """
        Get the published roster.
        """
        table = roster_manager.current()
        if table is None:
            raise RosterNotFound()
        return _roster_response(table)

    @app.get("/roster/export.ics")
    async def export_ics():
        return Response(
            content=roster_manager.export_ics(),
            media_type="text/calendar",
            headers={"Content-Disposition": 'attachment; filename="roster.ics"'}
        )

    @app.get("/roster/export.csv")
    async def export_csv():
        return Response(
            content=roster_manager.export_csv(),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="roster.csv"'}
        )

    @app.post("/wellbeing/checkins")
    async def log_checkin(request: CheckInRequest):
        """
        Log a check-in. Omitting ``staff_id`` logs it anonymously.
        """
        session = CheckInSession(request.staff_id)
        try:
            session.select_phase(request.phase)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        session.set_energy(request.energy)
        session.add_note(request.note)
        checkin = session.submit()
        checkins.append(checkin)

        return {
            "status": "success",
            "staff_id": checkin.staff_id,
            "checkin": checkin.to_dict(),
            "pulse_score": checkin.pulse_score,
            "messages": [m.text for m in session.transcript if m.role == "bot"]
        }

    @app.post("/wellbeing/analyze")
    def analyze(request: AnalyzeRequest):
        """
        Assess a free-text check-in message with the wellbeing assistant.
        """
        if assistant is None:
            raise HTTPException(status_code=503, detail="Wellbeing assistant is not configured")
        return analyze_wellbeing(request.text, assistant).to_dict()

    @app.get("/wellbeing/checkins/{staff_id}")
    async def get_checkins(staff_id: str, limit: int = Query(14, ge=1, le=365)):
        """
        Get a staff member's most recent check-ins, oldest first.
        """
        trend = recent_trend(checkins.history(staff_id), limit=limit)
        return {
            "staff_id": staff_id,
            "logs": [
                {
                    "timestamp": row.timestamp.isoformat(),
                    "date": row.date,
                    "phase": row.phase,
                    "energy": int(row.energy),
                    "note": row.note
                }
                for row in trend.itertuples(index=False)
            ]
        }

    @app.get("/wellbeing/burnout")
    async def get_burnout(end: Optional[str] = None, days: int = Query(7, ge=1, le=31)):
        """
        Latest energy per staff member per day, with a risk band per cell.
        """
        try:
            end_date = date.fromisoformat(end) if end else datetime.now(timezone.utc).date()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")

        grid = burnout_grid(checkins.all_histories(), end_date, days=days)

        staff = {}
        for staff_id, row in grid.iterrows():
            cells = []
            for day, energy in row.items():
                reading = None if pd.isna(energy) else int(energy)
                cells.append({"date": day, "energy": reading, "risk": risk_level(reading)})
            staff[staff_id] = cells

        return {"dates": list(grid.columns), "staff": staff}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
