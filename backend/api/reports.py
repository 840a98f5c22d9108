from datetime import datetime, timezone
from typing import Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Response
from loguru import logger
from pydantic import BaseModel

from core.config import settings
from models.session import SessionSnapshot
from services.analysis_session import AnalysisSession
from services.errors import AnalysisInProgressError
from services.report_assembler import report_filename, serialize_report
from services.report_view import ReportView, build_report_view

router = APIRouter()

# In-memory session store, one AnalysisSession per dashboard session
sessions: Dict[str, AnalysisSession] = {}


class AnalysisRequest(BaseModel):
    competitor_name: str = ""


class SessionCreatedResponse(BaseModel):
    session_id: str
    message: str


def get_session(session_id: str) -> AnalysisSession:
    if session_id not in sessions:
        raise HTTPException(status_code=404, detail="Session not found")
    return sessions[session_id]


@router.post("/sessions", response_model=SessionCreatedResponse)
async def create_session():
    """Open a new analysis session"""
    session = AnalysisSession()
    sessions[session.session_id] = session

    logger.info(f"Created analysis session {session.session_id}")
    return SessionCreatedResponse(session_id=session.session_id, message="Session created")


@router.post("/sessions/{session_id}/analyses", response_model=SessionSnapshot)
async def run_analysis(session_id: str, request: AnalysisRequest):
    """Analyze a competitor; the previous report or error of the session is replaced"""
    session = get_session(session_id)

    try:
        await session.analyze(request.competitor_name)
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)

    if session.failure is not None and session.failure.kind == "validation":
        raise HTTPException(status_code=422, detail=session.error)

    return session.snapshot(include_raw=settings.DEBUG)


@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session_state(session_id: str):
    """Get the current state of a session"""
    return get_session(session_id).snapshot(include_raw=settings.DEBUG)


@router.get("/sessions/{session_id}/view", response_model=Optional[ReportView])
async def get_report_view(session_id: str):
    """Get the display sections of the current report"""
    return build_report_view(get_session(session_id))


@router.get("/sessions/{session_id}/export")
async def export_report(session_id: str):
    """Download the current report as a JSON file"""
    session = get_session(session_id)

    moment = datetime.now(timezone.utc)
    exported = session.export(moment)
    if exported is None:
        raise HTTPException(status_code=404, detail="No report to export")

    filename = quote(report_filename(exported.competitor_name, moment))
    return Response(
        content=serialize_report(exported).encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    """Delete a session from memory"""
    get_session(session_id)
    del sessions[session_id]
    return {"message": "Session deleted successfully"}
