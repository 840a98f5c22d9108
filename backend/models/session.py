from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from .agent_response import CIReport
from .threat import ThreatLevel


class AnalysisState(str, Enum):
    """Lifecycle of an analysis session"""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class SessionSnapshot(BaseModel):
    """Read-only state of a session as returned by the API"""
    session_id: str
    state: AnalysisState
    competitor_name: str = ""
    report: Optional[CIReport] = None
    threat_level: Optional[ThreatLevel] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    completed_at: Optional[datetime] = None
    raw_response: Optional[Any] = None
