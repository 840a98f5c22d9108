"""
Analysis session state

A single-owner container for one dashboard session. It moves through
idle -> loading -> success | error and back to loading on every new
submission. report and error are never set at the same time.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger
from pydantic import ValidationError as PayloadValidationError

from models.agent_response import CIReport, SubAgentOutputs
from models.export import ExportedReport
from models.orchestrator import OrchestratorResponse
from models.session import AnalysisState, SessionSnapshot
from models.threat import ThreatLevel
from services.errors import (
    AnalysisError,
    AnalysisInProgressError,
    CIReportError,
    ValidationError,
)
from services.extractor import extract_sub_agents
from services.orchestrator_client import OrchestratorClient
from services.report_assembler import assemble_report
from services.threat_classifier import classify_threat

EMPTY_COMPETITOR_MESSAGE = "Please enter a competitor name"
ANALYSIS_FAILED_MESSAGE = "Analysis failed. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class AnalysisSession:

    def __init__(self, client: Optional[OrchestratorClient] = None, session_id: Optional[str] = None):
        self.client = client or OrchestratorClient()
        self.session_id = session_id or str(uuid.uuid4())
        self.state = AnalysisState.IDLE
        self.competitor_name = ""
        self.report: Optional[CIReport] = None
        self.failure: Optional[CIReportError] = None
        self.completed_at: Optional[datetime] = None
        self.raw_response: Optional[Any] = None

    @property
    def error(self) -> Optional[str]:
        return self.failure.message if self.failure else None

    @property
    def is_loading(self) -> bool:
        return self.state == AnalysisState.LOADING

    @property
    def threat_level(self) -> ThreatLevel:
        return classify_threat(self.report)

    @property
    def sub_agents(self) -> SubAgentOutputs:
        return extract_sub_agents(self.report)

    def _succeed(self, report: CIReport):
        self.report = report
        self.failure = None
        self.completed_at = datetime.now(timezone.utc)
        self.state = AnalysisState.SUCCESS

    def _fail(self, failure: CIReportError):
        self.report = None
        self.failure = failure
        self.completed_at = datetime.now(timezone.utc)
        self.state = AnalysisState.ERROR

    def begin(self, competitor_name: str) -> bool:
        """
        Start a submission. Returns False when the name is rejected, in which
        case the session is already in the error state and no call is issued.
        """
        if self.is_loading:
            raise AnalysisInProgressError("An analysis is already running for this session")

        self.competitor_name = competitor_name
        if not competitor_name or not competitor_name.strip():
            logger.warning("Rejected analysis request with an empty competitor name")
            self._fail(ValidationError(EMPTY_COMPETITOR_MESSAGE))
            return False

        self.state = AnalysisState.LOADING
        self.report = None
        self.failure = None
        self.raw_response = None
        self.completed_at = None
        return True

    def finish(self, response: OrchestratorResponse):
        """Apply an orchestrator response to a loading session"""
        self.raw_response = response.model_dump(mode="json")

        if not response.succeeded:
            message = response.response.message or response.error or ANALYSIS_FAILED_MESSAGE
            logger.warning(f"Analysis for {self.competitor_name} failed: {message}")
            self._fail(AnalysisError(message))
            return

        try:
            report = CIReport.from_payload(response.response.result)
        except PayloadValidationError as e:
            logger.error(f"Unreadable report for {self.competitor_name}: {e.error_count()} errors")
            self._fail(AnalysisError(ANALYSIS_FAILED_MESSAGE))
            return

        logger.info(
            f"Analysis for {self.competitor_name} completed with "
            f"{len(report.sub_agent_results)} sub-agent results"
        )
        self._succeed(report)

    async def analyze(self, competitor_name: str) -> AnalysisState:
        """Run one analysis end to end and return the resulting state"""
        if not self.begin(competitor_name):
            return self.state

        try:
            response = await asyncio.to_thread(self.client.run_analysis, competitor_name)
        except Exception as e:
            logger.error(f"CI analysis error for {competitor_name}: {str(e)}")
            self._fail(AnalysisError(NETWORK_ERROR_MESSAGE))
            return self.state

        self.finish(response)
        return self.state

    def export(self, moment: Optional[datetime] = None) -> Optional[ExportedReport]:
        """Assemble the export document, or None when there is no report"""
        if self.report is None:
            return None

        moment = moment or datetime.now(timezone.utc)
        return assemble_report(self.competitor_name, moment, self.threat_level, self.report)

    def snapshot(self, include_raw: bool = False) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            state=self.state,
            competitor_name=self.competitor_name,
            report=self.report,
            threat_level=self.threat_level if self.report else None,
            error=self.error,
            error_kind=self.failure.kind if self.failure else None,
            completed_at=self.completed_at,
            raw_response=self.raw_response if include_raw else None,
        )
