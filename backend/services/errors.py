class CIReportError(Exception):
    """Base exception for user-visible report errors"""
    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(CIReportError):
    """Input rejected before any remote call is issued"""
    kind = "validation"


class AnalysisError(CIReportError):
    """Remote analysis completed with a failure, or could not be reached"""
    kind = "analysis"


class OrchestratorTransportError(AnalysisError):
    """The orchestrator call failed at the transport level"""


class AnalysisInProgressError(CIReportError):
    """A submission arrived while another analysis is still running"""
    kind = "conflict"
