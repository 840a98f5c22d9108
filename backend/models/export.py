"""
Exported report document
"""

from pydantic import BaseModel, ConfigDict, Field

from .threat import ThreatLevel


class ExportedReport(BaseModel):
    """
    Write-once document combining report identity with the report payload.

    Only the identity fields are declared. Every other key is the report
    exactly as the orchestrator sent it, carried as an extra.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    competitor_name: str = Field(description="Competitor the report was requested for")
    timestamp: str = Field(description="UTC ISO-8601 export time, millisecond precision")
    threat_level: ThreatLevel = Field(description="Threat level derived from market signals")
