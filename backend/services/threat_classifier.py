"""
Threat level classification from market signal analysis

A literal keyword heuristic over the Market Signals Agent's threat_analysis
text. Tiers are tested in order and the first match wins, so high-tier
keywords always beat medium-tier ones.
"""

from typing import Any, Optional

from models.agent_response import AgentName, CIReport
from models.threat import ThreatLevel
from services.extractor import find_agent_output

HIGH_THREAT_KEYWORDS = ("high", "significant", "major")
MEDIUM_THREAT_KEYWORDS = ("moderate", "medium")


def classify_threat_text(text: Optional[str]) -> ThreatLevel:
    """Classify free-text threat analysis into Low, Medium or High"""
    if not text:
        return ThreatLevel.low

    threat_text = text.lower()
    if any(keyword in threat_text for keyword in HIGH_THREAT_KEYWORDS):
        return ThreatLevel.high
    if any(keyword in threat_text for keyword in MEDIUM_THREAT_KEYWORDS):
        return ThreatLevel.medium

    return ThreatLevel.low


def _threat_analysis_text(output: Any) -> Optional[str]:
    # Raw payload lookup; sibling fields are not validated here.
    if isinstance(output, dict):
        text = output.get("threat_analysis")
    else:
        text = getattr(output, "threat_analysis", None)

    return text if isinstance(text, str) else None


def classify_threat(report: Optional[CIReport]) -> ThreatLevel:
    """Derive the threat level of a report; Low when there is nothing to read"""
    if report is None:
        return ThreatLevel.low

    output = find_agent_output(report.sub_agent_results, AgentName.market_signals.value)
    return classify_threat_text(_threat_analysis_text(output))
