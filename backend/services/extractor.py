"""
Sub-agent output extraction

Sub-agent payloads carry no discriminant field of their own; the only thing
telling them apart is the agent_name the orchestrator attached. Extraction
looks results up by that exact label and returns None whenever a result is
missing or its output is not an object. Inside an object, each field that
does not fit degrades on its own.
"""

from typing import Any, Dict, Iterable, Optional, Union

from loguru import logger
from pydantic import BaseModel, ValidationError

from models.agent_response import (
    AGENT_OUTPUT_MODELS,
    AgentName,
    CIReport,
    MarketSignals,
    ProductIntelligence,
    RawAgentResult,
    SubAgentOutputs,
    WebResearch,
)


def find_agent_output(
    results: Optional[Iterable[Union[RawAgentResult, Dict[str, Any]]]],
    agent_name: str
) -> Optional[Any]:
    """
    Return the output of the first result whose agent_name equals agent_name.

    Matching is exact and case-sensitive. Later duplicates are ignored, and
    None is returned when nothing matches. Plain dicts are accepted as well
    as RawAgentResult models.
    """
    if not results:
        return None

    for result in results:
        if isinstance(result, dict):
            if result.get("agent_name") == agent_name:
                return result.get("output")
        elif getattr(result, "agent_name", None) == agent_name:
            return getattr(result, "output", None)

    return None


def extract_agent_output(report: Optional[CIReport], agent_name: AgentName) -> Optional[BaseModel]:
    """Return the typed view of a known sub-agent's output, or None"""
    if report is None:
        return None

    output = find_agent_output(report.sub_agent_results, agent_name.value)
    if output is None:
        return None

    model = AGENT_OUTPUT_MODELS[agent_name]
    try:
        return model.model_validate(output)
    except ValidationError as e:
        logger.debug(f"Ignoring malformed output from {agent_name.value}: {e.error_count()} errors")
        return None


def extract_product_intelligence(report: Optional[CIReport]) -> Optional[ProductIntelligence]:
    return extract_agent_output(report, AgentName.product_intelligence)


def extract_market_signals(report: Optional[CIReport]) -> Optional[MarketSignals]:
    return extract_agent_output(report, AgentName.market_signals)


def extract_web_research(report: Optional[CIReport]) -> Optional[WebResearch]:
    return extract_agent_output(report, AgentName.web_research)


def extract_sub_agents(report: Optional[CIReport]) -> SubAgentOutputs:
    """Extract every known sub-agent view from a report"""
    return SubAgentOutputs(
        product_intelligence=extract_product_intelligence(report),
        market_signals=extract_market_signals(report),
        web_research=extract_web_research(report),
    )
