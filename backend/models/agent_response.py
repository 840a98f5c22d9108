"""
Agent response models for competitive intelligence reports

The remote orchestrator returns loosely-typed payloads. Every model here
tolerates unknown keys, missing fields and malformed fields: a field that
does not fit its type falls back to its default, and a list keeps only the
items that fit. One bad field never takes the rest of the payload down.
"""

import copy
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class AgentName(str, Enum):
    """Labels used by the orchestrator for its known sub-agents"""
    product_intelligence = "Product Intelligence Agent"
    market_signals = "Market Signals Agent"
    web_research = "Web Research Agent"


class LenientModel(BaseModel):
    """Base for orchestrator payload models, validated field by field"""
    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="wrap")
    @classmethod
    def drop_malformed(cls, v: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo):
        try:
            return handler(v)
        except ValidationError:
            pass

        if isinstance(v, list):
            kept = []
            for item in v:
                try:
                    kept.extend(handler([item]))
                except ValidationError:
                    continue
            if kept:
                return kept

        return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class RawAgentResult(LenientModel):
    """One sub-agent entry as returned by the orchestrator"""
    agent_name: str = Field("", description="Free-text label chosen by the remote workflow")
    status: str = Field("", description="Sub-agent completion status")
    output: Any = Field(None, description="Sub-agent payload, shape depends on agent_name")


class CIReport(LenientModel):
    """Combined report produced by the orchestrator"""
    final_output: Any = None
    sub_agent_results: List[RawAgentResult] = Field(default_factory=list)
    summary: str = ""
    workflow_completed: bool = False

    _payload: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @classmethod
    def from_payload(cls, payload: Any) -> "CIReport":
        """Validate an orchestrator result, keeping the payload exactly as received"""
        report = cls.model_validate(payload)
        if isinstance(payload, dict):
            report._payload = copy.deepcopy(payload)
        return report

    @property
    def payload(self) -> Dict[str, Any]:
        """The report as the orchestrator sent it"""
        if self._payload is not None:
            return copy.deepcopy(self._payload)
        return self.model_dump(mode="json", exclude_unset=True)


SectionContent = Union[str, List[str]]


class ProductIntelligence(LenientModel):
    """Output of the Product Intelligence Agent"""
    core_features: Optional[SectionContent] = None
    positioning: Optional[SectionContent] = None
    unique_differentiators: Optional[SectionContent] = None
    gaps_vs_lyzr: Optional[SectionContent] = None


class MarketSignals(LenientModel):
    """Output of the Market Signals Agent"""
    predicted_next_moves: Optional[SectionContent] = None
    threat_analysis: Optional[str] = None
    recommended_strategies: List[str] = Field(default_factory=list)


class WebResearchSource(LenientModel):
    """A source cited by the Web Research Agent"""
    title: str = ""
    url: Optional[str] = None
    relevance: Optional[float] = Field(None, description="Fraction expected in [0, 1]")


class WebResearch(LenientModel):
    """Output of the Web Research Agent"""
    answer: Optional[str] = None
    sources: List[WebResearchSource] = Field(default_factory=list)
    confidence: Optional[float] = Field(None, description="Fraction expected in [0, 1]")
    related_topics: List[str] = Field(default_factory=list)
    follow_up_questions: Optional[List[str]] = None


AGENT_OUTPUT_MODELS: Dict[AgentName, Type[BaseModel]] = {
    AgentName.product_intelligence: ProductIntelligence,
    AgentName.market_signals: MarketSignals,
    AgentName.web_research: WebResearch,
}


class SubAgentOutputs(BaseModel):
    """Typed views of the known sub-agents, each independently optional"""
    product_intelligence: Optional[ProductIntelligence] = None
    market_signals: Optional[MarketSignals] = None
    web_research: Optional[WebResearch] = None
