"""
Display model for an analysis session

Turns the session's report into the sections the dashboard shows. Any
section whose sub-agent output is missing is left out; the rest of the
report still renders.
"""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from models.agent_response import MarketSignals, ProductIntelligence, SectionContent, WebResearch
from models.threat import ThreatLevel
from services.analysis_session import AnalysisSession

PRODUCT_SECTIONS = [
    ("Core Features", "core_features"),
    ("Market Positioning", "positioning"),
    ("Unique Differentiators", "unique_differentiators"),
    ("Gaps vs. Lyzr", "gaps_vs_lyzr"),
]
MARKET_SECTIONS = [
    ("Predicted Next Moves", "predicted_next_moves"),
    ("Threat Analysis", "threat_analysis"),
]


def as_percent(value: Optional[float]) -> Optional[int]:
    """Fraction to a whole percentage, rounding halves up; None stays None"""
    if value is None or not math.isfinite(value):
        return None
    return math.floor(value * 100 + 0.5)


class SourceView(BaseModel):
    title: str
    url: Optional[str] = None
    relevance_percent: Optional[int] = None


class WebResearchView(BaseModel):
    answer: Optional[str] = None
    confidence_percent: Optional[int] = None
    sources: List[SourceView] = Field(default_factory=list)
    related_topics: List[str] = Field(default_factory=list)


class SectionView(BaseModel):
    title: str
    content: SectionContent


class ReportView(BaseModel):
    competitor_name: str
    last_updated: Optional[datetime] = None
    threat_level: ThreatLevel
    summary: Optional[str] = None
    web_research: Optional[WebResearchView] = None
    product_sections: List[SectionView] = Field(default_factory=list)
    market_sections: List[SectionView] = Field(default_factory=list)
    recommended_strategies: List[str] = Field(default_factory=list)
    workflow_completed: bool = False


def _sections(output: BaseModel, fields) -> List[SectionView]:
    sections = []
    for title, field_name in fields:
        content = getattr(output, field_name, None)
        if content:
            sections.append(SectionView(title=title, content=content))
    return sections


def build_web_research_view(web_research: WebResearch) -> WebResearchView:
    return WebResearchView(
        answer=web_research.answer,
        confidence_percent=as_percent(web_research.confidence),
        sources=[
            SourceView(
                title=source.title,
                url=source.url,
                relevance_percent=as_percent(source.relevance),
            )
            for source in web_research.sources
        ],
        related_topics=web_research.related_topics,
    )


def build_report_view(session: AnalysisSession) -> Optional[ReportView]:
    """View of the session's current report, or None when it has none"""
    report = session.report
    if report is None:
        return None

    sub_agents = session.sub_agents
    product: Optional[ProductIntelligence] = sub_agents.product_intelligence
    market: Optional[MarketSignals] = sub_agents.market_signals
    web_research: Optional[WebResearch] = sub_agents.web_research

    return ReportView(
        competitor_name=session.competitor_name,
        last_updated=session.completed_at,
        threat_level=session.threat_level,
        summary=report.summary or None,
        web_research=build_web_research_view(web_research) if web_research else None,
        product_sections=_sections(product, PRODUCT_SECTIONS) if product else [],
        market_sections=_sections(market, MARKET_SECTIONS) if market else [],
        recommended_strategies=market.recommended_strategies if market else [],
        workflow_completed=report.workflow_completed,
    )


def _render_content(content: SectionContent) -> List[str]:
    if isinstance(content, list):
        return [f"  - {item}" for item in content]
    return [f"  {content}"]


def render_text(view: ReportView) -> str:
    """Plain-text rendering of a report view"""
    lines = [
        "=" * 60,
        f"{view.competitor_name} - {view.threat_level.value} Threat",
    ]
    if view.last_updated:
        lines.append(f"Intelligence Report - Last Updated: {view.last_updated.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("=" * 60)

    if view.summary:
        lines += ["", "Executive Summary", f"  {view.summary}"]

    if view.web_research:
        research = view.web_research
        header = "Latest Activity & Market Intelligence"
        if research.confidence_percent is not None:
            header += f" (Confidence: {research.confidence_percent}%)"
        lines += ["", header]
        if research.answer:
            lines.append(f"  {research.answer}")
        if research.sources:
            lines.append("  Sources:")
            for source in research.sources:
                relevance = f" [{source.relevance_percent}%]" if source.relevance_percent is not None else ""
                lines.append(f"    - {source.title}{relevance}")
                if source.url:
                    lines.append(f"      {source.url}")
        if research.related_topics:
            lines.append(f"  Related Topics: {', '.join(research.related_topics)}")

    for section in view.product_sections + view.market_sections:
        lines += ["", section.title]
        lines += _render_content(section.content)

    if view.recommended_strategies:
        lines += ["", "Recommended Strategic Actions"]
        lines += [f"  - {strategy}" for strategy in view.recommended_strategies]

    if view.workflow_completed:
        lines += ["", "Analysis Complete - All intelligence agents coordinated successfully"]

    return "\n".join(lines)
