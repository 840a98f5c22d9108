import pytest
from unittest.mock import MagicMock

from models.agent_response import CIReport
from models.orchestrator import OrchestratorResponse, ResponseBody


def market_signals_result(threat_analysis="We assess significant competitive pressure"):
    return {
        "agent_name": "Market Signals Agent",
        "status": "success",
        "output": {
            "threat_analysis": threat_analysis,
            "predicted_next_moves": "Launch an enterprise tier",
            "recommended_strategies": ["Double down on observability", "Publish migration guides"],
        },
    }


@pytest.fixture
def report_payload():
    return {
        "final_output": {"headline": "LangChain is expanding into agent hosting"},
        "sub_agent_results": [
            {
                "agent_name": "Product Intelligence Agent",
                "status": "success",
                "output": {
                    "core_features": "Chains, agents and retrieval tooling",
                    "positioning": "Developer-first LLM framework",
                    "unique_differentiators": ["Large ecosystem", "LangSmith tracing"],
                    "gaps_vs_lyzr": "No managed enterprise agent runtime",
                },
            },
            market_signals_result(),
            {
                "agent_name": "Web Research Agent",
                "status": "success",
                "output": {
                    "answer": "LangChain announced a new hosted platform.",
                    "sources": [
                        {"title": "Launch post", "url": "https://example.com/launch", "relevance": 0.92},
                        {"title": "Analyst note", "relevance": 0.5},
                    ],
                    "confidence": 0.874,
                    "related_topics": ["LangGraph", "LangSmith"],
                },
            },
        ],
        "summary": "LangChain is a strong, fast-moving competitor.",
        "workflow_completed": True,
    }


@pytest.fixture
def report(report_payload):
    return CIReport.from_payload(report_payload)


@pytest.fixture
def success_response(report_payload):
    return OrchestratorResponse(
        success=True,
        response=ResponseBody(status="success", result=report_payload),
    )


@pytest.fixture
def client_returning():
    """Build a mock orchestrator client whose run_analysis returns the given value"""
    def _build(response):
        client = MagicMock()
        client.run_analysis.return_value = response
        return client
    return _build
