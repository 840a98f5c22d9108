# Agent response models
from .agent_response import (
    AgentName,
    RawAgentResult,
    CIReport,
    ProductIntelligence,
    MarketSignals,
    WebResearch,
    WebResearchSource,
    SubAgentOutputs,
    AGENT_OUTPUT_MODELS,
)

# Derived and exported report models
from .threat import (
    ThreatLevel,
)
from .export import (
    ExportedReport,
)

# Remote orchestrator wire models
from .orchestrator import (
    OrchestratorRequest,
    OrchestratorResponse,
    ResponseBody,
)

# Session models
from .session import (
    AnalysisState,
    SessionSnapshot,
)
