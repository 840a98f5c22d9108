"""
Wire models for the remote orchestrator call
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrchestratorRequest(BaseModel):
    """Body posted to the agent inference endpoint"""
    user_id: str
    agent_id: str
    session_id: str
    message: str


class ResponseBody(BaseModel):
    """Status and result of one orchestrator run"""
    model_config = ConfigDict(extra="allow")

    status: str = ""
    result: Optional[Any] = None
    message: Optional[str] = None


class OrchestratorResponse(BaseModel):
    """Normalized envelope returned for every orchestrator call"""
    model_config = ConfigDict(extra="allow")

    success: bool = False
    response: ResponseBody = Field(default_factory=ResponseBody)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.success is True and self.response.status == "success"
