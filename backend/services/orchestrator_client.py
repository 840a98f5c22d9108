import json
import time
from typing import Any, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from core.config import Settings, settings as default_settings
from models.orchestrator import OrchestratorRequest, OrchestratorResponse, ResponseBody
from services.errors import OrchestratorTransportError

ANALYSIS_PROMPT = (
    "Analyze competitor: {competitor}. Provide comprehensive competitive intelligence "
    "including latest activity, product analysis, and strategic predictions."
)


def build_prompt(competitor_name: str) -> str:
    return ANALYSIS_PROMPT.format(competitor=competitor_name)


def new_session_id() -> str:
    """Per-request session id derived from the current time in milliseconds"""
    return f"ci-{int(time.time() * 1000)}"


def _decode_text(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return text


def normalize_response(payload: Any) -> OrchestratorResponse:
    """
    Normalize an inference reply into the {success, response, error} envelope.

    Accepts an envelope as is. Otherwise the reply's "response" field (a JSON
    string or an object) is decoded; a decoded object that carries its own
    "status" is used as the response body, anything else becomes the result
    of a successful body.
    """
    if isinstance(payload, dict) and "success" in payload and isinstance(payload.get("response"), dict):
        try:
            return OrchestratorResponse.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Malformed orchestrator envelope: {e.error_count()} errors")
            return OrchestratorResponse(success=False, error="Malformed orchestrator response")

    content = payload.get("response", payload) if isinstance(payload, dict) else payload
    if isinstance(content, str):
        content = _decode_text(content)

    if isinstance(content, dict) and "status" in content:
        try:
            body = ResponseBody.model_validate(content)
        except ValidationError:
            body = ResponseBody(status="success", result=content)
    else:
        body = ResponseBody(status="success", result=content)

    return OrchestratorResponse(success=True, response=body)


class OrchestratorClient:
    """Calls the remote multi-agent CI workflow"""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or default_settings
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "x-api-key": self.settings.LYZR_API_KEY,
        })

    def build_request(self, competitor_name: str) -> OrchestratorRequest:
        return OrchestratorRequest(
            user_id=self.settings.CI_USER_ID,
            agent_id=self.settings.CI_ORCHESTRATOR_AGENT_ID,
            session_id=new_session_id(),
            message=build_prompt(competitor_name),
        )

    def run_analysis(self, competitor_name: str) -> OrchestratorResponse:
        """Issue one analysis request; transport failures raise OrchestratorTransportError"""
        request = self.build_request(competitor_name)
        logger.info(f"Requesting CI analysis for {competitor_name} (session {request.session_id})")

        try:
            resp = self.session.post(
                self.settings.LYZR_AGENT_URL,
                json=request.model_dump(),
                timeout=self.settings.ORCHESTRATOR_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"Orchestrator request failed for {competitor_name}: {e}")
            raise OrchestratorTransportError(str(e)) from e

        if not resp.ok:
            logger.warning(f"Orchestrator returned HTTP {resp.status_code} for {competitor_name}")
            return OrchestratorResponse(
                success=False,
                response=ResponseBody(status="error"),
                error=f"HTTP {resp.status_code}: {resp.text[:200]}",
            )

        try:
            payload = resp.json()
        except ValueError as e:
            logger.error(f"Orchestrator returned a non-JSON body for {competitor_name}")
            raise OrchestratorTransportError("Orchestrator returned a non-JSON body") from e

        return normalize_response(payload)
