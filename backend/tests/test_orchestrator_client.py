import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.config import Settings
from services.errors import OrchestratorTransportError
from services.orchestrator_client import (
    OrchestratorClient,
    build_prompt,
    new_session_id,
    normalize_response,
)


def make_client(status_code=200, body=None, side_effect=None):
    http = MagicMock()
    http.headers = {}
    if side_effect is not None:
        http.post.side_effect = side_effect
    else:
        resp = MagicMock()
        resp.status_code = status_code
        resp.ok = status_code < 400
        resp.text = json.dumps(body) if body is not None else ""
        resp.json.return_value = body
        http.post.return_value = resp

    settings = Settings(LYZR_API_KEY="test-key", CI_USER_ID="tester", ORCHESTRATOR_TIMEOUT=5)
    return OrchestratorClient(settings=settings, session=http), http


def test_build_prompt_embeds_competitor():
    assert build_prompt("CrewAI") == (
        "Analyze competitor: CrewAI. Provide comprehensive competitive intelligence "
        "including latest activity, product analysis, and strategic predictions."
    )


def test_session_id_uses_epoch_milliseconds():
    with patch("services.orchestrator_client.time.time", return_value=1700000000.1234):
        assert new_session_id() == "ci-1700000000123"


def test_request_shape():
    client, http = make_client(body={"success": True, "response": {"status": "success", "result": {}}})
    client.run_analysis("LangChain")

    assert http.headers["x-api-key"] == "test-key"
    args, kwargs = http.post.call_args
    assert args[0] == client.settings.LYZR_AGENT_URL
    assert kwargs["timeout"] == 5
    body = kwargs["json"]
    assert body["user_id"] == "tester"
    assert body["agent_id"] == "6982de831ae7615e896e00f5"
    assert body["session_id"].startswith("ci-")
    assert "Analyze competitor: LangChain." in body["message"]


def test_envelope_passes_through():
    client, _ = make_client(body={"success": True, "response": {"status": "error", "message": "rate limited"}})
    response = client.run_analysis("LangChain")

    assert response.success is True
    assert response.succeeded is False
    assert response.response.message == "rate limited"


def test_http_error_becomes_failed_envelope():
    client, _ = make_client(status_code=503, body={"detail": "unavailable"})
    response = client.run_analysis("LangChain")

    assert response.success is False
    assert response.error.startswith("HTTP 503")


def test_transport_error_is_raised():
    client, _ = make_client(side_effect=requests.ConnectionError("refused"))
    with pytest.raises(OrchestratorTransportError):
        client.run_analysis("LangChain")


def test_non_json_body_is_a_transport_error():
    client, http = make_client(body={})
    http.post.return_value.json.side_effect = ValueError("not json")
    with pytest.raises(OrchestratorTransportError):
        client.run_analysis("LangChain")


def test_normalize_raw_inference_reply_with_json_string():
    report = {"summary": "s", "sub_agent_results": [], "workflow_completed": True}
    response = normalize_response({"response": json.dumps(report), "module_outputs": {}})

    assert response.succeeded
    assert response.response.result == report


def test_normalize_decoded_body_with_status():
    payload = {"response": json.dumps({"status": "error", "message": "quota exceeded"})}
    response = normalize_response(payload)

    assert response.success is True
    assert response.succeeded is False
    assert response.response.message == "quota exceeded"


def test_normalize_plain_text_reply():
    response = normalize_response({"response": "Sorry, I cannot help with that."})
    assert response.succeeded
    assert response.response.result == "Sorry, I cannot help with that."
