import json

import pytest
from fastapi.testclient import TestClient

from api import reports
from api.app import app
from models.orchestrator import OrchestratorResponse, ResponseBody
from services.analysis_session import AnalysisSession


@pytest.fixture
def api_client():
    reports.sessions.clear()
    yield TestClient(app)
    reports.sessions.clear()


@pytest.fixture
def session_factory(client_returning):
    def _create(response, session_id="s1"):
        session = AnalysisSession(client=client_returning(response), session_id=session_id)
        reports.sessions[session_id] = session
        return session
    return _create


def test_create_session(api_client):
    resp = api_client.post("/api/sessions")
    assert resp.status_code == 200
    session_id = resp.json()["session_id"]
    assert session_id in reports.sessions

    state = api_client.get(f"/api/sessions/{session_id}").json()
    assert state["state"] == "idle"
    assert state["report"] is None


def test_unknown_session(api_client):
    assert api_client.get("/api/sessions/missing").status_code == 404
    assert api_client.post("/api/sessions/missing/analyses", json={"competitor_name": "x"}).status_code == 404


def test_analysis_and_export(api_client, session_factory, success_response):
    session_factory(success_response)

    resp = api_client.post("/api/sessions/s1/analyses", json={"competitor_name": "Lang Chain"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["state"] == "success"
    assert body["threat_level"] == "High"
    assert body["error"] is None

    view = api_client.get("/api/sessions/s1/view").json()
    assert view["web_research"]["confidence_percent"] == 87

    export = api_client.get("/api/sessions/s1/export")
    assert export.status_code == 200
    disposition = export.headers["content-disposition"]
    assert disposition.startswith("attachment; filename*=UTF-8''CI-Report-Lang-Chain-")
    assert disposition.endswith(".json")

    document = json.loads(export.content.decode("utf-8"))
    assert list(document)[:3] == ["competitor_name", "timestamp", "threat_level"]
    assert document["competitor_name"] == "Lang Chain"
    assert document["timestamp"].endswith("Z")


def test_blank_competitor_is_unprocessable(api_client, session_factory, success_response):
    session = session_factory(success_response)

    resp = api_client.post("/api/sessions/s1/analyses", json={"competitor_name": "  "})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Please enter a competitor name"
    session.client.run_analysis.assert_not_called()


def test_remote_failure_is_reported_in_snapshot(api_client, session_factory):
    session_factory(OrchestratorResponse(success=True, response=ResponseBody(status="error", message="rate limited")))

    body = api_client.post("/api/sessions/s1/analyses", json={"competitor_name": "CrewAI"}).json()
    assert body["state"] == "error"
    assert body["error"] == "rate limited"
    assert body["error_kind"] == "analysis"
    assert body["report"] is None

    assert api_client.get("/api/sessions/s1/export").status_code == 404
    assert api_client.get("/api/sessions/s1/view").json() is None


def test_submission_while_loading_conflicts(api_client, session_factory, success_response):
    session = session_factory(success_response)
    session.begin("LangChain")

    resp = api_client.post("/api/sessions/s1/analyses", json={"competitor_name": "CrewAI"})
    assert resp.status_code == 409


def test_delete_session(api_client, session_factory, success_response):
    session_factory(success_response)
    assert api_client.delete("/api/sessions/s1").status_code == 200
    assert "s1" not in reports.sessions
    assert api_client.delete("/api/sessions/s1").status_code == 404
