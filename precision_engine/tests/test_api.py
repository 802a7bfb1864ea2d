"""
Tests: HTTP routes, driven through FastAPI's TestClient.

Run with:
    pytest precision_engine/tests/test_api.py -v
"""

import json

import pytest
from fastapi.testclient import TestClient

from precision_engine.api import create_app
from precision_engine.config import Settings
from precision_engine.engine import PrecisionEngine

CAPABILITY = {
    "id": "CAP-0001",
    "title": "Subscription Management",
    "description": "Customers can view, upgrade and cancel their subscriptions from the self-service portal.",
    "status": "Draft",
    "priority": "High",
    "owner": "Billing Team",
}


def _client(**settings) -> TestClient:
    config = Settings(**settings)
    return TestClient(create_app(engine=PrecisionEngine(config), settings=config))


@pytest.fixture
def client():
    return _client()


class TestHealth:
    def test_health(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "ok"
        assert body["active_validations"] == 0


class TestDocumentRoute:
    def test_valid_document(self, client):
        res = client.post("/api/validation/document", json={"document": CAPABILITY, "documentType": "capability"})
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["validation"]["is_valid"] is True
        assert body["validation"]["quality_score"] == 100
        assert body["context"]["documents_in_context"] == 0

    def test_missing_title(self, client):
        doc = {k: v for k, v in CAPABILITY.items() if k != "title"}
        body = client.post("/api/validation/document", json={"document": doc}).json()
        errors = body["validation"]["errors"]
        assert body["validation"]["is_valid"] is False
        assert [e["category"] for e in errors] == ["MISSING_REQUIRED_FIELD"]
        assert errors[0]["field"] == "title"

    def test_with_context(self, client):
        enabler = {"id": "ENB-0001", "capabilityId": "CAP-0404", "title": "Reminders"}
        body = client.post(
            "/api/validation/document",
            json={"document": enabler, "context": {"capabilities": [CAPABILITY]}},
        ).json()
        categories = [f["category"] for f in body["validation"]["findings"]]
        assert "INVALID_CAPABILITY_REFERENCE" in categories
        assert body["context"]["documents_in_context"] == 1

    def test_second_call_from_cache(self, client):
        client.post("/api/validation/document", json={"document": CAPABILITY})
        body = client.post("/api/validation/document", json={"document": CAPABILITY}).json()
        assert body["validation"]["from_cache"] is True

    def test_missing_document_is_422(self, client):
        assert client.post("/api/validation/document", json={}).status_code == 422


class TestBatchAndWorkspaceRoutes:
    def test_batch(self, client):
        invalid = {**CAPABILITY, "id": "CAP-0002", "title": ""}
        body = client.post("/api/validation/batch", json={"documents": [CAPABILITY, invalid]}).json()
        summary = body["batch_validation"]["summary"]
        assert summary["total_documents"] == 2
        assert summary["valid_documents"] == 1
        assert summary["invalid_documents"] == 1

    def test_workspace_with_documents(self, client):
        enabler = {"id": "ENB-0001", "capabilityId": "CAP-0001"}
        body = client.post("/api/validation/workspace", json={"documents": [CAPABILITY, enabler]}).json()
        results = body["workspace_validation"]["results"]
        categories = [f["category"] for f in results[1]["findings"]]
        assert "INVALID_CAPABILITY_REFERENCE" not in categories

    def test_workspace_without_corpus_is_400(self, client):
        assert client.post("/api/validation/workspace").status_code == 400

    def test_workspace_from_configured_path(self, tmp_path):
        (tmp_path / "cap.json").write_text(json.dumps(CAPABILITY), encoding="utf-8")
        client = _client(corpus_path=str(tmp_path))
        body = client.post("/api/validation/workspace").json()
        assert body["workspace_validation"]["summary"]["valid_documents"] == 1

    def test_workspace_missing_path_is_404(self, tmp_path):
        client = _client(corpus_path=str(tmp_path / "missing"))
        assert client.post("/api/validation/workspace").status_code == 404


class TestAdminRoutes:
    def test_rules(self, client):
        body = client.get("/api/validation/rules").json()
        assert set(body["rules"]["kinds"]) == {
            "capability", "enabler", "functionalRequirement", "nonFunctionalRequirement",
        }
        assert body["limits"]["max_concurrent_validations"] == 10
        assert body["limits"]["max_concurrent_checks"] == 3

    def test_auto_fix_round_trip(self, client):
        doc = {**CAPABILITY, "id": "CAP-9", "owner": ""}
        validation = client.post("/api/validation/document", json={"document": doc}).json()["validation"]
        body = client.post("/api/validation/auto-fix", json={"results": [validation]}).json()
        actions = {(s["action"], s["field"]) for s in body["auto_fix_suggestions"]}
        assert actions == {("ADD_FIELD", "owner"), ("FORMAT_ID", "id")}
        assert body["suggestions_count"] == 2

    def test_clear_cache_and_stats(self, client):
        client.post("/api/validation/document", json={"document": CAPABILITY})
        assert client.get("/api/validation/stats").json()["stats"]["cache"]["size"] == 1

        res = client.delete("/api/validation/cache")
        assert res.json()["success"] is True

        stats = client.get("/api/validation/stats").json()["stats"]
        assert stats["cache"]["size"] == 0
        assert stats["total_validations"] == 1
