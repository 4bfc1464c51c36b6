import pytest
from fastapi.testclient import TestClient

from civic_pulse.main import app
from civic_pulse.services import image_analysis, priority_orchestrator, spatial_duplicates
from civic_pulse.services.ai_priority import AIPriorityAssessor, registry
from civic_pulse.services.image_analysis import ImageAnalysisService
from civic_pulse.services.priority_orchestrator import PriorityOrchestrator
from civic_pulse.services.spatial_duplicates import SpatialDuplicateFinder

from fakes import FakeIssueStore

SCENARIO_A = {
    "category": "Electricity",
    "title": "live wire exposed near school",
    "description": "",
    "latitude": 18.5074,
    "longitude": 73.8077,
    "similar_issues_count": 0,
}

SCENARIO_B = {
    "category": "Parks & Recreation",
    "title": "broken bench",
    "description": "needs repair",
    "latitude": 18.5074,
    "longitude": 73.8077,
}


@pytest.fixture
def store():
    return FakeIssueStore(records=[{"id": "a"}, {"id": "b"}, {"id": "c"}])


@pytest.fixture
def client(monkeypatch, store):
    assessor = AIPriorityAssessor(None)
    monkeypatch.setattr(registry, "_assessor", assessor)
    monkeypatch.setattr(priority_orchestrator, "_orchestrator", None)
    monkeypatch.setattr(spatial_duplicates, "_finder", SpatialDuplicateFinder(store))
    monkeypatch.setattr(image_analysis, "_image_service", ImageAnalysisService(api_key=""))

    with TestClient(app) as test_client:
        yield test_client


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["triage"] == "/triage/evaluate"


def test_health_reports_no_ai_provider(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["ai_provider"] is None


def test_evaluate_scenario_a(client, store):
    response = client.post("/triage/evaluate", json=SCENARIO_A)

    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 100
    assert body["level"] == "Critical"
    assert body["source"] == "RuleBased"
    assert body["ai_analysis"] is None
    # count supplied by the caller, so the store is not consulted
    assert store.calls == []


def test_evaluate_looks_up_similar_issues_when_count_omitted(client, store):
    response = client.post("/triage/evaluate", json=SCENARIO_B)

    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 66
    assert body["level"] == "Medium"
    assert body["factors"][-1] == "3 similar issue(s) in area (widespread problem)"
    assert store.calls[0]["category"] == "Parks & Recreation"


def test_evaluate_survives_store_failure(client, monkeypatch):
    monkeypatch.setattr(priority_orchestrator, "_orchestrator", None)
    failing = SpatialDuplicateFinder(FakeIssueStore(exc=RuntimeError("store down")))
    monkeypatch.setattr(spatial_duplicates, "_finder", failing)

    response = client.post("/triage/evaluate", json=SCENARIO_B)

    assert response.status_code == 200
    assert response.json()["score"] == 60


@pytest.mark.parametrize(
    "body",
    [
        {**SCENARIO_A, "latitude": 200},
        {k: v for k, v in SCENARIO_A.items() if k != "title"},
        {k: v for k, v in SCENARIO_A.items() if k != "category"},
        {**SCENARIO_A, "category": ""},
        {**SCENARIO_A, "similar_issues_count": -2},
    ],
)
def test_evaluate_rejects_invalid_body(client, body):
    response = client.post("/triage/evaluate", json=body)

    assert response.status_code == 422
    assert "detail" in response.json()


def test_image_analysis_without_key_returns_null(client):
    response = client.post("/triage/images", json={"photo_urls": ["https://example.com/a.jpg"]})

    assert response.status_code == 200
    assert response.json() == {"analysis": None}


def test_unexpected_failure_goes_through_global_handler(client, monkeypatch):
    class BrokenOrchestrator(PriorityOrchestrator):
        def evaluate(self, context, use_ai=True, resolve_similar=True):
            raise RuntimeError("classifier exploded")

    monkeypatch.setattr(priority_orchestrator, "_orchestrator", BrokenOrchestrator())

    with TestClient(app, raise_server_exceptions=False) as raw_client:
        response = raw_client.post("/triage/evaluate", json=SCENARIO_A)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error: classifier exploded"}
