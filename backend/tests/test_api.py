import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paralegal.api import deps
from paralegal.api.router import router as api_router
from paralegal.core.case_data import CaseDataService
from paralegal.core.case_summary_manager import CaseSummaryManager
from paralegal.core.conversation import ConversationController
from paralegal.core.document_analyzer import DocumentAnalyzer
from paralegal.core.errors import CompletionAPIError
from paralegal.core.notification_service import NotificationService
from paralegal.core.settings_service import SettingsService
from paralegal.core.violation_analysis import ViolationAnalysisController


@pytest.fixture
def services(store, fake_llm):
    settings_service = SettingsService(store)
    case_data = CaseDataService(store)
    notification_service = NotificationService(settings_service.settings)
    violation_controller = ViolationAnalysisController(case_data, fake_llm)
    violation_controller.add_new_violation_listener(
        lambda alerts: notification_service.notify_new_violations(alerts, case_data.case_file.case_details.win)
    )
    return {
        deps.get_settings_service: settings_service,
        deps.get_case_data_service: case_data,
        deps.get_llm_service: fake_llm,
        deps.get_notification_service: notification_service,
        deps.get_conversation_controller: ConversationController(case_data, fake_llm),
        deps.get_violation_controller: violation_controller,
        deps.get_case_summary_manager: CaseSummaryManager(case_data, fake_llm),
        deps.get_document_analyzer: DocumentAnalyzer(case_data, fake_llm, vision_model_name="vision-model"),
    }


def provide(instance):
    return lambda: instance


@pytest.fixture
def client(services):
    app = FastAPI()
    app.include_router(api_router, prefix="/api")
    for dependency, instance in services.items():
        app.dependency_overrides[dependency] = provide(instance)
    return TestClient(app)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_chat_turn(client, fake_llm):
    fake_llm.stream_scripts.append(["Hello ", "there."])

    response = client.post("/api/chat/", json={"query": "Hi"})

    assert response.status_code == 200
    data = response.json()
    assert data["accepted"] is True
    assert data["loading"] is False
    assert data["messages"][-1] == {"role": "model", "text": "Hello there."}


def test_blank_chat_is_not_accepted(client, fake_llm):
    response = client.post("/api/chat/", json={"query": "  "})

    assert response.json()["accepted"] is False
    assert fake_llm.calls == []


def test_chat_error_is_reported(client, fake_llm):
    fake_llm.stream_scripts.append([CompletionAPIError("Invalid API key", status_code=401)])

    data = client.post("/api/chat/", json={"query": "Hi"}).json()

    assert data["error"] == "Invalid API key"
    assert [message["role"] for message in data["messages"]] == ["model"]


def test_violation_scan_details_and_notification(client, fake_llm, services):
    settings_service = services[deps.get_settings_service]
    settings_service.update({"userEmail": "me@example.com"})
    fake_llm.once_responses.append(json.dumps([
        {"title": "FMLA interference", "explanation": "Leave was denied.", "severity": "High"},
    ]))

    scan = client.post("/api/violations/analyze").json()

    alert = scan["alerts"][0]
    assert alert["title"] == "FMLA interference"
    assert alert["isDetailedAnalysisVisible"] is False

    toasts = client.get("/api/notifications/").json()
    assert len(toasts) == 1
    assert "me@example.com" in toasts[0]["message"]

    fake_llm.stream_scripts.append(["In depth."])
    expanded = client.post(f"/api/violations/{alert['id']}/details").json()
    assert expanded["detailedExplanation"] == "In depth."
    assert expanded["isDetailedAnalysisVisible"] is True

    searched = client.put(f"/api/violations/{alert['id']}/search", json={"query": "FMLA"}).json()
    assert searched["detailSearchQuery"] == "FMLA"


def test_unknown_violation_is_404(client):
    response = client.post("/api/violations/violation_missing/details")

    assert response.status_code == 404


def test_documents_crud(client):
    created = client.post("/api/case-file/documents", json={"name": "denial.txt", "content": "Denied."}).json()
    assert created["uploadedDate"]

    listed = client.get("/api/case-file/documents", params={"query": "denied"}).json()
    assert [doc["name"] for doc in listed] == ["denial.txt"]

    assert client.delete(f"/api/case-file/documents/{created['id']}").status_code == 200
    assert client.delete(f"/api/case-file/documents/{created['id']}").status_code == 404


def test_case_file_export_import_and_context(client):
    exported = client.get("/api/case-file/").json()
    exported["timeline"] = "2024-02-10: Claim denied"
    exported["damageCalculator"] = {"lostWages": 100, "insuranceCosts": 50, "medicalExpenses": 25}

    imported = client.put("/api/case-file/", json=exported).json()
    assert imported["timeline"] == "2024-02-10: Claim denied"

    context = client.get("/api/case-file/context").text
    assert "2024-02-10: Claim denied" in context
    assert "Total Damages: 175.00" in context


def test_case_summary(client, fake_llm):
    fake_llm.stream_scripts.append(["Short summary."])

    data = client.post("/api/case-file/summary").json()

    assert data["summary"] == "Short summary."
    assert client.get("/api/case-file/summary").json()["summary"] == "Short summary."


def test_analyzer_rejects_non_image(client):
    response = client.post("/api/analyzer/extract", json={"image": "data:text/plain;base64,aGk="})

    assert response.status_code == 400


def test_analyzer_review_failure_is_bad_gateway(client, fake_llm):
    fake_llm.once_responses.append(CompletionAPIError("Upstream down", status_code=503))

    response = client.post("/api/analyzer/review", json={"text": "Some OCR text"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Upstream down"


def test_settings_hide_api_key(client, fake_llm):
    fake_llm.configured = False

    updated = client.put("/api/settings/", json={"userEmail": "me@example.com", "apiKey": "sk-secret"}).json()

    assert updated["userEmail"] == "me@example.com"
    assert "apiKey" not in updated
    assert "sk-secret" not in json.dumps(updated)
    assert updated["apiKeyConfigured"] is False


def test_invalid_settings_update_is_rejected(client):
    response = client.put("/api/settings/", json={"notifyOnViolations": "maybe"})

    assert response.status_code == 422
