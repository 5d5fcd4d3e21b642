"""
Integration tests for the HTTP layer.
"""

import pytest
from fastapi.testclient import TestClient

from triage_handoff.api import create_app


@pytest.fixture
def client(triage_service):
    with TestClient(create_app(triage_service)) as client:
        yield client


@pytest.mark.integration
class TestChatEndpoint:
    def test_new_conversation(self, client, cardiologist):
        # Act
        response = client.post(
            "/api/chat", json={"message": "tôi muốn gặp bác sĩ tim mạch"}
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "pending_confirmation"
        assert body["pending_specialist"]["id"] == cardiologist.id
        assert body["specialist"] is None
        assert body["conversation_id"]

    def test_follow_up_uses_conversation_id(self, client, cardiologist):
        first = client.post(
            "/api/chat", json={"message": "tôi muốn gặp bác sĩ tim mạch"}
        ).json()

        response = client.post(
            "/api/chat",
            json={"message": "có", "conversation_id": first["conversation_id"]},
        )

        assert response.status_code == 200
        assert response.json()["state"] == "connected"
        assert response.json()["specialist"]["id"] == cardiologist.id

    def test_unknown_conversation(self, client):
        response = client.post(
            "/api/chat", json={"message": "xin chào", "conversation_id": "missing"}
        )

        assert response.status_code == 404

    def test_blank_message(self, client):
        response = client.post("/api/chat", json={"message": "   "})

        assert response.status_code == 400

    def test_missing_message(self, client):
        response = client.post("/api/chat", json={})

        assert response.status_code == 422


@pytest.mark.integration
class TestTriageEndpoint:
    def test_symptoms(self, client, neurologist):
        response = client.post(
            "/api/triage", json={"symptoms": "tôi bị đau đầu và chóng mặt"}
        )

        assert response.status_code == 200
        assert response.json()["specialty"] == "Thần kinh"
        assert response.json()["specialist"]["id"] == neurologist.id


@pytest.mark.integration
class TestConversationEndpoint:
    def test_get_conversation(self, client):
        created = client.post(
            "/api/chat", json={"message": "I don't need a doctor"}
        ).json()

        response = client.get(f"/api/conversations/{created['conversation_id']}")

        assert response.status_code == 200
        assert len(response.json()["messages"]) == 2

    def test_get_unknown_conversation(self, client):
        assert client.get("/api/conversations/missing").status_code == 404


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "online"}
