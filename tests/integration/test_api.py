"""
Integration tests for the QuestionBank API endpoints.
"""

import threading
import time

from fastapi.testclient import TestClient

from questionbank.errors import ExtractionFailure
from questionbank.services.ai.llm_extraction_service import LLMQuestionExtractor
from questionbank_api.app import create_app


def upload(client, content="Lecture notes on X and Y.", owner_id=1, name="week1.txt"):
    response = client.post(
        "/api/documents",
        json={"owner_id": owner_id, "name": name, "content": content},
    )
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data

    def test_liveness(self, client):
        response = client.get("/api/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_readiness(self, client):
        response = client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["extractor"]["status"] == "ready"

    def test_readiness_without_llm_client(self, make_services, gateway):
        services = make_services(gateway, LLMQuestionExtractor(client=None))
        with TestClient(create_app(services)) as client:
            response = client.get("/api/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_request_id_header(self, client):
        response = client.get("/api/health/live", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"


class TestDocumentEndpoints:
    """Tests for document upload and listing."""

    def test_upload_document(self, client):
        data = upload(client)

        assert data["id"] >= 1
        assert data["name"] == "week1.txt"
        assert data["analysis_state"] == "none"

    def test_upload_validation(self, client):
        response = client.post("/api/documents", json={"owner_id": 1, "name": "   "})

        assert response.status_code == 422

    def test_list_documents_by_owner(self, client):
        upload(client, owner_id=1, name="a.txt")
        upload(client, owner_id=2, name="b.txt")

        response = client.get("/api/documents", params={"owner_id": 2})

        assert response.status_code == 200
        assert [d["name"] for d in response.json()] == ["b.txt"]

    def test_get_unknown_document(self, client):
        response = client.get("/api/documents/999")

        assert response.status_code == 404
        assert response.json()["error"] == "DocumentNotFoundError"


class TestAnalysisEndpoints:
    """Tests for analysis, reanalysis and similar questions."""

    def test_analysis_shape(self, client):
        document = upload(client)

        response = client.get(f"/api/documents/{document['id']}/analysis")

        assert response.status_code == 200
        data = response.json()
        assert data["topics"] == ["algebra"]
        assert data["questionTypes"] == ["definition"]
        assert data["difficulty"] == 3.0
        assert data["questions"] == [
            {"text": "What is X?", "frequency": 2, "similarQuestions": ["what is x??"]},
            {"text": "Define Y", "frequency": 1, "similarQuestions": []},
        ]

    def test_analysis_marks_document_complete(self, client):
        document = upload(client)
        client.get(f"/api/documents/{document['id']}/analysis")

        response = client.get(f"/api/documents/{document['id']}")

        assert response.json()["analysis_state"] == "complete"

    def test_repeated_analysis_runs_extractor_once(self, client, extractor):
        document = upload(client)

        first = client.get(f"/api/documents/{document['id']}/analysis").json()
        second = client.get(f"/api/documents/{document['id']}/analysis").json()

        assert first == second
        assert extractor.calls == 1

    def test_concurrent_requests_share_one_run(self, make_services, make_extractor, gateway):
        gate = threading.Event()
        extractor = make_extractor(gate=gate)
        services = make_services(gateway, extractor)
        document = gateway.add_document(owner_id=1, name="a.txt", content="notes")
        responses = []

        with TestClient(create_app(services)) as client:
            def request():
                responses.append(client.get(f"/api/documents/{document.id}/analysis"))

            threads = [threading.Thread(target=request) for _ in range(3)]
            for thread in threads:
                thread.start()
            assert extractor.started.wait(timeout=2)
            deadline = time.monotonic() + 2
            while services.orchestrator.waiting_callers(document.id) < 2:
                assert time.monotonic() < deadline, "followers never joined the running analysis"
                time.sleep(0.01)
            gate.set()
            for thread in threads:
                thread.join(timeout=5)

        assert [r.status_code for r in responses] == [200, 200, 200]
        assert extractor.calls == 1
        assert len({r.text for r in responses}) == 1

    def test_reanalyze_merges(self, client, extractor):
        document = upload(client)
        client.get(f"/api/documents/{document['id']}/analysis")
        extractor.candidates = ["What is X again?"]

        response = client.post(f"/api/documents/{document['id']}/reanalyze")

        assert response.status_code == 200
        questions = response.json()["questions"]
        assert questions[0] == {
            "text": "What is X?",
            "frequency": 3,
            "similarQuestions": ["what is x??", "What is X again?"],
        }
        assert questions[1]["frequency"] == 1

    def test_empty_document_is_422(self, client):
        document = upload(client, content="   ")

        response = client.get(f"/api/documents/{document['id']}/analysis")

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"

    def test_extraction_failure_is_502(self, client, extractor):
        extractor.error = ExtractionFailure("model unavailable")
        document = upload(client)

        response = client.get(f"/api/documents/{document['id']}/analysis")

        assert response.status_code == 502
        assert response.json()["error"] == "ExtractionFailure"
        state = client.get(f"/api/documents/{document['id']}").json()["analysis_state"]
        assert state == "failed"

    def test_unknown_document_analysis_is_404(self, client):
        response = client.get("/api/documents/999/analysis")

        assert response.status_code == 404

    def test_similar_questions(self, client):
        document = upload(client)

        response = client.post(
            f"/api/documents/{document['id']}/questions/similar",
            json={"questionText": "What is X?", "numQuestions": 2},
        )

        assert response.status_code == 200
        assert response.json()["questions"] == ["What is X? (variant 1)", "What is X? (variant 2)"]

    def test_similar_questions_validation(self, client):
        document = upload(client)

        response = client.post(
            f"/api/documents/{document['id']}/questions/similar",
            json={"questionText": "What is X?", "numQuestions": 50},
        )

        assert response.status_code == 422
