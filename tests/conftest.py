"""
Pytest configuration and fixtures for QuestionBank.
"""

import os
import threading

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing the app
os.environ["QUESTIONBANK_ENVIRONMENT"] = "test"
os.environ["QUESTIONBANK_LLM_API_KEY"] = ""

from questionbank.config import AppConfig
from questionbank.domain import ExtractionResult
from questionbank_api.app import create_app
from questionbank_api.factories import ServiceFactory
from questionbank_api.repositories import MemoryPersistenceGateway


SAMPLE_CANDIDATES = ["What is X?", "what is x??", "Define Y"]


class FakeExtractor:
    """
    Extractor double that counts calls.

    A gate (threading.Event) holds calls until it is set, which lets tests
    keep an analysis in flight while other callers arrive. With gated_texts
    only calls for those document texts are held.
    """

    is_available = True

    def __init__(
        self,
        candidates=None,
        topics=("algebra",),
        question_types=("definition",),
        difficulty=3.0,
        error=None,
        gate=None,
        gated_texts=None,
        result=None,
    ):
        self.candidates = list(SAMPLE_CANDIDATES if candidates is None else candidates)
        self.topics = list(topics)
        self.question_types = list(question_types)
        self.difficulty = difficulty
        self.error = error
        self.gate = gate
        self.gated_texts = set(gated_texts) if gated_texts is not None else None
        self.result = result
        self.calls = 0
        self.texts = []
        self.started = threading.Event()
        self._lock = threading.Lock()

    def extract(self, text):
        with self._lock:
            self.calls += 1
            self.texts.append(text)
        self.started.set()

        if self.gate is not None and (self.gated_texts is None or text in self.gated_texts):
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result

        return ExtractionResult.model_validate({
            "topics": self.topics,
            "questionTypes": self.question_types,
            "difficulty": self.difficulty,
            "rawCandidates": self.candidates,
        })

    def generate_similar_questions(self, question_text, num_questions=3):
        return [f"{question_text} (variant {i + 1})" for i in range(num_questions)]


@pytest.fixture
def config():
    """Default configuration with a short extraction timeout."""
    config = AppConfig()
    config.extraction.timeout_ms = 5000
    return config


@pytest.fixture
def gateway():
    """Fresh in-memory persistence gateway."""
    return MemoryPersistenceGateway()


@pytest.fixture
def extractor():
    """Fake extractor returning the three-candidate sample batch."""
    return FakeExtractor()


@pytest.fixture
def make_extractor():
    """Factory for configured fake extractors."""
    return FakeExtractor


@pytest.fixture
def make_services(config):
    """
    Factory wiring services around a gateway and extractor.

    Orchestrators are shut down after the test.
    """
    created = []

    def _make(gateway, extractor):
        services = ServiceFactory(config).create_services(gateway, extractor=extractor)
        created.append(services)
        return services

    yield _make

    for services in created:
        services.orchestrator.shutdown(wait=False)


@pytest.fixture
def services(make_services, gateway, extractor):
    """Services around the default gateway and fake extractor."""
    return make_services(gateway, extractor)


@pytest.fixture
def orchestrator(services):
    """Orchestrator around the default gateway and fake extractor."""
    return services.orchestrator


@pytest.fixture
def document(gateway):
    """A stored document with readable text."""
    return gateway.add_document(owner_id=1, name="week1.txt", content="Lecture notes on X and Y.")


@pytest.fixture
def client(services):
    """FastAPI test client around the fake extractor."""
    with TestClient(create_app(services)) as c:
        yield c
