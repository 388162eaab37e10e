# questionbank/errors.py
"""
Typed errors surfaced by the question aggregation engine.

Callers of AnalysisOrchestrator.analyze() receive either a complete
AnalysisResult or one of these exceptions.
"""
from typing import Optional


class QuestionBankError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, document_id: Optional[int] = None):
        super().__init__(message)
        self.document_id = document_id


class ValidationError(QuestionBankError):
    """Raised when document text is empty or unreadable. Never retried."""
    pass


class DocumentNotFoundError(QuestionBankError):
    """Raised when the requested document does not exist."""
    pass


class ExtractionFailure(QuestionBankError):
    """
    Raised when the extractor errors, times out or returns malformed output.

    The document moves to FAILED; a fresh analyze() call retries from scratch.
    """
    pass


class PersistenceConflict(QuestionBankError):
    """Raised when committing merged clusters loses a concurrent-write race."""
    pass


class AnalysisError(QuestionBankError):
    """Raised for unexpected pipeline failures; the cause is chained."""
    pass
