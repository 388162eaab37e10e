# questionbank/domain/document.py
"""
Domain model for an uploaded study-material document.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .analysis import AnalysisMetadata


class AnalysisState(str, Enum):
    """Per-document analysis state machine: NONE -> IN_PROGRESS -> COMPLETE | FAILED."""
    NONE = "none"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class Document:
    """
    A unit of study material owned by the surrounding application.

    Attributes:
        id: Unique document identifier
        owner_id: Identifier of the uploading user
        name: Original file name
        content: Decoded document text
        analysis_state: Current analysis state
        analysis: Topics/types/difficulty of the last successful run
        uploaded_at: Upload timestamp (UTC)
    """
    id: int
    owner_id: int
    name: str
    content: str
    analysis_state: AnalysisState = AnalysisState.NONE
    analysis: Optional[AnalysisMetadata] = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_text(self) -> bool:
        """Check if the document has any non-whitespace text."""
        return bool(self.content and self.content.strip())
