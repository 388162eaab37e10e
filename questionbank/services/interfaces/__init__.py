"""
Service interfaces for dependency injection and testability.

This package defines Protocol interfaces for the core services,
enabling:
- Clean dependency injection
- Easy mocking in tests
- Clear contracts between services
"""

from .similarity_interface import (
    ISimilarityService,
    IBatchSimilarityService,
)
from .extractor_interface import IQuestionExtractor

__all__ = [
    "ISimilarityService",
    "IBatchSimilarityService",
    "IQuestionExtractor",
]
