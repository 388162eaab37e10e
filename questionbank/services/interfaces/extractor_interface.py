# questionbank/services/interfaces/extractor_interface.py
"""
Protocol interface for question extractors.

The engine treats the extractor as a fallible, possibly slow black box:
given document text it returns candidate questions plus topics, question
types and difficulty.
"""

from typing import Protocol, runtime_checkable

from ...domain.analysis import ExtractionResult


@runtime_checkable
class IQuestionExtractor(Protocol):
    """
    Protocol for anything that can pull raw candidate questions out of text.

    Implementations:
    - LLMQuestionExtractor: chat-completion LLM with strict JSON decoding
    - test fakes returning canned ExtractionResult objects
    """

    def extract(self, text: str) -> ExtractionResult:
        """
        Extract raw candidate questions and document metadata.

        Args:
            text: Decoded document text (never empty)

        Returns:
            ExtractionResult

        Raises:
            ExtractionFailure: if the extractor fails or its output is malformed
        """
        ...
