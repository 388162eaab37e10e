# questionbank/services/interfaces/similarity_interface.py
"""
Protocol interfaces for similarity services.

These interfaces define the contracts the grouper and merger depend on,
enabling dependency injection and easy mocking for tests.

Example usage:
    def my_function(similarity: ISimilarityService) -> float:
        return similarity.similarity("What is X?", "Define X.")
"""

from typing import List, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class ISimilarityService(Protocol):
    """
    Protocol defining the base similarity service interface.

    Scores are symmetric and range from 0.0 (no match) to 1.0 (same question).
    """

    threshold: float

    def similarity(self, a: str, b: str) -> float:
        """
        Compute similarity between two question strings.

        Args:
            a: First question
            b: Second question

        Returns:
            Similarity score between 0.0 and 1.0
        """
        ...


@runtime_checkable
class IBatchSimilarityService(ISimilarityService, Protocol):
    """
    Protocol for similarity services that can score one query against many
    candidates in a single call.
    """

    def find_best_match(
        self,
        query: str,
        candidates: List[str],
        min_score: Optional[float] = None
    ) -> Optional[Tuple[int, float]]:
        """
        Find the highest-scoring candidate (first one on ties).

        Args:
            query: Query question
            candidates: Candidate questions
            min_score: Minimum score (defaults to the service threshold)

        Returns:
            Tuple of (index, score), or None if nothing reaches min_score
        """
        ...

    def find_first_match(
        self,
        query: str,
        candidates: List[str],
        min_score: Optional[float] = None,
        skip: Optional[set] = None
    ) -> Optional[Tuple[int, float]]:
        """
        Find the first candidate (in list order) that reaches min_score.

        Args:
            query: Query question
            candidates: Candidate questions
            min_score: Minimum score (defaults to the service threshold)
            skip: Candidate indexes to ignore

        Returns:
            Tuple of (index, score), or None if nothing qualifies
        """
        ...
