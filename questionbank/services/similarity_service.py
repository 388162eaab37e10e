# questionbank/services/similarity_service.py
"""
Service for computing question similarity.

The score is a fixed weighted average of two symmetric measures on the
normalized question text:
- Jaccard overlap of the word sets
- Normalized Levenshtein similarity (RapidFuzz)
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, List, Optional, Set, Tuple

from rapidfuzz.distance import Levenshtein

from ..utils.text_normalization import normalize_question, word_set


@dataclass(frozen=True)
class NormalizedQuestion:
    """Comparison form of a question: normalized text plus its word set."""
    text: str
    words: FrozenSet[str]

    @property
    def is_blank(self) -> bool:
        return not self.text


@lru_cache(maxsize=4096)
def prepare_question(text: str) -> NormalizedQuestion:
    """
    Normalize a question once so it can be scored many times.

    Args:
        text: Raw question text

    Returns:
        NormalizedQuestion
    """
    normalized = normalize_question(text)
    return NormalizedQuestion(text=normalized, words=frozenset(word_set(normalized)))


def jaccard(a: Set[str], b: Set[str]) -> float:
    """Jaccard overlap of two word sets (0.0 if either is empty)."""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


class QuestionSimilarityService:
    """
    Similarity service combining word overlap and edit distance.

    Used by both the grouper and the merger, so a question that would join a
    group within one batch also matches the persisted cluster across runs.
    """

    def __init__(
        self,
        threshold: float = 0.6,
        token_weight: float = 0.5,
        edit_weight: float = 0.5
    ):
        """
        Initialize with threshold and weights.

        Args:
            threshold: Minimum score for two questions to count as the same
            token_weight: Weight of the Jaccard word-set overlap
            edit_weight: Weight of the normalized edit similarity
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        total = token_weight + edit_weight
        if token_weight < 0 or edit_weight < 0 or total <= 0:
            raise ValueError("weights must be non-negative and not both zero")

        self.threshold = threshold
        self.token_weight = token_weight / total
        self.edit_weight = edit_weight / total

    def score(self, a: NormalizedQuestion, b: NormalizedQuestion) -> float:
        """
        Score two already-normalized questions.

        Returns:
            Similarity score between 0.0 and 1.0
        """
        if a.is_blank or b.is_blank:
            return 0.0
        if a.text == b.text:
            return 1.0

        token_score = jaccard(a.words, b.words)
        edit_score = Levenshtein.normalized_similarity(a.text, b.text)
        return self.token_weight * token_score + self.edit_weight * edit_score

    def similarity(self, a: str, b: str) -> float:
        """
        Compute similarity between two raw question strings.

        Args:
            a: First question
            b: Second question

        Returns:
            Similarity score between 0.0 and 1.0
        """
        if not a or not b:
            return 0.0
        return self.score(prepare_question(a), prepare_question(b))

    def find_best_match(
        self,
        query: str,
        candidates: List[str],
        min_score: Optional[float] = None
    ) -> Optional[Tuple[int, float]]:
        """
        Find the highest-scoring candidate; the first one wins ties.

        Args:
            query: Query question
            candidates: Candidate questions
            min_score: Minimum score (defaults to the threshold)

        Returns:
            Tuple of (index, score), or None if nothing reaches min_score
        """
        min_score = self.threshold if min_score is None else min_score
        prepared_query = prepare_question(query)

        best: Optional[Tuple[int, float]] = None
        for index, candidate in enumerate(candidates):
            score = self.score(prepared_query, prepare_question(candidate))
            # Strict '>' keeps the earliest candidate on ties
            if best is None or score > best[1]:
                best = (index, score)

        if best is None or best[1] < min_score:
            return None
        return best

    def find_first_match(
        self,
        query: str,
        candidates: List[str],
        min_score: Optional[float] = None,
        skip: Optional[set] = None
    ) -> Optional[Tuple[int, float]]:
        """
        Find the first candidate (in list order) reaching min_score.

        Args:
            query: Query question
            candidates: Candidate questions
            min_score: Minimum score (defaults to the threshold)
            skip: Candidate indexes to ignore

        Returns:
            Tuple of (index, score), or None if nothing qualifies
        """
        min_score = self.threshold if min_score is None else min_score
        skip = skip or set()
        prepared_query = prepare_question(query)

        for index, candidate in enumerate(candidates):
            if index in skip:
                continue
            score = self.score(prepared_query, prepare_question(candidate))
            if score >= min_score:
                return index, score
        return None
