# questionbank/services/grouping_service.py
"""
Service for grouping raw candidate questions using the Leader algorithm.

Single-pass greedy clustering in input order:
1. Normalize each candidate (case, whitespace, terminal punctuation)
2. Score it against the representative of every group formed so far
3. Join the best-scoring group if it reaches the threshold, otherwise
   become the representative of a new group

O(n^2) in the batch size, which is bounded by the extraction batch limit.
"""
from typing import Dict, List, Optional, Sequence

from ..config import AppConfig
from ..domain.cluster import QuestionGroup
from ..logging_config import get_logger
from .interfaces import IBatchSimilarityService
from .similarity_service import QuestionSimilarityService, prepare_question

logger = get_logger('grouping_service')


class SimilarityGrouper:
    """
    Groups one batch of raw candidates into canonical question groups.

    The first member of a group is its representative; group frequency is
    the number of members. Original strings are kept, normalization is only
    used for scoring.
    """

    def __init__(
        self,
        config: AppConfig,
        similarity_service: Optional[IBatchSimilarityService] = None
    ):
        """
        Initialize the grouper.

        Args:
            config: Application configuration
            similarity_service: Service for scoring question pairs
        """
        self.config = config

        if similarity_service is None:
            self.similarity_service = QuestionSimilarityService(
                threshold=config.clustering.similarity_threshold,
                token_weight=config.clustering.token_weight,
                edit_weight=config.clustering.edit_weight,
            )
        else:
            self.similarity_service = similarity_service

    def group(self, raw_candidates: Sequence[str]) -> List[QuestionGroup]:
        """
        Group raw candidates by similarity.

        Args:
            raw_candidates: Candidate question strings (may be empty, may
                contain duplicates and near-duplicates)

        Returns:
            Groups in order of creation
        """
        if not raw_candidates:
            return []

        logger.debug(f"Grouping {len(raw_candidates)} raw candidates")

        groups: List[QuestionGroup] = []
        representatives: List[str] = []
        leader_index: Dict[str, int] = {}  # normalized representative -> group index

        for candidate in raw_candidates:
            prepared = prepare_question(candidate)
            if prepared.is_blank:
                logger.debug(f"Skipping blank candidate: {candidate!r}")
                continue

            # Identical to a representative: score 1.0, cannot be beaten
            if prepared.text in leader_index:
                groups[leader_index[prepared.text]].add_member(candidate)
                continue

            # First maximum wins ties; None when nothing reaches the threshold
            match = self.similarity_service.find_best_match(candidate, representatives)
            if match is not None:
                groups[match[0]].add_member(candidate)
            else:
                groups.append(QuestionGroup(representative=candidate))
                representatives.append(candidate)
                leader_index[prepared.text] = len(groups) - 1

        logger.info(f"Created {len(groups)} groups from {len(raw_candidates)} candidates")
        return groups

    def get_group_statistics(self, groups: List[QuestionGroup]) -> dict:
        """
        Compute statistics about a grouping pass.

        Args:
            groups: Groups returned by group()

        Returns:
            Dictionary with statistics
        """
        if not groups:
            return {
                'total_groups': 0,
                'total_candidates': 0,
                'max_frequency': 0,
                'singletons': 0
            }

        counts = [g.count for g in groups]

        return {
            'total_groups': len(groups),
            'total_candidates': sum(counts),
            'max_frequency': max(counts),
            'singletons': sum(1 for c in counts if c == 1)
        }
