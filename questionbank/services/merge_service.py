# questionbank/services/merge_service.py
"""
Service for reconciling a fresh batch of question groups with the clusters
already persisted for a document.

A merge pass never deletes clusters and never replaces canonical text:
- matched clusters get their frequency incremented and absorb new variants
- unmatched groups become brand-new clusters
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set

from ..config import AppConfig
from ..domain.cluster import QuestionCluster, QuestionGroup
from ..logging_config import get_logger
from .interfaces import IBatchSimilarityService
from .similarity_service import QuestionSimilarityService

logger = get_logger('merge_service')


@dataclass
class MergeResult:
    """
    Outcome of one merge pass.

    Attributes:
        updated_clusters: Copies of existing clusters that absorbed a group
        new_clusters: Clusters created for unmatched groups (no id yet)
    """
    updated_clusters: List[QuestionCluster] = field(default_factory=list)
    new_clusters: List[QuestionCluster] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.updated_clusters and not self.new_clusters


class FrequencyMerger:
    """
    Merges new groups into existing clusters without double counting.

    Each existing cluster is matched by at most one group per pass, and each
    group matches at most one cluster: the first unclaimed existing cluster
    (in existing order) whose canonical text reaches the threshold.
    """

    def __init__(
        self,
        config: AppConfig,
        similarity_service: Optional[IBatchSimilarityService] = None
    ):
        """
        Initialize the merger.

        Args:
            config: Application configuration
            similarity_service: Must be the same measure the grouper uses
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

    def merge(
        self,
        new_groups: Sequence[QuestionGroup],
        existing_clusters: Sequence[QuestionCluster],
        document_id: int,
        now: Optional[datetime] = None
    ) -> MergeResult:
        """
        Reconcile new groups against persisted clusters.

        The existing clusters passed in are not modified; updated copies are
        returned so a failed commit leaves nothing half-applied.

        Args:
            new_groups: Groups from the grouper, in creation order
            existing_clusters: Clusters currently persisted for the document
            document_id: Owning document
            now: Timestamp recorded as last_seen_at (defaults to utcnow)

        Returns:
            MergeResult with updated and new clusters
        """
        now = now or datetime.now(timezone.utc)

        working = [cluster.copy() for cluster in existing_clusters]
        canonical_texts = [cluster.canonical_text for cluster in working]
        claimed: Set[int] = set()
        created: List[QuestionCluster] = []

        for group in new_groups:
            match = self.similarity_service.find_first_match(
                group.representative,
                canonical_texts,
                skip=claimed,
            )

            if match is not None:
                index, score = match
                claimed.add(index)
                working[index].absorb(group, now)
                logger.debug(
                    f"Group '{group.representative[:50]}' merged into cluster "
                    f"{working[index].id} (score {score:.2f}, +{group.count})"
                )
            else:
                created.append(self._new_cluster(group, document_id, now))

        result = MergeResult(
            updated_clusters=[working[i] for i in sorted(claimed)],
            new_clusters=created,
        )
        logger.info(
            f"Merged {len(new_groups)} groups for document {document_id}: "
            f"{len(result.updated_clusters)} updated, {len(result.new_clusters)} new"
        )
        return result

    @staticmethod
    def _new_cluster(
        group: QuestionGroup,
        document_id: int,
        now: datetime
    ) -> QuestionCluster:
        variants: List[str] = []
        for member in group.members:
            if member != group.representative and member not in variants:
                variants.append(member)

        return QuestionCluster(
            document_id=document_id,
            canonical_text=group.representative,
            frequency=group.count,
            similar_variants=variants,
            last_seen_at=now,
        )
