# questionbank/domain/cluster.py
"""
Domain models for groups and persisted clusters of similar questions.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class QuestionGroup:
    """
    A batch-local group of similar raw candidates, produced by the grouper.

    Attributes:
        representative: The first member, which started the group
        members: All raw candidates in input order (duplicates kept)
    """
    representative: str
    members: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.members:
            self.members = [self.representative]

    def add_member(self, text: str) -> None:
        """Add a raw candidate to this group."""
        self.members.append(text)

    @property
    def count(self) -> int:
        """Number of raw occurrences in this group."""
        return len(self.members)


@dataclass
class QuestionCluster:
    """
    The durable unit of output: one recurring question of a document.

    Attributes:
        id: Cluster identifier (assigned by the persistence gateway)
        document_id: Owning document
        canonical_text: First-seen raw candidate, fixed at creation
        frequency: Cumulative count of raw candidates ever folded in
        similar_variants: Distinct variant strings, excluding canonical_text
        last_seen_at: Timestamp of the most recent contributing run
        version: Optimistic concurrency counter, bumped on every commit
    """
    document_id: int
    canonical_text: str
    frequency: int = 1
    similar_variants: List[str] = field(default_factory=list)
    last_seen_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[int] = None
    version: int = 0

    def __post_init__(self):
        """Validate cluster data after initialization."""
        if self.document_id is None:
            raise ValueError("QuestionCluster requires a document_id")
        if self.frequency < 1:
            raise ValueError("QuestionCluster frequency must be positive")

    def absorb(self, group: QuestionGroup, seen_at: datetime) -> None:
        """
        Fold a group of new occurrences into this cluster.

        canonical_text never changes; only distinct new strings become variants.
        """
        self.frequency += group.count
        for member in group.members:
            if member != self.canonical_text and member not in self.similar_variants:
                self.similar_variants.append(member)
        self.last_seen_at = seen_at

    def copy(self) -> 'QuestionCluster':
        """Return an independent copy (variants list included)."""
        return replace(self, similar_variants=list(self.similar_variants))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the caller-facing shape."""
        return {
            'text': self.canonical_text,
            'frequency': self.frequency,
            'similarQuestions': list(self.similar_variants),
        }
