# questionbank/domain/analysis.py
"""
Domain models for extraction output and analysis results.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .cluster import QuestionCluster


class ExtractionResult(BaseModel):
    """
    Schema-validated output of one extractor run.

    Decoding is strict: a missing or malformed candidate list is an error,
    never coerced to an empty list.
    """
    model_config = ConfigDict(extra='ignore', frozen=True)

    topics: List[str] = Field(default_factory=list)
    question_types: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices('questionTypes', 'question_types'),
    )
    difficulty: float = Field(ge=1, le=5)
    raw_candidates: List[str] = Field(
        validation_alias=AliasChoices('rawCandidates', 'raw_candidates', 'questions'),
    )

    @field_validator('raw_candidates', mode='before')
    @classmethod
    def _coerce_candidates(cls, value: Any) -> List[str]:
        """Accept plain strings or {"text": ...} objects; reject anything else."""
        if not isinstance(value, list):
            raise ValueError('raw candidates must be a list')
        candidates = []
        for item in value:
            if isinstance(item, dict):
                item = item.get('text')
            if not isinstance(item, str):
                raise ValueError(f'malformed candidate: {item!r}')
            candidates.append(item)
        return candidates

    @classmethod
    def from_json(cls, json_str: str) -> 'ExtractionResult':
        """
        Decode an extractor response.

        Raises:
            pydantic.ValidationError: if the payload is not valid JSON or
                does not match the schema
        """
        return cls.model_validate_json(json_str.strip())

    @property
    def metadata(self) -> 'AnalysisMetadata':
        return AnalysisMetadata(
            topics=list(self.topics),
            question_types=list(self.question_types),
            difficulty=self.difficulty,
        )


@dataclass
class AnalysisMetadata:
    """Document-level facts from the last successful extraction."""
    topics: List[str] = field(default_factory=list)
    question_types: List[str] = field(default_factory=list)
    difficulty: float = 0.0


@dataclass
class AnalysisResult:
    """
    What analyze() returns: document metadata plus ranked clusters.

    Clusters are ordered by frequency (descending); ties keep creation order.
    """
    topics: List[str]
    question_types: List[str]
    difficulty: float
    clusters: List[QuestionCluster] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        metadata: AnalysisMetadata,
        clusters: List[QuestionCluster]
    ) -> 'AnalysisResult':
        # sorted() is stable, so equal frequencies keep gateway order
        ranked = sorted(clusters, key=lambda c: c.frequency, reverse=True)
        return cls(
            topics=list(metadata.topics),
            question_types=list(metadata.question_types),
            difficulty=metadata.difficulty,
            clusters=ranked,
        )

    @property
    def total_occurrences(self) -> int:
        return sum(c.frequency for c in self.clusters)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the caller-facing shape."""
        return {
            'topics': list(self.topics),
            'questionTypes': list(self.question_types),
            'difficulty': self.difficulty,
            'questions': [c.to_dict() for c in self.clusters],
        }
