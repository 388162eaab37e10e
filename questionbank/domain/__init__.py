# Domain models for the question aggregation engine
from .cluster import QuestionCluster, QuestionGroup
from .analysis import AnalysisMetadata, AnalysisResult, ExtractionResult
from .document import AnalysisState, Document

__all__ = [
    'QuestionCluster',
    'QuestionGroup',
    'AnalysisMetadata',
    'AnalysisResult',
    'ExtractionResult',
    'AnalysisState',
    'Document',
]
