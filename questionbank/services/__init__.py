# Services module for the question aggregation engine
from .similarity_service import QuestionSimilarityService, prepare_question
from .grouping_service import SimilarityGrouper
from .merge_service import FrequencyMerger, MergeResult

__all__ = [
    'QuestionSimilarityService',
    'prepare_question',
    'SimilarityGrouper',
    'FrequencyMerger',
    'MergeResult',
]
