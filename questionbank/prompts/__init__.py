"""
Prompt templates for LLM-based extraction.

This module contains structured prompts for:
- Extraction: list every question in a document plus topics/types/difficulty
- Similar questions: generate practice variants of a recurring question
"""

from .extraction_prompt import ExtractionPrompt
from .similar_questions_prompt import SimilarQuestionsPrompt, SimilarQuestionsResult

__all__ = [
    'ExtractionPrompt',
    'SimilarQuestionsPrompt',
    'SimilarQuestionsResult',
]
