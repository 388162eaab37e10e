# LLM-backed services
from .llm_extraction_service import LLMQuestionExtractor

__all__ = ['LLMQuestionExtractor']
