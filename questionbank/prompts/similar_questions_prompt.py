# questionbank/prompts/similar_questions_prompt.py
"""
Prompt for generating practice variants of a recurring question.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, field_validator


class SimilarQuestionsResult(BaseModel):
    """
    Result of a similar-question generation request.

    Expected format:
    {"questions": ["...", "..."]}
    """
    model_config = ConfigDict(extra='ignore', frozen=True)

    questions: List[str]

    @field_validator('questions')
    @classmethod
    def _drop_blank(cls, value: List[str]) -> List[str]:
        return [q.strip() for q in value if q and q.strip()]

    @classmethod
    def from_json(cls, json_str: str) -> 'SimilarQuestionsResult':
        """
        Decode the LLM response strictly.

        Raises:
            pydantic.ValidationError: on invalid JSON or schema mismatch
        """
        return cls.model_validate_json(json_str.strip())


class SimilarQuestionsPrompt:
    """Prompt builder for similar-question generation."""

    SYSTEM_PROMPT = """Generate similar questions that test the same concept but with different contexts or values.
Always answer with a single JSON object of the form {"questions": ["..."]}."""

    USER_PROMPT_TEMPLATE = """Original question: {question_text}
Generate {num_questions} similar questions."""

    @classmethod
    def build_messages(cls, question_text: str, num_questions: int = 3) -> List[Dict[str, str]]:
        """
        Build chat messages for a generation request.

        Args:
            question_text: The recurring question to vary
            num_questions: How many variants to ask for

        Returns:
            List of message dicts with 'role' and 'content'
        """
        return [
            {"role": "system", "content": cls.SYSTEM_PROMPT},
            {
                "role": "user",
                "content": cls.USER_PROMPT_TEMPLATE.format(
                    question_text=question_text,
                    num_questions=num_questions,
                ),
            },
        ]
