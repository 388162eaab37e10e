# questionbank/services/ai/llm_extraction_service.py
"""
LLM-based question extraction.

Provides:
- Raw question extraction with topics, question types and difficulty
- Similar-question generation for a recurring question

Responses are decoded strictly against a pydantic schema; anything that
does not validate is an ExtractionFailure, never a best-effort parse.
"""
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as SchemaValidationError

from ...domain.analysis import ExtractionResult
from ...errors import ExtractionFailure
from ...logging_config import get_logger
from ...prompts.extraction_prompt import ExtractionPrompt
from ...prompts.similar_questions_prompt import SimilarQuestionsPrompt, SimilarQuestionsResult

logger = get_logger('llm_extraction_service')


class LLMQuestionExtractor:
    """
    Question extractor backed by a chat-completion LLM.

    Can be used with:
    - OpenAI API (openai.OpenAI client)
    - Azure OpenAI or any OpenAI-compatible endpoint
    - Any callable taking a prompt string and returning the response text
    """

    def __init__(
        self,
        client: Any = None,
        model_name: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_candidates: int = 200,
        max_content_chars: int = 40_000
    ):
        """
        Initialize the extractor.

        Args:
            client: LLM client (e.g., OpenAI client) or callable
            model_name: Model to use
            temperature: Generation temperature
            max_candidates: Upper bound on questions requested from the model
            max_content_chars: Document text beyond this is not sent
        """
        self.client = client
        self.model_name = model_name
        self.temperature = temperature
        self.max_candidates = max_candidates
        self.max_content_chars = max_content_chars

    def extract(self, text: str) -> ExtractionResult:
        """
        Extract raw candidate questions from document text.

        Args:
            text: Decoded document text

        Returns:
            ExtractionResult

        Raises:
            ExtractionFailure: if the LLM call fails or the response is malformed
        """
        if len(text) > self.max_content_chars:
            logger.warning(
                f"Document text has {len(text)} characters, only the first "
                f"{self.max_content_chars} are sent for extraction; "
                f"questions after that point are not found"
            )
            text = text[:self.max_content_chars]

        messages = ExtractionPrompt.build_messages(text, self.max_candidates)
        response = self._request(messages, purpose="extraction")

        try:
            result = ExtractionResult.from_json(response)
        except SchemaValidationError as e:
            logger.error(f"Malformed extraction response: {e.error_count()} schema error(s)")
            logger.debug(f"Raw extraction response: {response[:500]}")
            raise ExtractionFailure(f"Malformed extractor output: {e}") from e

        logger.info(
            f"Extracted {len(result.raw_candidates)} candidates, "
            f"{len(result.topics)} topics, difficulty {result.difficulty}"
        )
        return result

    def generate_similar_questions(
        self,
        question_text: str,
        num_questions: int = 3
    ) -> List[str]:
        """
        Generate practice questions testing the same concept.

        Args:
            question_text: The recurring question to vary
            num_questions: How many variants to generate

        Returns:
            List of generated questions

        Raises:
            ExtractionFailure: if the LLM call fails or the response is malformed
        """
        messages = SimilarQuestionsPrompt.build_messages(question_text, num_questions)
        response = self._request(messages, purpose="similar-question generation")

        try:
            result = SimilarQuestionsResult.from_json(response)
        except SchemaValidationError as e:
            raise ExtractionFailure(f"Malformed similar-questions output: {e}") from e

        return list(result.questions[:num_questions])

    def _request(self, messages: List[Dict[str, str]], purpose: str) -> str:
        if self.client is None:
            raise ExtractionFailure("No LLM client configured")

        try:
            response = self._call_llm_chat(messages)
        except ExtractionFailure:
            raise
        except Exception as e:
            logger.error(f"LLM {purpose} call failed: {e}")
            raise ExtractionFailure(f"LLM {purpose} call failed: {e}") from e

        if not response or not response.strip():
            raise ExtractionFailure(f"LLM returned an empty {purpose} response")
        return response

    def _call_llm_chat(self, messages: List[Dict[str, str]]) -> Optional[str]:
        """
        Call LLM with chat messages format.

        Args:
            messages: List of message dicts with 'role' and 'content'

        Returns:
            Response text
        """
        # OpenAI-style client
        if hasattr(self.client, 'chat') and hasattr(self.client.chat, 'completions'):
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
            return response.choices[0].message.content

        # Generic client with __call__ (pass as single prompt)
        if callable(self.client):
            prompt = "\n\n".join([
                f"{m['role'].upper()}: {m['content']}"
                for m in messages
            ])
            return self.client(prompt)

        raise ExtractionFailure("Unsupported LLM client type")

    @property
    def is_available(self) -> bool:
        """Check if an LLM client is configured."""
        return self.client is not None
