# questionbank/prompts/extraction_prompt.py
"""
Prompt for question extraction.

Asks the LLM to list every individual question in a study document,
verbatim and one entry per occurrence, together with topics, question
types and a difficulty estimate. Grouping is NOT delegated to the model;
repeated questions must be listed every time they occur.
"""
from typing import Dict, List


class ExtractionPrompt:
    """
    Prompt builder for raw question extraction.

    The response must be a single JSON object matching ExtractionResult.
    """

    SYSTEM_PROMPT = """You are an expert in analyzing educational content and question papers.
You extract the questions a document contains, exactly as written.

IMPORTANT:
- List EVERY question occurrence, including repeats, in document order
- Copy question text verbatim; do not merge, rephrase or deduplicate
- Do not invent questions that are not in the document

Always answer with a single JSON object."""

    USER_PROMPT_TEMPLATE = """Analyze this question paper and return:
1. "topics": main topics covered (list of strings)
2. "questionTypes": types of questions, e.g. MCQ, descriptive, numerical (list of strings)
3. "difficulty": overall difficulty from 1 (easy) to 5 (hard) (number)
4. "rawCandidates": every individual question, verbatim, one entry per occurrence (list of strings, at most {max_candidates})

Answer format:
{{"topics": [...], "questionTypes": [...], "difficulty": 3, "rawCandidates": ["...", "..."]}}

Content to analyze:
---
{content}
---"""

    @classmethod
    def build_messages(cls, content: str, max_candidates: int = 200) -> List[Dict[str, str]]:
        """
        Build chat messages for an extraction request.

        Args:
            content: Document text, already cut to the configured length
            max_candidates: Upper bound on questions the model should list

        Returns:
            List of message dicts with 'role' and 'content'
        """
        return [
            {"role": "system", "content": cls.SYSTEM_PROMPT},
            {
                "role": "user",
                "content": cls.USER_PROMPT_TEMPLATE.format(
                    content=content,
                    max_candidates=max_candidates,
                ),
            },
        ]
