# questionbank_api/models.py
"""
Pydantic models for request validation and response serialization.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentCreateRequest(BaseModel):
    """A text document to register for analysis."""

    owner_id: int = Field(..., ge=1, description="Uploading user")
    name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    content: str = Field(
        default="",
        max_length=2_000_000,
        description="Decoded document text"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Strip and reject blank names."""
        v = v.strip()
        if not v:
            raise ValueError('Document name cannot be blank')
        return v


class DocumentResponse(BaseModel):
    """Document summary without its content."""
    id: int
    owner_id: int
    name: str
    analysis_state: str
    uploaded_at: datetime


class QuestionResponse(BaseModel):
    """One recurring question of a document."""
    model_config = ConfigDict(populate_by_name=True)

    text: str
    frequency: int
    similar_questions: List[str] = Field(default_factory=list, alias="similarQuestions")


class AnalysisResponse(BaseModel):
    """Analysis of one document, questions ranked by frequency."""
    model_config = ConfigDict(populate_by_name=True)

    topics: List[str]
    question_types: List[str] = Field(alias="questionTypes")
    difficulty: float
    questions: List[QuestionResponse]


class SimilarQuestionsRequest(BaseModel):
    """Request for practice variants of a question."""
    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(..., min_length=1, max_length=2000, alias="questionText")
    num_questions: int = Field(default=3, ge=1, le=10, alias="numQuestions")

    @field_validator('question_text')
    @classmethod
    def validate_question_text(cls, v: str) -> str:
        """Question text is required."""
        v = v.strip()
        if not v:
            raise ValueError('Question text is required')
        return v


class SimilarQuestionsResponse(BaseModel):
    """Generated practice questions."""
    questions: List[str]


class ErrorResponse(BaseModel):
    """Typed error returned for engine failures."""
    error: str
    message: str
    document_id: Optional[int] = None
