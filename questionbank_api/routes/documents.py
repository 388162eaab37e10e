"""
Document upload and analysis endpoints.

Endpoints are plain ``def`` functions so FastAPI runs them in its worker
threadpool; the orchestrator blocks while an analysis is in flight.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from questionbank.domain import AnalysisResult, Document
from questionbank.errors import DocumentNotFoundError
from questionbank.logging_config import get_logger
from questionbank_api.factories import ServiceContainer
from questionbank_api.models import (
    AnalysisResponse,
    DocumentCreateRequest,
    DocumentResponse,
    ErrorResponse,
    SimilarQuestionsRequest,
    SimilarQuestionsResponse,
)

logger = get_logger("api.documents")

router = APIRouter(
    prefix="/documents",
    tags=["Documents"],
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)


def get_services(request: Request) -> ServiceContainer:
    """Return the service container attached to the running app."""
    return request.app.state.services


def _to_document_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        owner_id=document.owner_id,
        name=document.name,
        analysis_state=document.analysis_state.value,
        uploaded_at=document.uploaded_at,
    )


def _to_analysis_response(result: AnalysisResult) -> AnalysisResponse:
    return AnalysisResponse.model_validate(result.to_dict())


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document(
    payload: DocumentCreateRequest,
    services: ServiceContainer = Depends(get_services),
) -> DocumentResponse:
    """Register a document; analysis runs on first request."""
    document = services.gateway.add_document(
        owner_id=payload.owner_id,
        name=payload.name,
        content=payload.content,
    )
    logger.info(f"Document {document.id} uploaded by owner {document.owner_id}")
    return _to_document_response(document)


@router.get("", response_model=List[DocumentResponse])
def list_documents(
    owner_id: Optional[int] = Query(default=None, ge=1),
    services: ServiceContainer = Depends(get_services),
) -> List[DocumentResponse]:
    """List documents, optionally only those of one owner."""
    documents = services.gateway.list_documents(owner_id=owner_id)
    return [_to_document_response(d) for d in documents]


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    services: ServiceContainer = Depends(get_services),
) -> DocumentResponse:
    """Return one document and its analysis state."""
    document = services.gateway.load_document(document_id)
    if document is None:
        raise DocumentNotFoundError(f"Document {document_id} not found", document_id)
    return _to_document_response(document)


@router.get("/{document_id}/analysis", response_model=AnalysisResponse)
def get_analysis(
    document_id: int,
    services: ServiceContainer = Depends(get_services),
) -> AnalysisResponse:
    """
    Analyze a document, or return its stored analysis.

    Concurrent requests for the same document share one pipeline run.
    """
    result = services.orchestrator.analyze(document_id)
    return _to_analysis_response(result)


@router.post("/{document_id}/reanalyze", response_model=AnalysisResponse)
def reanalyze(
    document_id: int,
    services: ServiceContainer = Depends(get_services),
) -> AnalysisResponse:
    """Run extraction again and merge the new candidates into stored clusters."""
    result = services.orchestrator.reanalyze(document_id)
    return _to_analysis_response(result)


@router.post("/{document_id}/questions/similar", response_model=SimilarQuestionsResponse)
def similar_questions(
    document_id: int,
    payload: SimilarQuestionsRequest,
    services: ServiceContainer = Depends(get_services),
) -> SimilarQuestionsResponse:
    """Generate practice questions that test the same concept as a stored question."""
    if services.gateway.load_document(document_id) is None:
        raise DocumentNotFoundError(f"Document {document_id} not found", document_id)

    generate = getattr(services.extractor, "generate_similar_questions", None)
    if generate is None:
        raise HTTPException(
            status_code=501,
            detail="Configured extractor cannot generate similar questions",
        )

    questions = generate(payload.question_text, payload.num_questions)
    return SimilarQuestionsResponse(questions=questions)
