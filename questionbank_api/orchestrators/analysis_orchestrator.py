"""
Analysis orchestrator for coordinating the question aggregation pipeline.

Pipeline per document:
1. Load the document and check its analysis state
2. Extract raw candidate questions (with timeout)
3. Group candidates by similarity
4. Merge groups into the persisted clusters
5. Commit atomically and mark the document COMPLETE

At most one pipeline runs per document at a time; concurrent callers for
the same document share the running one.
"""

from __future__ import annotations

from concurrent import futures
from concurrent.futures import Future
from dataclasses import dataclass, field
from threading import Lock, Thread, current_thread
from typing import Dict, List, Optional, Set

from questionbank.config import AppConfig
from questionbank.domain.analysis import AnalysisMetadata, AnalysisResult, ExtractionResult
from questionbank.domain.cluster import QuestionCluster, QuestionGroup
from questionbank.domain.document import AnalysisState, Document
from questionbank.errors import (
    AnalysisError,
    DocumentNotFoundError,
    ExtractionFailure,
    PersistenceConflict,
    QuestionBankError,
    ValidationError,
)
from questionbank.logging_config import document_logger, get_logger
from questionbank.services.grouping_service import SimilarityGrouper
from questionbank.services.interfaces import IQuestionExtractor
from questionbank.services.merge_service import FrequencyMerger
from questionbank.utils.timing import Timer, timed
from questionbank_api.repositories import PersistenceGateway

logger = get_logger("orchestrator")


@dataclass
class _Flight:
    """One running pipeline and the number of callers blocked on it."""
    future: Future = field(default_factory=Future)
    waiters: int = 0


class AnalysisOrchestrator:
    """
    Single entry point for document analysis.

    Owns the per-document in-flight registry. The first caller for a
    document runs the pipeline; callers arriving while it runs block on the
    same future and receive the same result or the same error.

    Every extractor call runs on its own daemon thread, so different
    documents never wait on each other and a hung call abandoned after its
    timeout does not hold capacity other documents need.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        extractor: IQuestionExtractor,
        grouper: SimilarityGrouper,
        merger: FrequencyMerger,
        config: AppConfig,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            gateway: Persistence gateway (the only writer of clusters)
            extractor: Question extractor
            grouper: Batch similarity grouper
            merger: Frequency merger
            config: Application configuration
        """
        self._gateway = gateway
        self._extractor = extractor
        self._grouper = grouper
        self._merger = merger
        self._config = config
        self._in_flight: Dict[int, _Flight] = {}
        self._extractor_threads: Set[Thread] = set()
        self._lock = Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(self, document_id: int) -> AnalysisResult:
        """
        Return the analysis of a document, running it if needed.

        Args:
            document_id: Document to analyze

        Returns:
            AnalysisResult with ranked clusters

        Raises:
            DocumentNotFoundError: unknown document
            ValidationError: empty document text
            ExtractionFailure: extractor failed, timed out or returned garbage
            PersistenceConflict: commit kept losing concurrent-write races
            AnalysisError: any other pipeline failure
        """
        with self._lock:
            flight = self._in_flight.get(document_id)
            is_leader = flight is None
            if is_leader:
                flight = _Flight()
                self._in_flight[document_id] = flight
            else:
                flight.waiters += 1

        if is_leader:
            return self._lead(document_id, flight, reset=False)

        logger.info(f"Analysis of document {document_id} already running, waiting for it")
        try:
            return flight.future.result()
        finally:
            with self._lock:
                flight.waiters -= 1

    def reanalyze(self, document_id: int) -> AnalysisResult:
        """
        Explicitly reprocess a document.

        Waits for any running analysis of the document, resets its state to
        NONE and runs the pipeline again. New occurrences are merged into the
        existing clusters.

        Args:
            document_id: Document to reprocess

        Returns:
            AnalysisResult of the new run
        """
        while True:
            with self._lock:
                flight = self._in_flight.get(document_id)
                if flight is None:
                    flight = _Flight()
                    self._in_flight[document_id] = flight
                    break
            futures.wait([flight.future])

        return self._lead(document_id, flight, reset=True)

    def is_running(self, document_id: int) -> bool:
        """Check if an analysis of the document is in flight in this process."""
        with self._lock:
            return document_id in self._in_flight

    def waiting_callers(self, document_id: int) -> int:
        """Number of callers blocked on the document's running analysis."""
        with self._lock:
            flight = self._in_flight.get(document_id)
            return flight.waiters if flight else 0

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Wait for extractor calls still running, including abandoned ones.

        Args:
            wait: If False, return immediately; daemon threads never block exit
            timeout: Upper bound in seconds per thread when waiting
        """
        if not wait:
            return
        with self._lock:
            threads = list(self._extractor_threads)
        for thread in threads:
            thread.join(timeout)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _lead(self, document_id: int, flight: _Flight, reset: bool) -> AnalysisResult:
        try:
            result = self._run(document_id, reset)
        except Exception as exc:
            flight.future.set_exception(exc)
            raise
        else:
            flight.future.set_result(result)
            return result
        finally:
            if not flight.future.done():
                flight.future.set_exception(AnalysisError(
                    f"Analysis of document {document_id} was interrupted",
                    document_id=document_id,
                ))
            with self._lock:
                self._in_flight.pop(document_id, None)

    def _run(self, document_id: int, reset: bool) -> AnalysisResult:
        log = document_logger(logger, document_id)

        document = self._gateway.load_document(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found", document_id=document_id)

        if reset:
            log.info("Resetting analysis state")
            self._gateway.set_analysis_state(document_id, AnalysisState.NONE)
            document.analysis_state = AnalysisState.NONE

        if document.analysis_state == AnalysisState.COMPLETE:
            log.debug("Already analyzed, returning stored result")
            return self._stored_result(document)

        if document.analysis_state == AnalysisState.IN_PROGRESS:
            # Not in our registry, so the run that set this state is gone
            log.warning("Found an interrupted analysis, restarting")

        if not document.has_text:
            raise ValidationError(
                f"Document {document_id} has no readable text",
                document_id=document_id,
            )

        log.info(f"BEGIN analysis ({document.name})")
        self._gateway.set_analysis_state(document_id, AnalysisState.IN_PROGRESS)

        try:
            extraction = self._extract(document)
            candidates = self._limit_candidates(document_id, extraction.raw_candidates)
            groups = self._grouper.group(candidates)
            log.debug(f"Grouping stats: {self._grouper.get_group_statistics(groups)}")
            metadata = extraction.metadata
            clusters = self._commit(document_id, groups, metadata)
            self._gateway.set_analysis_state(document_id, AnalysisState.COMPLETE)
        except QuestionBankError as exc:
            log.error(f"Analysis FAILED: {exc}")
            self._mark_failed(document_id)
            raise
        except Exception as exc:
            log.exception("Analysis FAILED unexpectedly")
            self._mark_failed(document_id)
            raise AnalysisError(
                f"Analysis of document {document_id} failed: {exc}",
                document_id=document_id,
            ) from exc

        result = AnalysisResult.build(metadata, clusters)
        log.info(
            f"Analysis COMPLETE: {len(result.clusters)} clusters, "
            f"{result.total_occurrences} occurrences"
        )
        return result

    def _extract(self, document: Document) -> ExtractionResult:
        timeout = self._config.extraction.timeout_seconds
        call: Future = Future()
        worker = Thread(
            target=self._call_extractor,
            args=(document.content, call),
            name=f"extractor-doc{document.id}",
            daemon=True,
        )
        with self._lock:
            self._extractor_threads.add(worker)
        worker.start()

        try:
            with Timer(f"Extraction document={document.id}", log_level="DEBUG"):
                result = call.result(timeout=timeout)
        except futures.TimeoutError as e:
            # The worker keeps running; its late result is discarded
            raise ExtractionFailure(
                f"Extraction of document {document.id} timed out after {timeout:.1f}s",
                document_id=document.id,
            ) from e
        except ExtractionFailure:
            raise
        except Exception as e:
            raise ExtractionFailure(
                f"Extraction of document {document.id} failed: {e}",
                document_id=document.id,
            ) from e

        if not isinstance(result, ExtractionResult):
            raise ExtractionFailure(
                f"Extractor returned {type(result).__name__}, expected ExtractionResult",
                document_id=document.id,
            )
        return result

    def _call_extractor(self, text: str, call: Future) -> None:
        try:
            if call.set_running_or_notify_cancel():
                try:
                    call.set_result(self._extractor.extract(text))
                except Exception as exc:
                    call.set_exception(exc)
        finally:
            with self._lock:
                self._extractor_threads.discard(current_thread())

    def _limit_candidates(self, document_id: int, candidates: List[str]) -> List[str]:
        limit = self._config.extraction.max_candidates
        if len(candidates) > limit:
            document_logger(logger, document_id).warning(
                f"{len(candidates)} candidates exceed the batch limit of {limit}, "
                f"keeping the first {limit}"
            )
            return list(candidates[:limit])
        return list(candidates)

    @timed("Commit clusters")
    def _commit(
        self,
        document_id: int,
        groups: List[QuestionGroup],
        metadata: AnalysisMetadata,
    ) -> List[QuestionCluster]:
        attempts = self._config.persistence.max_commit_attempts

        for attempt in range(1, attempts + 1):
            existing = self._gateway.load_clusters(document_id)
            merged = self._merger.merge(groups, existing, document_id)
            try:
                return self._gateway.save_clusters(
                    document_id,
                    merged.updated_clusters,
                    merged.new_clusters,
                    expected_count=len(existing),
                    analysis=metadata,
                )
            except PersistenceConflict:
                if attempt >= attempts:
                    raise
                document_logger(logger, document_id).warning(
                    f"Commit conflict, attempt {attempt}/{attempts}. "
                    f"Retrying with fresh clusters..."
                )

        # Only reachable when max_commit_attempts < 1
        raise PersistenceConflict(
            f"No commit attempts allowed for document {document_id}",
            document_id=document_id,
        )

    def _stored_result(self, document: Document) -> AnalysisResult:
        metadata = document.analysis or AnalysisMetadata()
        clusters = self._gateway.load_clusters(document.id)
        return AnalysisResult.build(metadata, clusters)

    def _mark_failed(self, document_id: int) -> None:
        try:
            self._gateway.set_analysis_state(document_id, AnalysisState.FAILED)
        except Exception:
            logger.exception(f"Could not mark document {document_id} as failed")
