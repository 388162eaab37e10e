"""
In-memory implementation of the persistence gateway.

This implementation stores documents and clusters in dictionaries. It's
suitable for development, tests and single-instance deployments.

Note: Data is lost when the process restarts.
"""

import copy
from threading import Lock
from typing import Dict, List, Optional, Sequence

from questionbank.domain.analysis import AnalysisMetadata
from questionbank.domain.cluster import QuestionCluster
from questionbank.domain.document import AnalysisState, Document
from questionbank.errors import DocumentNotFoundError, PersistenceConflict
from questionbank.logging_config import get_logger
from .persistence_gateway import PersistenceGateway

logger = get_logger("memory_gateway")


class MemoryPersistenceGateway(PersistenceGateway):
    """
    Thread-safe in-memory document and cluster storage.

    Uses dictionaries guarded by a single lock. Cluster updates use
    optimistic concurrency: every stored cluster has a version that must
    match the version the caller loaded.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._documents: Dict[int, Document] = {}
        self._clusters: Dict[int, List[QuestionCluster]] = {}
        self._next_document_id = 1
        self._next_cluster_id = 1
        self._lock = Lock()

    # -- documents ---------------------------------------------------------

    def add_document(self, owner_id: int, name: str, content: str) -> Document:
        """
        Register a new document with analysis state NONE.

        Returns:
            A copy of the stored document
        """
        with self._lock:
            document = Document(
                id=self._next_document_id,
                owner_id=owner_id,
                name=name,
                content=content,
            )
            self._next_document_id += 1
            self._documents[document.id] = document
            self._clusters[document.id] = []
            logger.debug(f"Stored document {document.id} ({name})")
            return copy.deepcopy(document)

    def load_document(self, document_id: int) -> Optional[Document]:
        """Retrieve a document by ID."""
        with self._lock:
            document = self._documents.get(document_id)
            return copy.deepcopy(document) if document else None

    def list_documents(self, owner_id: Optional[int] = None) -> List[Document]:
        """List documents, optionally only those of one owner."""
        with self._lock:
            return [
                copy.deepcopy(doc)
                for doc in self._documents.values()
                if owner_id is None or doc.owner_id == owner_id
            ]

    def set_analysis_state(self, document_id: int, state: AnalysisState) -> None:
        """Record the analysis state of a document."""
        with self._lock:
            self._require_document(document_id).analysis_state = state

    # -- clusters ----------------------------------------------------------

    def load_clusters(self, document_id: int) -> List[QuestionCluster]:
        """Retrieve copies of all clusters of a document."""
        with self._lock:
            return [c.copy() for c in self._clusters.get(document_id, [])]

    def save_clusters(
        self,
        document_id: int,
        updated: Sequence[QuestionCluster],
        created: Sequence[QuestionCluster],
        expected_count: int,
        analysis: Optional[AnalysisMetadata] = None
    ) -> List[QuestionCluster]:
        """Atomically commit updated and created clusters."""
        with self._lock:
            document = self._require_document(document_id)
            stored = {c.id: c for c in self._clusters[document_id]}

            # Validate everything before writing anything
            if len(stored) != expected_count:
                raise PersistenceConflict(
                    f"Document {document_id} has {len(stored)} clusters, "
                    f"merge was computed against {expected_count}",
                    document_id=document_id,
                )
            for cluster in updated:
                current = stored.get(cluster.id)
                if current is None or current.version != cluster.version:
                    raise PersistenceConflict(
                        f"Cluster {cluster.id} of document {document_id} changed concurrently",
                        document_id=document_id,
                    )
            for cluster in created:
                if cluster.id is not None:
                    raise ValueError(f"New cluster already has id {cluster.id}")
                if cluster.document_id != document_id:
                    raise ValueError("New cluster belongs to another document")

            for cluster in updated:
                replacement = cluster.copy()
                replacement.version = cluster.version + 1
                stored[cluster.id] = replacement

            clusters = [stored[c.id] for c in self._clusters[document_id]]
            for cluster in created:
                new_cluster = cluster.copy()
                new_cluster.id = self._next_cluster_id
                new_cluster.version = 1
                self._next_cluster_id += 1
                clusters.append(new_cluster)

            self._clusters[document_id] = clusters
            if analysis is not None:
                document.analysis = copy.deepcopy(analysis)

            logger.debug(
                f"Committed {len(updated)} updated and {len(created)} new clusters "
                f"for document {document_id}"
            )
            return [c.copy() for c in clusters]

    def count_clusters(self, document_id: int) -> int:
        """Count stored clusters of a document."""
        with self._lock:
            return len(self._clusters.get(document_id, []))

    def clear(self) -> int:
        """
        Clear all documents and clusters (for testing).

        Returns:
            Number of documents cleared
        """
        with self._lock:
            count = len(self._documents)
            self._documents.clear()
            self._clusters.clear()
            return count

    def _require_document(self, document_id: int) -> Document:
        document = self._documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found", document_id=document_id)
        return document
