"""
Abstract persistence gateway for documents and question clusters.

This interface defines the contract the analysis orchestrator relies on,
allowing different implementations (in-memory, relational database, etc.).
The gateway is the only writer of persisted clusters.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from questionbank.domain.analysis import AnalysisMetadata
from questionbank.domain.cluster import QuestionCluster
from questionbank.domain.document import AnalysisState, Document


class PersistenceGateway(ABC):
    """
    Abstract interface for document and cluster storage.

    Implementations must be thread-safe and must commit save_clusters()
    atomically: either every updated and created cluster is written, or none.
    """

    @abstractmethod
    def load_document(self, document_id: int) -> Optional[Document]:
        """
        Retrieve a document by ID.

        Args:
            document_id: The document's unique identifier

        Returns:
            The document if found, None otherwise
        """
        pass

    @abstractmethod
    def load_clusters(self, document_id: int) -> List[QuestionCluster]:
        """
        Retrieve all clusters of a document, in creation order.

        Args:
            document_id: The owning document

        Returns:
            Independent copies of the stored clusters
        """
        pass

    @abstractmethod
    def save_clusters(
        self,
        document_id: int,
        updated: Sequence[QuestionCluster],
        created: Sequence[QuestionCluster],
        expected_count: int,
        analysis: Optional[AnalysisMetadata] = None
    ) -> List[QuestionCluster]:
        """
        Atomically commit one merge pass.

        Args:
            document_id: The owning document
            updated: Existing clusters, carrying the version they were loaded at
            created: New clusters (no id yet)
            expected_count: Number of clusters the merge was computed against;
                clusters are never deleted, so a different count means
                another writer added clusters since the caller loaded them
            analysis: Document-level metadata committed with the clusters

        Returns:
            All clusters of the document after the commit

        Raises:
            PersistenceConflict: if any updated cluster changed since it was
                loaded, or the cluster count differs from expected_count
            DocumentNotFoundError: if the document does not exist
        """
        pass

    @abstractmethod
    def set_analysis_state(self, document_id: int, state: AnalysisState) -> None:
        """
        Record the analysis state of a document.

        Args:
            document_id: The document's unique identifier
            state: New state

        Raises:
            DocumentNotFoundError: if the document does not exist
        """
        pass
