"""
Service factory for creating and wiring the analysis services.

This factory centralizes the creation of the services used by the
analysis pipeline, supporting dependency injection and testability.
The persistence gateway is constructed once per process by the caller and
passed in; nothing here keeps module-level storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from openai import OpenAI

from questionbank.config import AppConfig, load_config
from questionbank.logging_config import get_logger
from questionbank.services.ai.llm_extraction_service import LLMQuestionExtractor
from questionbank.services.grouping_service import SimilarityGrouper
from questionbank.services.interfaces import IQuestionExtractor
from questionbank.services.merge_service import FrequencyMerger
from questionbank.services.similarity_service import QuestionSimilarityService
from questionbank_api.orchestrators import AnalysisOrchestrator
from questionbank_api.repositories import PersistenceGateway

logger = get_logger("factory")


@dataclass
class ServiceContainer:
    """
    Container holding all instantiated services of one process.

    Groups related services together for easy access and dependency
    management by the API layer.
    """
    config: AppConfig
    gateway: PersistenceGateway
    similarity: QuestionSimilarityService
    grouper: SimilarityGrouper
    merger: FrequencyMerger
    extractor: IQuestionExtractor
    orchestrator: AnalysisOrchestrator


class ServiceFactory:
    """
    Factory for creating and configuring service instances.

    The grouper and merger always share one similarity service so that the
    within-batch and across-run matching use the same measure and threshold.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        """
        Initialize the service factory.

        Args:
            config: Application configuration. If None, loads it from settings.
        """
        self.config = config or load_config()

    def create_llm_client(self) -> Optional[Any]:
        """
        Create an OpenAI client if an API key is configured.

        Returns:
            OpenAI client, or None when no key is set
        """
        api_key = self.config.extraction.llm_api_key
        if not api_key:
            logger.warning("No LLM API key configured; extraction will fail until one is set")
            return None

        return OpenAI(api_key=api_key, timeout=self.config.extraction.timeout_seconds)

    def create_extractor(self, llm_client: Optional[Any] = None) -> LLMQuestionExtractor:
        """
        Create the LLM-backed question extractor.

        Args:
            llm_client: Client to use. If None, creates one from config.
        """
        extraction = self.config.extraction
        return LLMQuestionExtractor(
            client=llm_client if llm_client is not None else self.create_llm_client(),
            model_name=extraction.llm_model,
            temperature=extraction.llm_temperature,
            max_candidates=extraction.max_candidates,
            max_content_chars=extraction.max_content_chars,
        )

    def create_services(
        self,
        gateway: PersistenceGateway,
        extractor: Optional[IQuestionExtractor] = None,
    ) -> ServiceContainer:
        """
        Create and wire every service needed for analysis.

        Args:
            gateway: Persistence gateway, constructed once per process
            extractor: Question extractor. If None, creates the LLM extractor.

        Returns:
            ServiceContainer with all services initialized
        """
        config = self.config
        clustering = config.clustering

        similarity = QuestionSimilarityService(
            threshold=clustering.similarity_threshold,
            token_weight=clustering.token_weight,
            edit_weight=clustering.edit_weight,
        )
        grouper = SimilarityGrouper(config, similarity_service=similarity)
        merger = FrequencyMerger(config, similarity_service=similarity)
        if extractor is None:
            extractor = self.create_extractor()

        orchestrator = AnalysisOrchestrator(
            gateway=gateway,
            extractor=extractor,
            grouper=grouper,
            merger=merger,
            config=config,
        )

        logger.info(
            f"Services ready (threshold={clustering.similarity_threshold}, "
            f"timeout={config.extraction.timeout_ms}ms, "
            f"max_candidates={config.extraction.max_candidates})"
        )

        return ServiceContainer(
            config=config,
            gateway=gateway,
            similarity=similarity,
            grouper=grouper,
            merger=merger,
            extractor=extractor,
            orchestrator=orchestrator,
        )
