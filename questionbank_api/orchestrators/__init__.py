"""
Orchestrators package for the QuestionBank API.

Contains the orchestrator that coordinates the analysis pipeline.
"""

from .analysis_orchestrator import AnalysisOrchestrator

__all__ = ["AnalysisOrchestrator"]
