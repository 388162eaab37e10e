"""
Factories package for the QuestionBank API.

Contains factory classes for creating and wiring services.
"""

from .service_factory import ServiceFactory, ServiceContainer

__all__ = ["ServiceFactory", "ServiceContainer"]
