"""
Repositories package for the QuestionBank API.

Contains the persistence gateway interface and its implementations.
"""

from .persistence_gateway import PersistenceGateway
from .memory_gateway import MemoryPersistenceGateway

__all__ = ["PersistenceGateway", "MemoryPersistenceGateway"]
