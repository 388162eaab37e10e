"""
HTTP surface of the question aggregation engine.

Wires the persistence gateway, extractor and analysis orchestrator into a
FastAPI application.
"""
