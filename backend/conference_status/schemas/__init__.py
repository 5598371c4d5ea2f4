"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Timestamps normalized through core/timestamps.py

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
