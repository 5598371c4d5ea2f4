"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (SSE for countdown streams)

Design Decisions:
    - Thin routes: pure decisions in core/, IO orchestration in services/
"""
