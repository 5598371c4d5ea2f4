"""Infrastructure Layer — database access, repositories and logging.

Invariants:
    - Infrastructure depends on core/ types and errors, never on services/ or api/
    - Store failures surface as ConferenceStatusError subclasses

Design Decisions:
    - Repositories implement core/repository_protocols.py structurally (no inheritance)
"""
