"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; `now` is always an argument

Design Decisions:
    - Functional core separated from imperative shell: the resolver, planner, countdown
      and catalog are plain functions the job and routes call around their IO
"""
