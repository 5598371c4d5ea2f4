"""Services Layer — background reconciliation, countdown timers, organizer actions.

Invariants:
    - Services orchestrate IO around pure core/ functions; no decision logic lives here
    - Time always comes from an injected Clock

Design Decisions:
    - One file per concern for locality
"""
