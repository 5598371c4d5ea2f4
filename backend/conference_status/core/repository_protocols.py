"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Documents cross the boundary raw; core/records.py turns each into a
      ConferenceRecord so one malformed document never poisons a whole scan

Design Decisions:
    - Protocol over ABC: structural subtyping, the test fake needs no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these documents are never async themselves —
      the shell orchestrates the async calls around the pure logic
"""

from typing import Any, Protocol

from conference_status.core.domain_types import ConferenceId

ConferenceDocument = dict[str, Any]


class ConferenceRepository(Protocol):
    """Contract for conference persistence — implemented by shell."""
    async def list_documents(self) -> list[ConferenceDocument]: ...
    async def get_document(
        self, conference_id: ConferenceId,
    ) -> ConferenceDocument | None: ...
    async def update_fields(
        self, conference_id: ConferenceId, **fields: object,
    ) -> None: ...
