"""State definition for the LangGraph turn flow."""

from __future__ import annotations

from typing import Optional, TypedDict


class TurnState(TypedDict, total=False):
    """State shared across the nodes of one turn."""

    query: str
    trace_id: str
    user_has_provided_location: bool
    decision: str
    prompt: Optional[str]
    reply: Optional[str]
    failed: bool
    error_code: Optional[str]
