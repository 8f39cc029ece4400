"""Navigation history events.

Each dispatched action yields one event. Events can be recorded to JSONL so a
navigation session can be inspected later.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from orgnav.models.action import Action
from orgnav.models.context import CandidateSource


class NavigationEvent(BaseModel):
    """A single dispatched action."""

    session_id: int = Field(ge=0)
    seq: int = Field(ge=1)
    ts: datetime = Field(default_factory=datetime.now)

    action: Action
    label: str
    source: CandidateSource
    depth: int | None = None
    heading: str | None = None
    outcome: str = "ok"
