"""Search context state."""

from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from orgnav.document.protocol import OutlineDocument, Position
from orgnav.models.action import Action


class CandidateSource(str, Enum):
    """Where raw candidates come from."""

    DESCENDANTS = "descendants"
    ANCESTORS = "ancestors"


@dataclass(frozen=True)
class SearchContext:
    """State of one picker session.

    A context is never changed in place. Refinement actions derive a new one with
    :meth:`revise` and open a new picker session for it.
    """

    document: OutlineDocument
    source: CandidateSource = CandidateSource.DESCENDANTS
    # None searches the whole document (descendants) or the point (ancestors)
    anchor: Position | None = None
    # None is unbounded; ancestor searches always use None
    depth: int | None = 1
    default_action: Action = Action.GOTO
    label: str = "Headings"
    input_text: str = ""
    # Point when the search was opened; source heading for refile
    origin: Position | None = None
    session_id: int = 0
    result: asyncio.Future[Any] | None = field(default=None, compare=False, repr=False)

    def revise(self, **changes: Any) -> SearchContext:
        """Return a new context with ``changes`` applied."""

        return dataclasses.replace(self, **changes)

    def snapshot(self) -> dict[str, str | int | None]:
        return {
            "session_id": self.session_id,
            "label": self.label,
            "source": self.source.value,
            "depth": self.depth,
            "default_action": self.default_action.value,
            "input_text": self.input_text,
        }
