from __future__ import annotations

from dataclasses import dataclass

from orgnav.document.protocol import Position


@dataclass(frozen=True)
class Candidate:
    """A selectable picker entry.

    Labels may collide (two headings with the same text); positions never do.
    """

    label: str
    position: Position
    level: int
