"""Candidate filtering by heading level.

All functions here are pure queries against an :class:`OutlineDocument`.
"""

from __future__ import annotations

from typing import Iterable

from orgnav.document.protocol import OutlineDocument, Position
from orgnav.models.candidate import Candidate


def filter_by_depth(
    document: OutlineDocument,
    positions: Iterable[Position],
    min_level: int | None = None,
    max_level: int | None = None,
) -> list[Position]:
    """Keep positions whose level lies in ``[min_level, max_level]``.

    Either bound may be None (unbounded). Document order is preserved.
    """

    out: list[Position] = []
    for pos in positions:
        lvl = document.level(pos)
        if min_level is not None and lvl < min_level:
            continue
        if max_level is not None and lvl > max_level:
            continue
        out.append(pos)
    return out


def level_window(
    document: OutlineDocument,
    anchor: Position | None,
    depth: int | None,
) -> tuple[int, int | None]:
    """Level window shown by a descendants search.

    Rooted at a level-``n`` heading the window starts at ``n + 1`` and spans
    ``depth`` levels; the whole document is treated as a level-0 root.

    Returns:
        ``(min_level, max_level)``; ``max_level`` is None when depth is unbounded.
    """

    base = document.level(anchor) if anchor is not None else 0
    if depth is None:
        return base + 1, None
    return base + 1, base + depth


def build_candidates(
    document: OutlineDocument,
    positions: Iterable[Position],
    marker: str = "*",
) -> list[Candidate]:
    """Render positions as picker candidates labelled ``"** Heading text"``."""

    candidates: list[Candidate] = []
    for pos in positions:
        lvl = document.level(pos)
        candidates.append(Candidate(label=f"{marker * lvl} {document.heading_text(pos)}", position=pos, level=lvl))
    return candidates
