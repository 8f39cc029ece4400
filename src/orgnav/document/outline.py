"""In-memory org outline with mark-based positions."""

from __future__ import annotations

import functools
import itertools
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable

from orgnav.document.protocol import OutlineDocument, Position
from orgnav.errors import DocumentStateError
from orgnav.logging import get_logger
from orgnav.models.heading import Heading

logger = get_logger(__name__)

_OPEN_CLOCK_RE = re.compile(r"^(\s*)CLOCK:\s*\[([^\]]+)\]\s*$")
_TIMESTAMP_FMT = "%Y-%m-%d %a %H:%M"


@functools.total_ordering
@dataclass(frozen=True)
class HeadingMarker:
    """Position of a heading inside an :class:`OrgOutline`.

    A marker names a heading node rather than an offset, so it keeps pointing at
    the same heading when headings are renamed, moved or inserted around it.
    Markers compare in document order.
    """

    outline_id: str
    node_id: int
    outline: "OrgOutline" = field(compare=False, repr=False)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HeadingMarker):
            return NotImplemented
        if other.outline_id != self.outline_id:
            raise DocumentStateError("cannot compare positions from different outlines")
        return self.outline.index(self) < self.outline.index(other)


@dataclass
class _Entry:
    node_id: int
    heading: Heading


class OrgOutline(OutlineDocument):
    """Outline document held as a flat, document-ordered list of headings."""

    def __init__(
        self,
        name: str = "*scratch*",
        headings: Iterable[Heading] = (),
        *,
        preamble: Iterable[str] = (),
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._name = name
        self._outline_id = uuid.uuid4().hex[:8]
        self._ids = itertools.count(1)
        self._entries: list[_Entry] = [_Entry(next(self._ids), h) for h in headings]
        self._index: dict[int, int] = {}
        self._reindex()

        self.preamble: list[str] = list(preamble)
        self.clocked_in: HeadingMarker | None = None
        self.modified = False
        self._now = now or datetime.now

    # -- queries ---------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._entries)

    def positions(self) -> list[HeadingMarker]:
        """Every heading in document order."""

        return [self._marker(e) for e in self._entries]

    def headings(self) -> list[Heading]:
        return [e.heading for e in self._entries]

    def heading(self, pos: Position) -> Heading:
        """The heading record at ``pos``."""

        return self._entries[self.index(pos)].heading

    def index(self, pos: Position) -> int:
        """Document-order index of ``pos``."""

        if not isinstance(pos, HeadingMarker) or pos.outline_id != self._outline_id:
            raise DocumentStateError(f"{pos!r} is not a position of {self._name}")
        try:
            return self._index[pos.node_id]
        except KeyError:
            raise DocumentStateError(f"heading {pos.node_id} no longer exists in {self._name}") from None

    def is_valid(self, pos: Position) -> bool:
        return (
            isinstance(pos, HeadingMarker)
            and pos.outline_id == self._outline_id
            and pos.node_id in self._index
        )

    def level(self, pos: Position) -> int:
        return self.heading(pos).level

    def heading_text(self, pos: Position) -> str:
        return self.heading(pos).text

    def parent(self, pos: Position) -> HeadingMarker | None:
        i = self.index(pos)
        lvl = self._entries[i].heading.level
        for j in range(i - 1, -1, -1):
            if self._entries[j].heading.level < lvl:
                return self._marker(self._entries[j])
        return None

    def children(self, pos: Position | None) -> list[HeadingMarker]:
        """Direct children of ``pos`` (top-level headings when None)."""

        if pos is None:
            top = min((e.heading.level for e in self._entries), default=1)
            return [self._marker(e) for e in self._entries if e.heading.level == top]
        out: list[HeadingMarker] = []
        for p in self.descendants(pos):
            if self.parent(p) == pos:
                out.append(p)
        return out

    def descendants(self, root: Position | None = None) -> list[HeadingMarker]:
        if root is None:
            return self.positions()
        i = self.index(root)
        end = self._subtree_end(i)
        return [self._marker(e) for e in self._entries[i + 1 : end]]

    def find(self, text: str) -> HeadingMarker | None:
        """First heading whose text equals ``text``, else the first containing it (case-insensitive)."""

        for e in self._entries:
            if e.heading.text == text:
                return self._marker(e)
        needle = text.casefold()
        for e in self._entries:
            if needle in e.heading.text.casefold():
                return self._marker(e)
        return None

    # -- edits -----------------------------------------------------------

    def rename(self, pos: Position, text: str) -> None:
        heading = self.heading(pos)
        logger.debug("Renaming %r to %r", heading.text, text)
        heading.text = text
        self.modified = True

    def refile(self, source: Position, dest: Position, keep: bool = False) -> HeadingMarker:
        src = self.index(source)
        dst = self.index(dest)
        end = self._subtree_end(src)
        if src <= dst < end:
            raise DocumentStateError("cannot refile a heading under itself or one of its descendants")

        delta = self._entries[dst].heading.level + 1 - self._entries[src].heading.level
        if keep:
            moved = [
                _Entry(next(self._ids), e.heading.model_copy(deep=True)) for e in self._entries[src:end]
            ]
        else:
            moved = self._entries[src:end]
            del self._entries[src:end]
            self._reindex()
        for e in moved:
            e.heading.level += delta

        insert_at = self._subtree_end(self.index(dest))
        self._entries[insert_at:insert_at] = moved
        self._reindex()
        self.modified = True
        logger.info(
            "Refiled %r under %r (keep=%s, %d headings)",
            moved[0].heading.text,
            self._entries[self.index(dest)].heading.text,
            keep,
            len(moved),
        )
        return self._marker(moved[0])

    def clock_in(self, pos: Position) -> None:
        target = self.heading(pos)
        if self.clocked_in is not None and self.is_valid(self.clocked_in):
            self.clock_out()

        stamp = self._now().strftime(_TIMESTAMP_FMT)
        body = target.body
        at = _logbook_insert_index(body)
        if at < len(body) and body[at].strip() == ":LOGBOOK:":
            body.insert(at + 1, f"CLOCK: [{stamp}]")
        else:
            body[at:at] = [":LOGBOOK:", f"CLOCK: [{stamp}]", ":END:"]
        self.clocked_in = self._marker(self._entries[self.index(pos)])
        self.modified = True
        logger.info("Clocked in on %r at %s", target.text, stamp)

    def clock_out(self) -> HeadingMarker | None:
        """Close the running clock, if any. Returns the heading that was clocked."""

        marker = self.clocked_in
        if marker is None:
            return None
        self.clocked_in = None
        body = self.heading(marker).body
        end = self._now()
        for i, line in enumerate(body):
            m = _OPEN_CLOCK_RE.match(line)
            if not m:
                continue
            start = datetime.strptime(m.group(2), _TIMESTAMP_FMT)
            minutes = max(int((end - start).total_seconds() // 60), 0)
            body[i] = (
                f"{m.group(1)}CLOCK: [{m.group(2)}]--[{end.strftime(_TIMESTAMP_FMT)}] "
                f"=> {minutes // 60:2d}:{minutes % 60:02d}"
            )
            break
        self.modified = True
        return marker

    def create_child(self, parent: Position | None, text: str) -> HeadingMarker:
        if parent is None:
            level = 1
            insert_at = len(self._entries)
        else:
            i = self.index(parent)
            level = self._entries[i].heading.level + 1
            insert_at = self._subtree_end(i)
        entry = _Entry(next(self._ids), Heading(level=level, text=text))
        self._entries.insert(insert_at, entry)
        self._reindex()
        self.modified = True
        return self._marker(entry)

    # -- internals -------------------------------------------------------

    def _marker(self, entry: _Entry) -> HeadingMarker:
        return HeadingMarker(outline_id=self._outline_id, node_id=entry.node_id, outline=self)

    def _reindex(self) -> None:
        self._index = {e.node_id: i for i, e in enumerate(self._entries)}

    def _subtree_end(self, i: int) -> int:
        lvl = self._entries[i].heading.level
        j = i + 1
        while j < len(self._entries) and self._entries[j].heading.level > lvl:
            j += 1
        return j


def _logbook_insert_index(body: list[str]) -> int:
    """Index after planning lines and the property drawer, where a LOGBOOK belongs."""

    i = 0
    if i < len(body) and body[i].strip().startswith(("SCHEDULED:", "DEADLINE:", "CLOSED:")):
        i += 1
    if i < len(body) and body[i].strip() == ":PROPERTIES:":
        while i < len(body) and body[i].strip() != ":END:":
            i += 1
        i = min(i + 1, len(body))
    return i
