"""Protocol definitions for outline documents.

Navigation only needs heading-level queries and a handful of editing primitives.
Anything that can answer them (an in-memory org tree, an editor buffer bridge, ...)
can be plugged into :class:`orgnav.session.NavigationService`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import TypeAlias

# Positions are opaque to the navigation core. They must be hashable and
# comparable in document order.
Position: TypeAlias = Hashable


class OutlineDocument(ABC):
    """Protocol for outline documents made of headings nested by level."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the document (file name, buffer name, ...)."""

    @abstractmethod
    def is_valid(self, pos: Position) -> bool:
        """Whether ``pos`` still designates a heading of this document."""

    @abstractmethod
    def level(self, pos: Position) -> int:
        """Heading level, 1 for top-level headings."""

    @abstractmethod
    def heading_text(self, pos: Position) -> str:
        """Heading display text without markup decoration."""

    @abstractmethod
    def parent(self, pos: Position) -> Position | None:
        """Parent heading, or None for a top-level heading."""

    @abstractmethod
    def descendants(self, root: Position | None = None) -> list[Position]:
        """Headings below ``root`` in document order; every heading when ``root`` is None."""

    @abstractmethod
    def rename(self, pos: Position, text: str) -> None:
        """Replace the heading text in place. ``pos`` stays valid."""

    @abstractmethod
    def refile(self, source: Position, dest: Position, keep: bool = False) -> Position:
        """Move (or copy when ``keep``) the subtree at ``source`` under ``dest``.

        Returns:
            Position of the refiled heading at its new location.
        """

    @abstractmethod
    def clock_in(self, pos: Position) -> None:
        """Start the clock on a heading."""

    @abstractmethod
    def create_child(self, parent: Position | None, text: str) -> Position:
        """Append a new child heading; a None parent creates a top-level heading."""

    def ancestors(self, pos: Position) -> list[Position]:
        """Ancestor chain nearest-first, starting with ``pos`` itself."""

        chain = [pos]
        current = self.parent(pos)
        while current is not None:
            chain.append(current)
            current = self.parent(current)
        return chain

    def outline_path(self, pos: Position, separator: str = "/") -> str:
        """Root-to-heading path of heading texts."""

        return separator.join(self.heading_text(p) for p in reversed(self.ancestors(pos)))
