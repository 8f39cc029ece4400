"""Picker protocol.

A picker shows candidates, narrows them as the user types, and fires callbacks when
a candidate is confirmed or a bound key is pressed. Pickers know nothing about
outlines or actions; they deal in labels, values and keys.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Mapping, Sequence

from orgnav.document.protocol import Position
from orgnav.logging import get_logger
from orgnav.models.candidate import Candidate

logger = get_logger(__name__)

SelectCallback = Callable[[Position | None], None]


def matches(label: str, pattern: str) -> bool:
    """Multi-term match: every whitespace-separated term must occur in ``label``.

    Matching is case-insensitive. A term prefixed with ``!`` must not occur.
    """

    hay = label.casefold()
    for term in pattern.casefold().split():
        if term.startswith("!") and len(term) > 1:
            if term[1:] in hay:
                return False
        elif term not in hay:
            return False
    return True


class PickerSession:
    """One open picker over a fixed candidate list."""

    def __init__(
        self,
        candidates: Sequence[Candidate],
        on_confirm: SelectCallback,
        secondary_actions: Mapping[str, SelectCallback] | None = None,
        *,
        initial_input: str = "",
        label: str = "",
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self.candidates = list(candidates)
        self.label = label
        self.input_text = initial_input
        self.messages: list[str] = []
        self.closed = False
        self._on_confirm = on_confirm
        self._secondary = dict(secondary_actions or {})
        self._on_cancel = on_cancel

    @property
    def keys(self) -> list[str]:
        return list(self._secondary)

    def visible(self) -> list[Candidate]:
        """Candidates matching the current input text."""

        if not self.input_text.strip():
            return list(self.candidates)
        return [c for c in self.candidates if matches(c.label, self.input_text)]

    def set_input(self, text: str) -> None:
        self.input_text = text

    def selected(self, index: int = 0) -> Candidate | None:
        shown = self.visible()
        if 0 <= index < len(shown):
            return shown[index]
        return None

    def confirm(self, index: int = 0) -> None:
        """Fire the default action on the ``index``-th visible candidate."""

        if self.closed:
            logger.debug("Ignoring confirm on closed picker %r", self.label)
            return
        self._on_confirm(self._value(index))

    def press(self, key: str, index: int = 0) -> None:
        """Fire the action bound to ``key`` on the ``index``-th visible candidate."""

        if self.closed:
            logger.debug("Ignoring key %r on closed picker %r", key, self.label)
            return
        callback = self._secondary.get(key)
        if callback is None:
            self.report(f"{key} is undefined")
            return
        callback(self._value(index))

    def cancel(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_cancel is not None:
            self._on_cancel()

    def close(self) -> None:
        self.closed = True

    def report(self, message: str) -> None:
        """Show a message to the user without closing the session."""

        self.messages.append(message)
        logger.warning("%s", message)

    def _value(self, index: int) -> Position | None:
        candidate = self.selected(index)
        return candidate.position if candidate is not None else None


class Picker(ABC):
    """Protocol for candidate pickers."""

    @abstractmethod
    def open(
        self,
        candidates: Sequence[Candidate],
        on_confirm: SelectCallback,
        secondary_actions: Mapping[str, SelectCallback] | None = None,
        *,
        initial_input: str = "",
        label: str = "",
        on_cancel: Callable[[], None] | None = None,
    ) -> PickerSession:
        """Open a new picker session and return its handle."""
