"""Picker driven programmatically.

Used by scripted callers and by the test suite: sessions are recorded and the caller
confirms candidates or presses keys on :attr:`ScriptedPicker.current`.
"""

from __future__ import annotations

from typing import Callable, Mapping, Sequence

from orgnav.models.candidate import Candidate
from orgnav.picker.protocol import Picker, PickerSession, SelectCallback


class ScriptedPicker(Picker):
    """Picker that only records sessions."""

    def __init__(self) -> None:
        self.sessions: list[PickerSession] = []

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
        session = PickerSession(
            candidates,
            on_confirm,
            secondary_actions,
            initial_input=initial_input,
            label=label,
            on_cancel=on_cancel,
        )
        self.sessions.append(session)
        return session

    @property
    def current(self) -> PickerSession | None:
        """The most recently opened session, if it is still open."""

        if self.sessions and not self.sessions[-1].closed:
            return self.sessions[-1]
        return None

    def labels(self) -> list[str]:
        """Visible labels of the current session."""

        session = self.current
        return [c.label for c in session.visible()] if session is not None else []

    def choose(self, label: str, key: str | None = None) -> None:
        """Confirm (or press ``key`` on) the first visible candidate labelled ``label``."""

        session = self.current
        if session is None:
            raise RuntimeError("no open picker session")
        for i, candidate in enumerate(session.visible()):
            if candidate.label == label:
                if key is None:
                    session.confirm(i)
                else:
                    session.press(key, i)
                return
        raise LookupError(f"no visible candidate labelled {label!r}")
