"""JSONL history of navigation actions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from orgnav.events import NavigationEvent
from orgnav.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HistoryRecorder:
    """Append-only recorder; numbering continues across reopened files."""

    path: Path
    _seq: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        previous = load_history(self.path)
        if previous:
            self._seq = previous[-1].seq

    def record(self, **fields: Any) -> NavigationEvent:
        """Build the next event from ``fields`` and append it."""

        self._seq += 1
        event = NavigationEvent(seq=self._seq, **fields)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event.model_dump(mode="json"), ensure_ascii=False) + "\n")
        return event


def load_history(path: Path) -> list[NavigationEvent]:
    """Load recorded events; unreadable lines are skipped."""

    events: list[NavigationEvent] = []
    if not path.exists():
        return events
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            events.append(NavigationEvent.model_validate_json(line))
        except ValueError:
            logger.warning("Skipping malformed history line %d in %s", lineno, path)
    return events
