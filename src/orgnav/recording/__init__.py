"""Recording utilities for navigation events."""

from __future__ import annotations

from orgnav.recording.file_recorder import HistoryRecorder, load_history

__all__ = ["HistoryRecorder", "load_history"]
