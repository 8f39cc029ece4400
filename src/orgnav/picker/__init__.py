"""Candidate pickers."""

from __future__ import annotations

from orgnav.picker.console import ConsolePicker
from orgnav.picker.protocol import Picker, PickerSession, matches
from orgnav.picker.scripted import ScriptedPicker

__all__ = ["ConsolePicker", "Picker", "PickerSession", "ScriptedPicker", "matches"]
