"""Shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from orgnav.config import Settings
from orgnav.document.orgfile import parse_org
from orgnav.document.outline import OrgOutline
from orgnav.picker.scripted import ScriptedPicker
from orgnav.prompts import ScriptedTextPrompt
from orgnav.session import NavigationService

SAMPLE = """#+TITLE: Sample
* A
Body of A.
** A.1
*** A.1.a
** A.2
* B :work:
** B.1
"""


class FakeClock:
    """Clock advancing by a fixed step on every call."""

    def __init__(self, start: datetime, step: timedelta) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def outline() -> OrgOutline:
    return parse_org(SAMPLE, name="sample.org", now=FakeClock(datetime(2026, 10, 17, 9, 0), timedelta(minutes=75)))


@pytest.fixture
def picker() -> ScriptedPicker:
    return ScriptedPicker()


@pytest.fixture
def prompt() -> ScriptedTextPrompt:
    return ScriptedTextPrompt()


@pytest.fixture
def service(outline: OrgOutline, picker: ScriptedPicker, prompt: ScriptedTextPrompt) -> NavigationService:
    return NavigationService(outline, picker, settings=Settings(), prompt=prompt)
