"""Tests for search entry points and the active search context."""

from __future__ import annotations

import pytest

from orgnav.config import Settings
from orgnav.document.outline import OrgOutline
from orgnav.errors import ConfigurationError, DocumentStateError
from orgnav.models.action import Action
from orgnav.models.context import CandidateSource
from orgnav.picker.scripted import ScriptedPicker
from orgnav.session import NavigationService


def test_subtree_search_depth_window(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should offer A's children at depth 1 and its grandchildren at depth 2."""

    a = outline.find("A")
    ctx = service.search_subtree(a, depth=1)
    assert picker.labels() == ["** A.1", "** A.2"]
    assert service.active == ctx
    assert ctx.source is CandidateSource.DESCENDANTS

    service.search_subtree(a, depth=2)
    assert picker.labels() == ["** A.1", "*** A.1.a", "** A.2"]


def test_document_search_and_subtree_at_point(
    service: NavigationService, outline: OrgOutline, picker: ScriptedPicker
) -> None:
    """It should search the whole document, or below the point when one is set."""

    service.search_document()
    assert picker.labels() == ["* A", "* B"]

    service.point = outline.find("B")
    service.search_subtree()
    assert picker.labels() == ["** B.1"]


def test_ancestor_search_ignores_depth(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should list the whole ancestor chain, nearest first."""

    ctx = service.search_ancestors(outline.find("A.1.a"))
    assert picker.labels() == ["*** A.1.a", "** A.1", "* A"]
    assert ctx.depth is None
    assert ctx.source is CandidateSource.ANCESTORS


def test_ancestor_search_at_point(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should anchor at the point, and fail without one."""

    with pytest.raises(DocumentStateError):
        service.search_ancestors_at_point()
    assert service.active is None

    service.point = outline.find("B.1")
    ctx = service.search_ancestors_at_point()
    assert ctx.anchor == service.point
    assert picker.labels() == ["** B.1", "* B"]


def test_unknown_option_is_rejected(service: NavigationService, picker: ScriptedPicker) -> None:
    """It should reject misspelled or invalid options before opening anything."""

    with pytest.raises(ConfigurationError, match="dpeth"):
        service.search({"dpeth": 2})
    with pytest.raises(ConfigurationError):
        service.search_document(depth=0)
    with pytest.raises(ConfigurationError):
        service.search(default_action="teleport")
    assert picker.sessions == []
    assert service.active is None


def test_options_accept_strings(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should coerce option values given as plain strings."""

    ctx = service.search(source="ancestors", anchor=outline.find("A.2"), default_action="clock_in")
    assert ctx.source is CandidateSource.ANCESTORS
    assert ctx.default_action is Action.CLOCK_IN
    assert picker.labels() == ["** A.2", "* A"]


def test_new_search_supersedes_previous(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should close the previous picker and ignore its keys afterwards."""

    first = service.search_document()
    old_session = picker.current
    second = service.search_subtree(outline.find("A"))

    assert old_session is not None and old_session.closed
    assert service.active == second
    assert second.session_id > first.session_id

    old_session.press("+")
    assert service.active == second
    assert len(picker.sessions) == 2


def test_cancel_leaves_no_active_context(service: NavigationService, picker: ScriptedPicker) -> None:
    """It should forget the search when the picker is aborted."""

    service.search_document()
    session = picker.current
    session.cancel()

    assert service.active is None
    session.press("+")
    assert len(picker.sessions) == 1
    assert service.active is None


def test_failed_search_keeps_previous_active(service: NavigationService, picker: ScriptedPicker) -> None:
    """It should leave the previous search untouched when a new one cannot open."""

    ctx = service.search_document()
    with pytest.raises(DocumentStateError):
        service.search_ancestors_at_point()
    assert service.active == ctx
    assert picker.current is picker.sessions[0]


def test_refile_and_clock_use_configured_depth(outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should search refile targets over the whole document with the refile depth."""

    service = NavigationService(outline, picker, settings=Settings(refile_depth=2))
    service.point = outline.find("A.2")

    ctx = service.refile_heading()
    assert ctx.depth == 2
    assert ctx.default_action is Action.REFILE
    assert ctx.origin == outline.find("A.2")
    assert picker.labels() == ["* A", "** A.1", "** A.2", "* B", "** B.1"]

    ctx = service.clock_in_heading(depth=1)
    assert ctx.default_action is Action.CLOCK_IN
    assert picker.labels() == ["* A", "* B"]


def test_local_refile_targets_start_at_parent(outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should offer the point's siblings when refiling within the subtree."""

    service = NavigationService(outline, picker, settings=Settings(refile_targets_whole_document=False))
    service.point = outline.find("A.1")

    service.refile_heading()
    assert picker.labels() == ["** A.1", "*** A.1.a", "** A.2"]
    picker.choose("** A.2")

    a2 = outline.find("A.2")
    assert service.refile_mark == a2
    assert [outline.heading_text(p) for p in outline.children(a2)] == ["A.1"]
    assert service.active is None

    service.point = outline.find("B")
    service.refile_heading(depth=1)
    assert picker.labels() == ["* A", "* B"]

    service.clock_in_heading()
    assert picker.labels() == ["** B.1"]


def test_refile_without_point_is_rejected(service: NavigationService) -> None:
    """It should refuse to look for a destination when nothing is at point."""

    with pytest.raises(DocumentStateError):
        service.refile_heading()
