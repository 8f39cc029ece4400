"""Tests for action dispatch and the refinement loop."""

from __future__ import annotations

from pathlib import Path

import pytest

from orgnav.document.orgfile import render_org
from orgnav.document.outline import HeadingMarker, OrgOutline
from orgnav.errors import DocumentStateError, NoLastRefileError
from orgnav.models.action import Action
from orgnav.models.heading import Heading
from orgnav.picker.scripted import ScriptedPicker
from orgnav.prompts import ScriptedTextPrompt
from orgnav.recording.file_recorder import HistoryRecorder, load_history
from orgnav.session import NavigationService


def test_goto_moves_point_and_ends_search(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should move the point and close the picker."""

    visited = []
    service.on_goto = visited.append
    service.search_document()
    picker.choose("* B")

    assert service.point == outline.find("B")
    assert visited == [outline.find("B")]
    assert service.active is None
    assert picker.current is None


def test_explore_reroots_at_candidate(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should search the children of the chosen heading with depth reset to 1."""

    service.search_document(depth=3, input_text="A.1")
    picker.choose("** A.1", key=">")

    assert picker.labels() == ["*** A.1.a"]
    assert service.active.anchor == outline.find("A.1")
    assert service.active.depth == 1
    assert service.active.default_action is Action.GOTO
    assert picker.current.input_text == ""


def test_explore_is_idempotent(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should give the same candidates when exploring the same heading twice."""

    service.search_document()
    picker.choose("* A", key=">")
    first = picker.labels()

    service.search_document()
    picker.choose("* A", key=">")
    assert picker.labels() == first == ["** A.1", "** A.2"]


def test_explore_parent(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should climb one level, and fall back to the whole document at the root."""

    service.search_subtree(outline.find("A.1"))
    assert picker.labels() == ["*** A.1.a"]

    picker.current.press("<")
    assert service.active.anchor == outline.find("A")
    assert picker.labels() == ["** A.1", "** A.2"]

    picker.current.press("<")
    assert service.active.anchor is None
    assert picker.labels() == ["* A", "* B"]

    picker.current.press("<")
    assert picker.labels() == ["* A", "* B"]


def test_explore_ancestors(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should switch to the ancestor chain of the chosen heading."""

    service.search_subtree(outline.find("A"), depth=2)
    picker.choose("*** A.1.a", key="^")

    assert picker.labels() == ["*** A.1.a", "** A.1", "* A"]
    assert service.active.depth is None


def test_depth_changes_round_trip(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should widen and narrow the window and keep the typed input."""

    service.search_document(depth=2)
    original = picker.labels()
    picker.current.set_input("A")

    picker.current.press("+")
    assert service.active.depth == 3
    assert picker.current.input_text == "A"
    assert "*** A.1.a" in picker.labels()

    picker.current.press("-")
    assert service.active.depth == 2
    picker.current.set_input("")
    assert picker.labels() == original


def test_decrease_depth_clamps_at_one(service: NavigationService, picker: ScriptedPicker) -> None:
    """It should never go below depth 1."""

    service.search_document(depth=1)
    picker.current.press("-")
    picker.current.press("-")
    assert service.active.depth == 1
    assert picker.labels() == ["* A", "* B"]


def test_depth_keys_keep_ancestor_chain(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should leave ancestor searches unbounded."""

    service.search_ancestors(outline.find("A.1.a"))
    picker.current.press("+")
    assert service.active.depth is None
    assert picker.labels() == ["*** A.1.a", "** A.1", "* A"]


def test_rename_reopens_same_search(
    service: NavigationService, outline: OrgOutline, picker: ScriptedPicker, prompt: ScriptedTextPrompt
) -> None:
    """It should rename the heading and re-run the search with the same anchor and depth."""

    prompt.answers = ["A.2 (done)"]
    ctx = service.search_subtree(outline.find("A"), depth=2)
    picker.choose("** A.2", key="r")

    assert outline.heading_text(outline.find("A.2 (done)")) == "A.2 (done)"
    assert picker.labels() == ["** A.1", "*** A.1.a", "** A.2 (done)"]
    assert service.active.anchor == ctx.anchor
    assert service.active.depth == 2
    assert prompt.questions == ["Rename 'A.2' to"]


def test_rename_cancelled_changes_nothing(
    service: NavigationService, outline: OrgOutline, picker: ScriptedPicker
) -> None:
    """It should re-run the search untouched when the prompt is abandoned."""

    before = render_org(outline)
    service.search_document()
    picker.choose("* B", key="r")

    assert render_org(outline) == before
    assert picker.labels() == ["* A", "* B"]
    assert len(picker.sessions) == 2


def test_create_child(
    service: NavigationService, outline: OrgOutline, picker: ScriptedPicker, prompt: ScriptedTextPrompt
) -> None:
    """It should add a child under the chosen heading and move the point there."""

    prompt.answers = ["B.2"]
    service.search_document()
    picker.choose("* B", key="n")

    child = outline.find("B.2")
    assert child is not None
    assert outline.parent(child) == outline.find("B")
    assert service.point == child
    assert service.active is None


def test_clock_in_action(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should clock in on the chosen heading and end the search."""

    service.clock_in_heading()
    picker.choose("** B.1")

    assert outline.clocked_in == outline.find("B.1")
    assert service.active is None


def test_refile_then_refile_again(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should move the heading at point and reuse the destination without searching."""

    service.point = outline.find("A.2")
    service.refile_heading()
    picker.choose("* B")

    b = outline.find("B")
    assert service.refile_mark == b
    assert [outline.heading_text(p) for p in outline.children(b)] == ["B.1", "A.2"]
    assert [outline.heading_text(p) for p in outline.children(outline.find("A"))] == ["A.1"]
    assert service.active is None

    sessions = len(picker.sessions)
    service.point = outline.find("A.1")
    assert service.refile_again() == "B"
    assert [outline.heading_text(p) for p in outline.children(b)] == ["B.1", "A.2", "A.1"]
    assert outline.descendants(outline.find("A")) == []
    assert len(picker.sessions) == sessions


def test_refile_keep_leaves_original(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should copy the heading at point and keep the original."""

    a2 = outline.find("A.2")
    service.point = a2
    service.refile_heading(keep=True)
    picker.choose("** B.1")

    assert service.point == a2
    assert outline.parent(a2) == outline.find("A")
    assert [outline.heading_text(p) for p in outline.descendants(outline.find("B.1"))] == ["A.2"]
    assert service.refile_mark == outline.find("B.1")


def test_refile_again_without_previous_refile(service: NavigationService, outline: OrgOutline) -> None:
    """It should raise and leave the document alone."""

    service.point = outline.find("A.2")
    before = render_org(outline)
    with pytest.raises(NoLastRefileError):
        service.refile_again()
    assert render_org(outline) == before
    assert not outline.modified


def test_refile_again_with_stale_destination(service: NavigationService, outline: OrgOutline) -> None:
    """It should refuse a destination that is gone or belongs to another outline."""

    service.point = outline.find("A.2")
    before = render_org(outline)

    service.refile_mark = OrgOutline("other.org", [Heading(level=1, text="B")]).find("B")
    with pytest.raises(DocumentStateError):
        service.refile_again()

    service.refile_mark = HeadingMarker(outline_id=outline.find("B").outline_id, node_id=10_000, outline=outline)
    with pytest.raises(DocumentStateError):
        service.refile_again()

    assert render_org(outline) == before
    assert not outline.modified
    assert service.point == outline.find("A.2")


def test_document_error_keeps_session_open(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should report a failed refile and leave the picker open for another try."""

    service.point = outline.find("A")
    ctx = service.refile_heading()
    session = picker.current
    picker.choose("** A.1")

    assert picker.current is session
    assert service.active == ctx
    assert session.messages and "under itself" in session.messages[-1]
    assert service.refile_mark is None

    picker.choose("* B")
    assert outline.parent(outline.find("A")) == outline.find("B")


def test_action_without_selection(service: NavigationService, outline: OrgOutline, picker: ScriptedPicker) -> None:
    """It should report when there is nothing to act on, but still allow depth changes."""

    service.search_subtree(outline.find("B.1"))
    assert picker.labels() == []
    picker.current.confirm()
    assert picker.current.messages == ["No heading selected"]

    picker.current.press("<")
    assert picker.labels() == ["** B.1"]


def test_stale_session_id_is_dropped(service: NavigationService) -> None:
    """It should ignore actions addressed to a session that is no longer active."""

    ctx = service.search_document()
    assert not service.dispatcher.dispatch(Action.INCREASE_DEPTH, None, session_id=ctx.session_id + 1)
    assert service.active == ctx


def test_history_is_recorded(outline: OrgOutline, picker: ScriptedPicker, tmp_path: Path) -> None:
    """It should record every dispatched action to JSONL."""

    path = tmp_path / "history.jsonl"
    service = NavigationService(outline, picker, prompt=ScriptedTextPrompt(), recorder=HistoryRecorder(path))
    service.search_document()
    picker.current.press("+")
    picker.choose("** B.1")

    events = load_history(path)
    assert [e.action for e in events] == [Action.INCREASE_DEPTH, Action.GOTO]
    assert [e.seq for e in events] == [1, 2]
    assert events[1].heading == "B.1"
    assert events[0].depth == 1

    reopened = HistoryRecorder(path)
    assert reopened.record(
        session_id=9, action=Action.GOTO, label="x", source="descendants"
    ).seq == 3
