"""Navigation service.

Owns the state shared by a sequence of picker sessions over one outline: the point
(the heading the user is "on"), the single active :class:`SearchContext`, and the
mark left by the last refile.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Callable, Mapping

from orgnav.actions import ActionDispatcher
from orgnav.config import Settings
from orgnav.document.protocol import OutlineDocument, Position
from orgnav.errors import DocumentStateError, NoLastRefileError, SearchCancelledError, SearchTimeoutError
from orgnav.filtering import build_candidates, filter_by_depth, level_window
from orgnav.keymap import DEFAULT_KEYMAP, bind
from orgnav.logging import get_logger, session_context
from orgnav.models.action import Action
from orgnav.models.candidate import Candidate
from orgnav.models.context import CandidateSource, SearchContext
from orgnav.models.options import SearchOptions, validate_options
from orgnav.picker.protocol import Picker, PickerSession
from orgnav.prompts import ConsoleTextPrompt, TextPrompt
from orgnav.recording.file_recorder import HistoryRecorder

logger = get_logger(__name__)

_DEFAULT_TIMEOUT: Any = object()


class NavigationService:
    """Search entry points and the refinement loop around a :class:`Picker`."""

    def __init__(
        self,
        document: OutlineDocument,
        picker: Picker,
        *,
        settings: Settings | None = None,
        prompt: TextPrompt | None = None,
        keymap: Mapping[str, Action] | None = None,
        recorder: HistoryRecorder | None = None,
        on_goto: Callable[[Position], None] | None = None,
    ) -> None:
        self.document = document
        self.picker = picker
        self.settings = settings or Settings()
        self.prompt = prompt or ConsoleTextPrompt()
        self.keymap = dict(DEFAULT_KEYMAP if keymap is None else keymap)
        self.on_goto = on_goto

        self.point: Position | None = None
        self.refile_mark: Position | None = None
        self.last_result: Position | None = None
        self.active: SearchContext | None = None

        self._picker_session: PickerSession | None = None
        self._session_ids = itertools.count(1)
        self.dispatcher = ActionDispatcher(self, recorder=recorder)

    # -- entry points ----------------------------------------------------

    def search(self, options: SearchOptions | Mapping[str, Any] | None = None, **overrides: Any) -> SearchContext:
        """Open a search described by ``options``.

        Raises:
            ConfigurationError: If an option key is unknown or a value is invalid.
        """

        opts = validate_options(options, **overrides)
        return self.open(self._context(opts))

    def search_document(self, depth: int | None = None, **options: Any) -> SearchContext:
        """Search headings of the whole document, ``depth`` levels deep."""

        return self.search(options, anchor=None, depth=self.settings.subtree_depth if depth is None else depth)

    def search_subtree(self, anchor: Position | None = None, depth: int | None = None, **options: Any) -> SearchContext:
        """Search below ``anchor`` (default: the point; the whole document if there is none)."""

        anchor = anchor if anchor is not None else self.point
        return self.search(options, anchor=anchor, depth=self.settings.subtree_depth if depth is None else depth)

    def search_ancestors(self, anchor: Position, **options: Any) -> SearchContext:
        """Search the ancestor chain of ``anchor``, nearest first."""

        return self.search(options, source=CandidateSource.ANCESTORS, anchor=anchor, depth=None)

    def search_ancestors_at_point(self, **options: Any) -> SearchContext:
        """Search the ancestor chain of the point."""

        return self.search(options, source=CandidateSource.ANCESTORS, anchor=None, depth=None)

    def goto_heading(self, **options: Any) -> SearchContext:
        options.setdefault("label", "Go to")
        return self.search_document(default_action=Action.GOTO, **options)

    def refile_heading(self, keep: bool = False, **options: Any) -> SearchContext:
        """Pick a destination for the heading at point."""

        if self.point is None:
            raise DocumentStateError("No heading at point to refile")
        options.setdefault("label", "Refile to" if not keep else "Copy to")
        # Local targets: siblings of the point and their subtrees.
        anchor = None if self.settings.refile_targets_whole_document else self.document.parent(self.point)
        return self._targets(Action.REFILE_KEEP if keep else Action.REFILE, anchor, **options)

    def clock_in_heading(self, **options: Any) -> SearchContext:
        options.setdefault("label", "Clock in")
        anchor = None if self.settings.refile_targets_whole_document else self.point
        return self._targets(Action.CLOCK_IN, anchor, **options)

    def _targets(self, action: Action, anchor: Position | None, **options: Any) -> SearchContext:
        depth = options.pop("depth", None)
        if depth is None:
            depth = self.settings.refile_depth
        return self.search(options, anchor=anchor, depth=depth, default_action=action)

    # -- synchronous bridge ----------------------------------------------

    async def search_sync(
        self,
        source: CandidateSource | str = CandidateSource.DESCENDANTS,
        anchor: Position | None = None,
        depth: int | None = None,
        label: str = "Select heading",
        *,
        input_text: str = "",
        timeout: float | None = _DEFAULT_TIMEOUT,
    ) -> Position:
        """Open a search and wait until a heading is chosen.

        Each call waits on its own future, so concurrent calls do not share a
        result slot. Refinement actions keep the same future.

        Raises:
            SearchCancelledError: If the picker is aborted or superseded.
            SearchTimeoutError: If nothing is chosen within ``timeout`` seconds.
        """

        if timeout is _DEFAULT_TIMEOUT:
            timeout = self.settings.sync_timeout_s
        result: asyncio.Future[Position] = asyncio.get_running_loop().create_future()
        opts = validate_options(
            source=source,
            anchor=anchor,
            depth=depth,
            default_action=Action.RETURN_RESULT,
            label=label,
            input_text=input_text,
        )
        self.open(self._context(opts, result=result))
        try:
            return await asyncio.wait_for(result, timeout)
        except asyncio.TimeoutError:
            if self.active is not None and self.active.result is result:
                self.finish(self.active)
            raise SearchTimeoutError(f"no heading selected within {timeout}s") from None

    # -- refile ----------------------------------------------------------

    def refile_to(self, dest: Position, *, source: Position | None = None, keep: bool = False) -> Position:
        """Refile ``source`` (default: the point) under ``dest`` and remember ``dest``."""

        source = source if source is not None else self.point
        if source is None:
            raise DocumentStateError("No heading at point to refile")
        moved = self.document.refile(source, dest, keep)
        self.refile_mark = dest
        if not keep and source == self.point:
            self.point = moved
        return moved

    def refile_again(self, source: Position | None = None, keep: bool = False) -> str:
        """Refile again under the last refile destination without searching.

        Returns:
            Heading text of the destination.

        Raises:
            NoLastRefileError: If nothing has been refiled yet.
            DocumentStateError: If the destination no longer exists.
        """

        mark = self.refile_mark
        if mark is None:
            raise NoLastRefileError()
        if not self.document.is_valid(mark):
            raise DocumentStateError("The last refile destination no longer exists")
        self.refile_to(mark, source=source, keep=keep)
        text = self.document.heading_text(mark)
        logger.info("Refiled again under %r", text)
        return text

    # -- session lifecycle -----------------------------------------------

    def candidates(self, ctx: SearchContext) -> list[Candidate]:
        """Candidates shown for ``ctx``."""

        doc = ctx.document
        if ctx.source is CandidateSource.ANCESTORS:
            positions = doc.ancestors(ctx.anchor)
        else:
            min_level, max_level = level_window(doc, ctx.anchor, ctx.depth)
            positions = filter_by_depth(doc, doc.descendants(ctx.anchor), min_level, max_level)
        return build_candidates(doc, positions, self.settings.level_marker)

    def open(self, ctx: SearchContext) -> SearchContext:
        """Make ``ctx`` the active search and open a picker session for it.

        The previous session is closed only once the new one is open, so a
        failure here leaves the previous search active.
        """

        if ctx.source is CandidateSource.ANCESTORS:
            anchor = ctx.anchor if ctx.anchor is not None else self.point
            if anchor is None:
                raise DocumentStateError("No heading at point to list ancestors of")
            ctx = ctx.revise(anchor=anchor, depth=None)
        ctx = ctx.revise(session_id=next(self._session_ids))
        candidates = self.candidates(ctx)

        with session_context(session_id=ctx.session_id, label=ctx.label):
            previous, previous_session = self.active, self._picker_session
            session = self.picker.open(
                candidates,
                self.dispatcher.callback(ctx.default_action, ctx.session_id),
                bind(self.keymap, lambda action: self.dispatcher.callback(action, ctx.session_id)),
                initial_input=ctx.input_text,
                label=self._title(ctx),
                on_cancel=lambda: self._cancelled(ctx.session_id),
            )
            self.active = ctx
            self._picker_session = session
            if previous_session is not None and previous_session is not session:
                previous_session.close()
            if previous is not None and previous.result is not None and previous.result is not ctx.result:
                if not previous.result.done():
                    previous.result.set_exception(SearchCancelledError("superseded by another search"))
            logger.debug("Opened picker with %d candidates", len(candidates))
        return ctx

    def finish(self, ctx: SearchContext) -> None:
        """End the search ``ctx`` if it is still the active one."""

        if self.active is None or self.active.session_id != ctx.session_id:
            return
        if self._picker_session is not None:
            self._picker_session.close()
        self.active = None
        self._picker_session = None

    def visit(self, position: Position) -> None:
        """Move the point to ``position``."""

        self.point = position
        logger.info("Point at %r", self.document.heading_text(position))
        if self.on_goto is not None:
            self.on_goto(position)

    def current_input(self) -> str:
        return self._picker_session.input_text if self._picker_session is not None else ""

    def report(self, message: str) -> None:
        if self._picker_session is not None and not self._picker_session.closed:
            self._picker_session.report(message)
        else:
            logger.warning("%s", message)

    def _cancelled(self, session_id: int) -> None:
        ctx = self.active
        if ctx is None or ctx.session_id != session_id:
            return
        self.active = None
        self._picker_session = None
        logger.info("Search %r cancelled", ctx.label)
        if ctx.result is not None and not ctx.result.done():
            ctx.result.set_exception(SearchCancelledError("search cancelled"))

    def _context(self, opts: SearchOptions, result: asyncio.Future[Any] | None = None) -> SearchContext:
        return SearchContext(
            document=self.document,
            source=opts.source,
            anchor=opts.anchor,
            depth=opts.depth if opts.source is CandidateSource.DESCENDANTS else None,
            default_action=opts.default_action,
            label=opts.label,
            input_text=opts.input_text,
            origin=self.point,
            result=result,
        )

    def _title(self, ctx: SearchContext) -> str:
        doc = ctx.document
        if ctx.source is CandidateSource.ANCESTORS:
            return f"{ctx.label}: ancestors of {doc.heading_text(ctx.anchor)}"
        root = doc.heading_text(ctx.anchor) if ctx.anchor is not None else doc.name
        depth = "all" if ctx.depth is None else ctx.depth
        return f"{ctx.label}: {root} (depth {depth})"
