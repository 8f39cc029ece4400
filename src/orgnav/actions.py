"""Action dispatch.

Maps a selected candidate plus the active :class:`SearchContext` onto one of the
navigation actions. Refinement actions open a revised search; terminal actions
end the picker session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from orgnav.document.protocol import Position
from orgnav.errors import DocumentStateError
from orgnav.logging import get_logger, session_context
from orgnav.models.action import Action
from orgnav.models.context import CandidateSource, SearchContext
from orgnav.recording.file_recorder import HistoryRecorder

if TYPE_CHECKING:
    from orgnav.session import NavigationService

logger = get_logger(__name__)

Handler = Callable[[SearchContext, Position | None], None]


class ActionDispatcher:
    """Dispatch table from :class:`Action` to handler."""

    def __init__(self, service: NavigationService, *, recorder: HistoryRecorder | None = None) -> None:
        self._service = service
        self._recorder = recorder
        self._handlers: dict[Action, Handler] = {
            Action.GOTO: self._goto,
            Action.EXPLORE: self._explore,
            Action.EXPLORE_PARENT: self._explore_parent,
            Action.EXPLORE_ANCESTORS: self._explore_ancestors,
            Action.INCREASE_DEPTH: self._increase_depth,
            Action.DECREASE_DEPTH: self._decrease_depth,
            Action.RENAME: self._rename,
            Action.CREATE_CHILD: self._create_child,
            Action.CLOCK_IN: self._clock_in,
            Action.REFILE: self._refile,
            Action.REFILE_KEEP: self._refile_keep,
            Action.RETURN_RESULT: self._return_result,
        }

    def callback(self, action: Action, session_id: int) -> Callable[[Position | None], None]:
        """Picker callback firing ``action`` for the session ``session_id``."""

        def _fire(position: Position | None) -> None:
            self.dispatch(action, position, session_id=session_id)

        return _fire

    def dispatch(self, action: Action, position: Position | None, *, session_id: int) -> bool:
        """Run ``action`` on ``position`` within the active search.

        Returns:
            False when the action was dropped or failed; the picker session then stays open.
        """

        service = self._service
        active = service.active
        if active is None or active.session_id != session_id:
            logger.debug("Dropping %s for inactive picker session %s", action.value, session_id)
            return False

        ctx = active.revise(input_text=service.current_input())
        with session_context(session_id=ctx.session_id, label=ctx.label):
            if action.needs_position and position is None:
                service.report("No heading selected")
                return False

            logger.info("Dispatching %s", action.value, extra={"context": ctx.snapshot()})
            try:
                self._handlers[action](ctx, position)
            except DocumentStateError as exc:
                logger.warning("%s failed: %s", action.value, exc)
                service.report(str(exc))
                self._record(ctx, action, position, outcome=f"error: {exc}")
                return False

            if action.is_terminal:
                service.finish(ctx)
            self._record(ctx, action, position)
            return True

    # -- handlers --------------------------------------------------------

    def _goto(self, ctx: SearchContext, position: Position | None) -> None:
        self._service.visit(position)

    def _explore(self, ctx: SearchContext, position: Position | None) -> None:
        self._service.open(
            ctx.revise(source=CandidateSource.DESCENDANTS, anchor=position, depth=1, input_text="")
        )

    def _explore_parent(self, ctx: SearchContext, position: Position | None) -> None:
        # A root heading (or the whole document) has no parent: search the whole document.
        parent = ctx.document.parent(ctx.anchor) if ctx.anchor is not None else None
        self._service.open(
            ctx.revise(source=CandidateSource.DESCENDANTS, anchor=parent, depth=1, input_text="")
        )

    def _explore_ancestors(self, ctx: SearchContext, position: Position | None) -> None:
        self._service.open(
            ctx.revise(source=CandidateSource.ANCESTORS, anchor=position, depth=None, input_text="")
        )

    def _increase_depth(self, ctx: SearchContext, position: Position | None) -> None:
        depth = ctx.depth + 1 if ctx.depth is not None else None
        self._service.open(ctx.revise(depth=depth))

    def _decrease_depth(self, ctx: SearchContext, position: Position | None) -> None:
        depth = max(ctx.depth - 1, 1) if ctx.depth is not None else None
        self._service.open(ctx.revise(depth=depth))

    def _rename(self, ctx: SearchContext, position: Position | None) -> None:
        old = ctx.document.heading_text(position)
        text = self._service.prompt.ask(f"Rename '{old}' to", default=old)
        if text and text != old:
            ctx.document.rename(position, text)
        self._service.open(ctx)

    def _create_child(self, ctx: SearchContext, position: Position | None) -> None:
        parent_text = ctx.document.heading_text(position)
        text = self._service.prompt.ask(f"New heading under '{parent_text}'")
        if not text:
            logger.info("Child creation under %r abandoned", parent_text)
            return
        child = ctx.document.create_child(position, text)
        self._service.visit(child)

    def _clock_in(self, ctx: SearchContext, position: Position | None) -> None:
        ctx.document.clock_in(position)

    def _refile(self, ctx: SearchContext, position: Position | None) -> None:
        self._service.refile_to(position, source=ctx.origin, keep=False)

    def _refile_keep(self, ctx: SearchContext, position: Position | None) -> None:
        self._service.refile_to(position, source=ctx.origin, keep=True)

    def _return_result(self, ctx: SearchContext, position: Position | None) -> None:
        if ctx.result is not None and not ctx.result.done():
            ctx.result.set_result(position)
        self._service.last_result = position

    # -- history ---------------------------------------------------------

    def _record(self, ctx: SearchContext, action: Action, position: Position | None, outcome: str = "ok") -> None:
        if self._recorder is None:
            return
        heading = None
        if position is not None and ctx.document.is_valid(position):
            heading = ctx.document.heading_text(position)
        self._recorder.record(
            session_id=ctx.session_id,
            action=action,
            label=ctx.label,
            source=ctx.source,
            depth=ctx.depth,
            heading=heading,
            outcome=outcome,
        )
