"""Line-oriented terminal picker rendered with rich.

Each prompt line is interpreted as:

- empty line: confirm the first visible candidate
- ``N``: confirm the N-th visible candidate
- ``:KEY [N]``: fire the action bound to KEY on candidate N (default 1)
- ``?``: list the bound keys
- ``:q`` or end of input: cancel
- anything else: replace the filter text
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Mapping, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from orgnav.logging import get_logger
from orgnav.models.candidate import Candidate
from orgnav.picker.protocol import Picker, PickerSession, SelectCallback

logger = get_logger(__name__)


class ConsolePicker(Picker):
    """Picker reading commands from the terminal inside an asyncio loop."""

    def __init__(
        self,
        console: Console | None = None,
        *,
        max_rows: int = 30,
        key_help: Mapping[str, str] | None = None,
    ) -> None:
        self.console = console or Console()
        self.max_rows = max_rows
        self.key_help = dict(key_help or {})
        self._session: PickerSession | None = None

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
        self._session = PickerSession(
            candidates,
            on_confirm,
            secondary_actions,
            initial_input=initial_input,
            label=label,
            on_cancel=on_cancel,
        )
        return self._session

    async def run(self) -> None:
        """Serve picker sessions until none is left open."""

        while self._session is not None and not self._session.closed:
            session = self._session
            self.render(session)
            line = await self._next_line(session)
            self.handle(session, line)

    async def _next_line(self, session: PickerSession) -> str | None:
        """Read one line on a daemon thread.

        A blocked read never holds up interpreter or event loop shutdown: if the
        awaiting task is cancelled, the thread's late result is dropped.
        """

        loop = asyncio.get_running_loop()
        result: asyncio.Future[str | None] = loop.create_future()

        def deliver(line: str | None, exc: BaseException | None) -> None:
            if result.done():
                return
            if exc is not None:
                result.set_exception(exc)
            else:
                result.set_result(line)

        def reader() -> None:
            line, exc = None, None
            try:
                line = self._read_line(session)
            except Exception as err:
                exc = err
            try:
                loop.call_soon_threadsafe(deliver, line, exc)
            except RuntimeError:
                logger.debug("Dropping input read after the event loop closed")

        threading.Thread(target=reader, name="orgnav-input", daemon=True).start()
        return await result

    def handle(self, session: PickerSession, line: str | None) -> None:
        """Apply one line of user input to ``session``."""

        if line is None or line.strip() == ":q":
            session.cancel()
            return
        text = line.strip()
        if text == "":
            session.confirm(0)
        elif text == "?":
            self._print_keys(session)
        elif text.isdigit():
            session.confirm(int(text) - 1)
        elif text.startswith(":") and len(text) > 1:
            key, _, rest = text[1:].partition(" ")
            index = int(rest) - 1 if rest.strip().isdigit() else 0
            session.press(key, index)
        else:
            session.set_input(line)

    def render(self, session: PickerSession) -> None:
        shown = session.visible()
        table = Table(title=session.label or None, show_header=False, box=None, pad_edge=False)
        table.add_column(justify="right", style="cyan")
        table.add_column()
        for i, candidate in enumerate(shown[: self.max_rows], start=1):
            table.add_row(str(i), Text(candidate.label))
        self.console.print(table)
        if len(shown) > self.max_rows:
            self.console.print(f"[dim]... {len(shown) - self.max_rows} more[/dim]")
        if not shown:
            self.console.print("[dim]No matching headings[/dim]")
        while session.messages:
            self.console.print(Text(session.messages.pop(0), style="red"))

    def _read_line(self, session: PickerSession) -> str | None:
        try:
            return self.console.input(f"[bold]{escape(session.input_text)}>[/bold] ")
        except EOFError:
            return None

    def _print_keys(self, session: PickerSession) -> None:
        for key in session.keys:
            self.console.print(f"  :{key:<4} {self.key_help.get(key, '')}")
