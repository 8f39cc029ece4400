"""CLI entrypoints for orgnav."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from orgnav.config import Settings, load_settings
from orgnav.document.orgfile import load_org, save_org
from orgnav.document.outline import HeadingMarker, OrgOutline
from orgnav.errors import OrgNavError
from orgnav.keymap import DEFAULT_KEYMAP, key_help
from orgnav.logging import configure_logging, get_logger, log_exception
from orgnav.models.context import CandidateSource
from orgnav.picker.console import ConsolePicker
from orgnav.picker.scripted import ScriptedPicker
from orgnav.prompts import ConsoleTextPrompt
from orgnav.recording.file_recorder import HistoryRecorder
from orgnav.session import NavigationService

app = typer.Typer(add_completion=False, help="Fuzzy navigation, refiling and clock-in for org outlines")
logger = get_logger(__name__)
console = Console()

FileArg = typer.Argument(..., exists=True, dir_okay=False, help="Org file")
UnderOpt = typer.Option(None, "--under", "-u", help="Start below the first heading matching this text")
DepthOpt = typer.Option(None, "--depth", "-d", min=1, help="Number of levels to show")


def _setup() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


def _find(outline: OrgOutline, text: str | None, param: str) -> HeadingMarker | None:
    if text is None:
        return None
    pos = outline.find(text)
    if pos is None:
        raise typer.BadParameter(f"no heading matches {text!r}", param_hint=param)
    return pos


def _interactive(outline: OrgOutline, settings: Settings) -> tuple[NavigationService, ConsolePicker]:
    picker = ConsolePicker(console, key_help=key_help(DEFAULT_KEYMAP))
    recorder = HistoryRecorder(settings.history_path) if settings.history_path else None
    service = NavigationService(
        outline,
        picker,
        settings=settings,
        prompt=ConsoleTextPrompt(console),
        recorder=recorder,
    )
    return service, picker


def _finish(outline: OrgOutline, path: Path) -> None:
    if outline.modified:
        try:
            save_org(outline, path)
        except OSError as exc:
            log_exception(logger, "Could not save outline", path=str(path))
            raise typer.Exit(code=1) from exc
        console.print(f"[green]Saved {path}[/green]")


@app.command("list")
def list_headings(
    file: Path = FileArg,
    under: str | None = UnderOpt,
    depth: int | None = DepthOpt,
    ancestors: bool = typer.Option(False, "--ancestors", help="List the ancestor chain of --under instead"),
) -> None:
    """Print the candidates a search would offer, without prompting."""

    settings = _setup()
    outline = load_org(file)
    anchor = _find(outline, under, "--under")
    picker = ScriptedPicker()
    service = NavigationService(outline, picker, settings=settings)
    try:
        if ancestors:
            if anchor is None:
                raise typer.BadParameter("--ancestors needs --under", param_hint="--ancestors")
            service.search_ancestors(anchor)
        else:
            service.search_subtree(anchor, depth)
    except OrgNavError as exc:
        raise typer.BadParameter(str(exc)) from exc
    for label in picker.labels():
        typer.echo(label)


@app.command()
def browse(file: Path = FileArg, under: str | None = UnderOpt, depth: int | None = DepthOpt) -> None:
    """Browse headings interactively; rename, refile or clock in from the picker."""

    settings = _setup()
    outline = load_org(file)
    service, picker = _interactive(outline, settings)
    service.point = _find(outline, under, "--under")
    service.search_subtree(service.point, depth)
    asyncio.run(picker.run())
    if service.point is not None:
        console.print(f"Point: [bold]{outline.outline_path(service.point)}[/bold]")
    _finish(outline, file)


@app.command()
def refile(
    file: Path = FileArg,
    source: str = typer.Option(..., "--source", "-s", help="Heading to refile"),
    keep: bool = typer.Option(False, "--keep", help="Copy instead of move"),
    depth: int | None = DepthOpt,
) -> None:
    """Refile a heading under a destination chosen interactively."""

    settings = _setup()
    outline = load_org(file)
    service, picker = _interactive(outline, settings)
    service.point = _find(outline, source, "--source")
    service.refile_heading(keep=keep, depth=depth)
    asyncio.run(picker.run())
    if service.refile_mark is not None:
        console.print(f"Refiled under [bold]{outline.outline_path(service.refile_mark)}[/bold]")
    _finish(outline, file)


@app.command("clock-in")
def clock_in(file: Path = FileArg, depth: int | None = DepthOpt) -> None:
    """Clock in on a heading chosen interactively."""

    settings = _setup()
    outline = load_org(file)
    service, picker = _interactive(outline, settings)
    service.clock_in_heading(depth=depth)
    asyncio.run(picker.run())
    if outline.clocked_in is not None:
        console.print(f"Clocked in on [bold]{outline.outline_path(outline.clocked_in)}[/bold]")
    _finish(outline, file)


@app.command()
def pick(
    file: Path = FileArg,
    under: str | None = UnderOpt,
    depth: int | None = DepthOpt,
    ancestors: bool = typer.Option(False, "--ancestors", help="Pick from the ancestor chain of --under"),
    timeout: float | None = typer.Option(None, "--timeout", min=0.1, help="Give up after this many seconds"),
) -> None:
    """Pick a heading and print its outline path."""

    settings = _setup()
    outline = load_org(file)
    service, picker = _interactive(outline, settings)
    anchor = _find(outline, under, "--under")
    source = CandidateSource.ANCESTORS if ancestors else CandidateSource.DESCENDANTS

    async def _pick() -> HeadingMarker:
        runner = asyncio.create_task(picker.run())
        try:
            return await service.search_sync(source, anchor, depth, timeout=timeout or settings.sync_timeout_s)
        finally:
            runner.cancel()

    try:
        chosen = asyncio.run(_pick())
    except OrgNavError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    typer.echo(outline.outline_path(chosen))
    _finish(outline, file)


if __name__ == "__main__":
    app()
