"""Org file adapter.

Reads and writes the heading structure of an org file. Only heading lines are
interpreted; every other line is carried verbatim as the body of the heading
above it (or as the preamble before the first heading), so rendering an
unmodified outline gives back the original text.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Callable

from orgnav.document.outline import OrgOutline
from orgnav.logging import get_logger
from orgnav.models.heading import Heading

logger = get_logger(__name__)

_HEADING_RE = re.compile(r"^(?P<stars>\*+)[ \t]+(?P<title>.*?)[ \t]*$")
_TAGS_RE = re.compile(r"^(?P<text>.*?)[ \t]+(?P<tags>:(?:[\w@#%]+:)+)$")


def parse_heading_line(line: str) -> Heading | None:
    """Parse a single heading line, or return None for a body line."""

    m = _HEADING_RE.match(line)
    if not m:
        return None
    title = m.group("title")
    tags: list[str] = []
    t = _TAGS_RE.match(title)
    if t:
        title = t.group("text")
        tags = [tag for tag in t.group("tags").split(":") if tag]
    return Heading(level=len(m.group("stars")), text=title, tags=tags)


def render_heading_line(heading: Heading, marker: str = "*") -> str:
    line = f"{marker * heading.level} {heading.text}"
    if heading.tags:
        line += " :" + ":".join(heading.tags) + ":"
    return line


def parse_org(text: str, *, name: str = "*org*", now: Callable[[], datetime] | None = None) -> OrgOutline:
    """Parse org text into an outline."""

    preamble: list[str] = []
    headings: list[Heading] = []
    for line in text.splitlines():
        heading = parse_heading_line(line)
        if heading is not None:
            headings.append(heading)
        elif headings:
            headings[-1].body.append(line)
        else:
            preamble.append(line)
    return OrgOutline(name, headings, preamble=preamble, now=now)


def render_org(outline: OrgOutline) -> str:
    """Render an outline back to org text."""

    lines = list(outline.preamble)
    for heading in outline.headings():
        lines.append(render_heading_line(heading))
        lines.extend(heading.body)
    return "\n".join(lines) + "\n" if lines else ""


def load_org(path: Path) -> OrgOutline:
    """Load an org file."""

    outline = parse_org(path.read_text(encoding="utf-8"), name=path.name)
    logger.info("Loaded %d headings from %s", len(outline), path)
    return outline


def save_org(outline: OrgOutline, path: Path) -> None:
    """Write an outline to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_org(outline), encoding="utf-8")
    outline.modified = False
    logger.info("Saved %d headings to %s", len(outline), path)
