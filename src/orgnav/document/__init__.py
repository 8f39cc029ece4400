"""Outline documents: the navigation protocol and an in-memory org implementation."""

from __future__ import annotations

from orgnav.document.orgfile import load_org, parse_org, render_org, save_org
from orgnav.document.outline import HeadingMarker, OrgOutline
from orgnav.document.protocol import OutlineDocument, Position

__all__ = [
    "HeadingMarker",
    "OrgOutline",
    "OutlineDocument",
    "Position",
    "load_org",
    "parse_org",
    "render_org",
    "save_org",
]
