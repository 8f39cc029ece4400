"""Heading model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Heading(BaseModel):
    """A single outline heading and the body lines that follow it.

    Structure (parent, children) is not stored here; it is implied by the order
    and levels of headings inside an outline.
    """

    level: int = Field(ge=1)
    text: str
    tags: list[str] = Field(default_factory=list)
    body: list[str] = Field(default_factory=list)
