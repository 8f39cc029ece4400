"""Models used across the project."""

from __future__ import annotations

from orgnav.models.action import Action
from orgnav.models.candidate import Candidate
from orgnav.models.context import CandidateSource, SearchContext
from orgnav.models.heading import Heading
from orgnav.models.options import SearchOptions, validate_options

__all__ = [
    "Action",
    "Candidate",
    "CandidateSource",
    "Heading",
    "SearchContext",
    "SearchOptions",
    "validate_options",
]
