"""orgnav: fuzzy navigation, refiling and clock-in over org outlines."""

from __future__ import annotations

from orgnav.actions import ActionDispatcher
from orgnav.errors import (
    ConfigurationError,
    DocumentStateError,
    NoLastRefileError,
    OrgNavError,
    SearchCancelledError,
    SearchTimeoutError,
)
from orgnav.filtering import build_candidates, filter_by_depth, level_window
from orgnav.models import Action, Candidate, CandidateSource, SearchContext, SearchOptions
from orgnav.session import NavigationService

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionDispatcher",
    "Candidate",
    "CandidateSource",
    "ConfigurationError",
    "DocumentStateError",
    "NavigationService",
    "NoLastRefileError",
    "OrgNavError",
    "SearchCancelledError",
    "SearchContext",
    "SearchOptions",
    "SearchTimeoutError",
    "build_candidates",
    "filter_by_depth",
    "level_window",
]
