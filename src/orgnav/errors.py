"""Exception hierarchy for orgnav."""

from __future__ import annotations


class OrgNavError(Exception):
    """Base class for all orgnav errors."""


class ConfigurationError(OrgNavError):
    """Raised when a search is opened with unknown or invalid options."""


class NoLastRefileError(OrgNavError):
    """Raised by refile-again when no refile destination has been recorded yet."""

    def __init__(self, message: str = "No refile has been performed yet") -> None:
        super().__init__(message)


class DocumentStateError(OrgNavError):
    """Raised when the outline cannot perform an operation on a position.

    Typical causes are positions invalidated by an edit made outside this
    process, or an attempt to refile a heading into its own subtree.
    """


class SearchCancelledError(OrgNavError):
    """Raised by the synchronous bridge when the picker is aborted."""


class SearchTimeoutError(OrgNavError, TimeoutError):
    """Raised by the synchronous bridge when no candidate is chosen in time."""
