"""Navigation action types."""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """Actions that can be applied to a selected candidate."""

    GOTO = "goto"
    EXPLORE = "explore"
    EXPLORE_PARENT = "explore_parent"
    EXPLORE_ANCESTORS = "explore_ancestors"
    INCREASE_DEPTH = "increase_depth"
    DECREASE_DEPTH = "decrease_depth"
    RENAME = "rename"
    CREATE_CHILD = "create_child"
    CLOCK_IN = "clock_in"
    REFILE = "refile"
    REFILE_KEEP = "refile_keep"
    RETURN_RESULT = "return_result"

    @property
    def is_terminal(self) -> bool:
        """Whether the action ends the refinement loop."""

        return self in _TERMINAL

    @property
    def needs_position(self) -> bool:
        """Whether the action acts on the selected candidate."""

        return self not in _PARAMETERLESS


_TERMINAL = frozenset(
    {
        Action.GOTO,
        Action.CREATE_CHILD,
        Action.CLOCK_IN,
        Action.REFILE,
        Action.REFILE_KEEP,
        Action.RETURN_RESULT,
    }
)

_PARAMETERLESS = frozenset(
    {
        Action.EXPLORE_PARENT,
        Action.INCREASE_DEPTH,
        Action.DECREASE_DEPTH,
    }
)
