"""Key bindings for secondary picker actions.

The navigation core deals in :class:`~orgnav.models.action.Action` values only; this
module is the thin layer that maps picker keys onto them.
"""

from __future__ import annotations

from typing import Callable, Mapping

from orgnav.models.action import Action

DEFAULT_KEYMAP: dict[str, Action] = {
    "g": Action.GOTO,
    ">": Action.EXPLORE,
    "<": Action.EXPLORE_PARENT,
    "^": Action.EXPLORE_ANCESTORS,
    "+": Action.INCREASE_DEPTH,
    "-": Action.DECREASE_DEPTH,
    "r": Action.RENAME,
    "n": Action.CREATE_CHILD,
    "i": Action.CLOCK_IN,
    "w": Action.REFILE,
    "k": Action.REFILE_KEEP,
}

ACTION_HELP: dict[Action, str] = {
    Action.GOTO: "go to heading",
    Action.EXPLORE: "explore children of heading",
    Action.EXPLORE_PARENT: "explore parent of current root",
    Action.EXPLORE_ANCESTORS: "show ancestors of heading",
    Action.INCREASE_DEPTH: "show one more level",
    Action.DECREASE_DEPTH: "show one level less",
    Action.RENAME: "rename heading",
    Action.CREATE_CHILD: "add a child heading",
    Action.CLOCK_IN: "clock in",
    Action.REFILE: "refile point under heading",
    Action.REFILE_KEEP: "copy point under heading",
    Action.RETURN_RESULT: "return heading",
}


def bind(keymap: Mapping[str, Action], handler: Callable[[Action], Callable[..., None]]) -> dict[str, Callable[..., None]]:
    """Turn a key -> action map into a key -> callback map."""

    return {key: handler(action) for key, action in keymap.items()}


def key_help(keymap: Mapping[str, Action]) -> dict[str, str]:
    return {key: ACTION_HELP.get(action, action.value) for key, action in keymap.items()}
