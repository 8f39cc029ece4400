"""Typed search options.

Options are validated eagerly: a misspelled key is an error at call time rather than
a silently ignored setting.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from orgnav.errors import ConfigurationError
from orgnav.models.action import Action
from orgnav.models.context import CandidateSource


class SearchOptions(BaseModel):
    """Options accepted by :meth:`orgnav.session.NavigationService.search`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: CandidateSource = CandidateSource.DESCENDANTS
    anchor: Any = None
    depth: int | None = Field(default=1, ge=1)
    default_action: Action = Action.GOTO
    label: str = "Headings"
    input_text: str = ""


def validate_options(options: SearchOptions | Mapping[str, Any] | None = None, **overrides: Any) -> SearchOptions:
    """Build :class:`SearchOptions` from a mapping and keyword overrides.

    Raises:
        ConfigurationError: On unknown keys or invalid values.
    """

    if isinstance(options, SearchOptions):
        data: dict[str, Any] = {name: getattr(options, name) for name in SearchOptions.model_fields}
    else:
        data = dict(options or {})
    data.update(overrides)
    try:
        return SearchOptions.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<options>'}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(f"invalid search options: {problems}") from exc
