"""Numeric-enum schema built on pydantic refinement hooks.

A *refinement* is any callable ``(value, report)`` that inspects an already
type-checked value and calls ``report(code=..., message=..., **context)`` for
each problem. :func:`refine` plugs a refinement into pydantic as an
``AfterValidator``; nothing else here depends on pydantic.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Annotated, Any, Protocol

from pydantic import AfterValidator, StrictFloat, StrictInt
from pydantic_core import PydanticCustomError

from utilkit.core.exceptions import InvalidSpecError

INVALID_VALUE = "invalid_value"


class IssueReporter(Protocol):
    def __call__(self, *, code: str, message: str, **context: Any) -> None: ...


Refinement = Callable[[Any, IssueReporter], None]


@dataclass(frozen=True)
class Issue:
    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)


class IssueCollector:
    """An :class:`IssueReporter` that records every reported issue."""

    def __init__(self) -> None:
        self.issues: list[Issue] = []

    def __call__(self, *, code: str, message: str, **context: Any) -> None:
        self.issues.append(Issue(code=code, message=message, context=context))


def refine(refinement: Refinement) -> AfterValidator:
    """Adapt *refinement* into a pydantic validator raising the first reported issue."""

    def _validate(value: Any) -> Any:
        collector = IssueCollector()
        refinement(value, collector)
        if collector.issues:
            issue = collector.issues[0]
            raise PydanticCustomError(issue.code, issue.message, issue.context)
        return value

    return AfterValidator(_validate)


def numeric_enum_refinement(values: Sequence[int | float]) -> Refinement:
    allowed = tuple(values)

    def _check(value: Any, report: IssueReporter) -> None:
        if value not in allowed:
            report(
                code=INVALID_VALUE,
                message="Input should be one of {values}",
                values=list(allowed),
                input=value,
            )

    return _check


def numeric_enum(values: Sequence[int | float]) -> Any:
    """Schema type accepting only numbers in *values*.

    Usable as a field annotation or with ``TypeAdapter``. A rejected value
    produces an ``invalid_value`` error whose context carries the full list
    of allowed values and the offending input.
    """
    if not values:
        raise InvalidSpecError("numeric_enum requires at least one value")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidSpecError(f"numeric_enum values must be numbers, got {value!r}")

    return Annotated[StrictInt | StrictFloat, refine(numeric_enum_refinement(values))]
