"""
Explicit result type for custom ``test`` predicates.

A predicate attached to a schema node may answer with a plain bool, an explanatory string
(meaning "invalid, because ..."), or a ``Verdict``. ``as_verdict`` folds the three answers into a
single ``Verdict`` so the enforcement engine handles exactly one shape.

Examples:
    >>> from shapeshift.core.verdict import Verdict, as_verdict
    >>> as_verdict(True).ok
    True
    >>> as_verdict("must be even")
    Verdict(ok=False, reason='must be even')
    >>> as_verdict(Verdict.failed()).reason is None
    True
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

__all__ = [
    "Verdict",
    "Predicate",
    "as_verdict",
]


@dataclass(frozen=True, slots=True)
class Verdict:
    """
    Outcome of a custom predicate.

    Attributes:
        ok (bool): True if the value passed.
        reason (str | None): Explanation for a failure, if the predicate gave one.
    """

    ok: bool
    reason: str | None = None

    @classmethod
    def passed(cls) -> Verdict:
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str | None = None) -> Verdict:
        return cls(ok=False, reason=reason)


Predicate: TypeAlias = Callable[[Any], "bool | str | Verdict"]


def as_verdict(result: Any) -> Verdict:
    """
    Fold a predicate's answer into a Verdict.

    Args:
        result (Any): Value returned by the predicate.

    Returns:
        Verdict: ``result`` itself if it is a Verdict; a failure carrying the string for a
        non-empty string; a failure without reason for any other falsy value; a pass otherwise.
    """
    if isinstance(result, Verdict):
        return result
    if isinstance(result, str):
        return Verdict.failed(result) if result else Verdict.failed()
    return Verdict.passed() if result else Verdict.failed()
