"""Label selector parsing and matching.

Cluster queries hand the raw selector to the API server; this module
validates it up front and evaluates it against objects read from files.
Supported terms: ``key=value``, ``key==value``, ``key!=value``,
``key in (a,b)``, ``key notin (a,b)``, ``key`` and ``!key``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from kube_hello.integrations.kubernetes.exceptions import ResolutionError

_KEY = r"[A-Za-z0-9](?:[-A-Za-z0-9_./]*[A-Za-z0-9])?"
_VALUE = r"(?:[A-Za-z0-9](?:[-A-Za-z0-9_.]*[A-Za-z0-9])?)?"

_NOT_EXISTS_RE = re.compile(rf"^!\s*({_KEY})$")
_SET_RE = re.compile(rf"^({_KEY})\s+(in|notin)\s*\(([^()]*)\)$")
_EQUALITY_RE = re.compile(rf"^({_KEY})\s*(==|=|!=)\s*({_VALUE})$")
_EXISTS_RE = re.compile(rf"^({_KEY})$")
_VALUE_RE = re.compile(rf"^{_VALUE}$")


@dataclass(frozen=True)
class Requirement:
    """A single selector term."""

    key: str
    operator: str
    values: tuple[str, ...] = ()

    def matches(self, labels: Mapping[str, str]) -> bool:
        """Return whether *labels* satisfy this requirement."""
        present = self.key in labels
        value = labels.get(self.key)
        if self.operator == "exists":
            return present
        if self.operator == "!":
            return not present
        if self.operator in ("=", "==", "in"):
            return present and value in self.values
        # "!=" and "notin" also match objects that lack the label
        return not present or value not in self.values


def _split_terms(selector: str) -> list[str]:
    """Split on commas that are not inside a parenthesized value set."""
    terms: list[str] = []
    depth = 0
    current: list[str] = []
    for char in selector:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ResolutionError(
                    f"unable to parse requirement: unbalanced ')' in {selector!r}"
                )
        if char == "," and depth == 0:
            terms.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise ResolutionError(f"unable to parse requirement: unbalanced '(' in {selector!r}")
    terms.append("".join(current).strip())
    return terms


def _parse_term(term: str) -> Requirement:
    if match := _NOT_EXISTS_RE.match(term):
        return Requirement(match.group(1), "!")
    if match := _SET_RE.match(term):
        values = tuple(v.strip() for v in match.group(3).split(","))
        if not all(_VALUE_RE.match(v) for v in values):
            raise ResolutionError(f"unable to parse requirement: invalid value in {term!r}")
        return Requirement(match.group(1), match.group(2), values)
    if match := _EQUALITY_RE.match(term):
        return Requirement(match.group(1), match.group(2), (match.group(3),))
    if match := _EXISTS_RE.match(term):
        return Requirement(match.group(1), "exists")
    raise ResolutionError(f"unable to parse requirement: {term!r}")


def parse_selector(selector: str | None) -> list[Requirement]:
    """Parse a label selector into requirements.

    Args:
        selector: Selector expression. Empty or None selects everything.

    Returns:
        The parsed requirements; an empty list matches every object.

    Raises:
        ResolutionError: If the selector is malformed.
    """
    if not selector or not selector.strip():
        return []
    terms = _split_terms(selector)
    if any(not t for t in terms):
        raise ResolutionError(f"unable to parse requirement: empty term in {selector!r}")
    return [_parse_term(t) for t in terms]


def matches_labels(requirements: list[Requirement], labels: Mapping[str, str] | None) -> bool:
    """Return whether *labels* satisfy every requirement."""
    labels = labels or {}
    return all(r.matches(labels) for r in requirements)
