"""Filter predicates and their evaluation against records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Mapping, Union

from mock_tables.parsing.filter_parser import AnyOf, MalformedTerm, OrTerm

COMPARISON_OPERATORS = frozenset({"eq", "neq", "gt", "gte", "lt", "lte"})
PATTERN_OPERATORS = frozenset({"like", "ilike"})
SET_OPERATORS = frozenset({"is", "in", "contains", "contained_by"})
OPERATORS = COMPARISON_OPERATORS | PATTERN_OPERATORS | SET_OPERATORS


@dataclass(frozen=True)
class Condition:
    """A single-column filter such as ``score >= 50``."""

    column: str
    operator: str  # one of OPERATORS
    value: Any

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ValueError(f"Unknown filter operator: {self.operator!r}")


Predicate = Union[Condition, AnyOf]


def matches_all(record: Mapping[str, Any], predicates: Iterable[Predicate]) -> bool:
    """Return True if ``record`` satisfies every predicate (logical AND)."""
    return all(evaluate(record, predicate) for predicate in predicates)


def evaluate(record: Mapping[str, Any], predicate: Predicate) -> bool:
    """Evaluate a predicate against a record. Missing columns read as None."""
    if isinstance(predicate, AnyOf):
        return any(_evaluate_or_term(record, term) for term in predicate.terms)
    return _compare(record.get(predicate.column), predicate.operator, predicate.value)


def _evaluate_or_term(record: Mapping[str, Any], term: OrTerm | MalformedTerm) -> bool:
    if isinstance(term, MalformedTerm) or not term.supported:
        return False
    field_value = record.get(term.column)
    if term.operator == "eq":
        return values_equal(field_value, term.value)
    return not values_equal(field_value, term.value)


def _compare(field_value: Any, operator: str, value: Any) -> bool:
    """Compare a field value against a filter value."""
    if operator == "eq":
        return values_equal(field_value, value)
    elif operator == "neq":
        return not values_equal(field_value, value)
    elif operator == "is":
        return field_value is value
    elif operator == "in":
        return any(values_equal(field_value, candidate) for candidate in value)
    elif operator in PATTERN_OPERATORS:
        if field_value is None:
            return False
        return _like_regex(value).search(str(field_value)) is not None
    elif operator == "contains":
        return _contains(field_value, value)
    elif operator == "contained_by":
        if not isinstance(field_value, (Mapping, list, tuple, set, frozenset)):
            return False
        return _contains(value, field_value)

    # Ordering comparisons; None and incomparable types never match
    if field_value is None or value is None:
        return False
    try:
        if operator == "gt":
            return field_value > value
        elif operator == "gte":
            return field_value >= value
        elif operator == "lt":
            return field_value < value
        elif operator == "lte":
            return field_value <= value
    except TypeError:
        return False
    return False


def values_equal(left: Any, right: Any) -> bool:
    """Equality that does not treat booleans as the integers 0 and 1."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _contains(container: Any, contained: Any) -> bool:
    """Return True if every element of ``contained`` is in ``container``.

    Both sides may be lists (array columns) or both mappings (json columns).
    A scalar ``contained`` is treated as a one-element list.
    """
    if isinstance(container, Mapping):
        if not isinstance(contained, Mapping):
            return False
        return all(
            key in container and values_equal(container[key], item)
            for key, item in contained.items()
        )
    if not isinstance(container, (list, tuple, set, frozenset)):
        return False
    if isinstance(contained, Mapping) or contained is None:
        return False
    if not isinstance(contained, (list, tuple, set, frozenset)):
        contained = [contained]
    return all(
        any(values_equal(element, item) for element in container)
        for item in contained
    )


@lru_cache(maxsize=256)
def _like_regex(pattern: str) -> re.Pattern[str]:
    """Compile a ``%`` wildcard pattern to a case-insensitive regex."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("%")), re.IGNORECASE)
