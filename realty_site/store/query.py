"""
Store-agnostic query builder.

A Query collects filter predicates, OR groups, ordering and a row limit. It
renders itself as PostgREST query parameters for the REST backend and can
also evaluate itself against plain row dictionaries for the in-memory
backend, so both backends share one definition of what a predicate means.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple


OPERATORS = ("eq", "gte", "lte", "ilike", "in")

# Characters that must be quoted inside a PostgREST or=(...) expression
_RESERVED = re.compile(r'[,.:()"\\\s]')


def _render_value(value: Any) -> str:
    """Render a Python value the way PostgREST expects it in a filter."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _quote(text: str) -> str:
    if _RESERVED.search(text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _like_to_regex(pattern: str) -> "re.Pattern":
    """Translate a SQL LIKE pattern into a case-insensitive regex."""
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class Condition:
    """A single column predicate.

    Attributes:
        column: Column name
        operator: One of eq, gte, lte, ilike, in
        value: Comparison value (a LIKE pattern for ilike, a list for in)
    """
    column: str
    operator: str
    value: Any

    def __post_init__(self):
        if self.operator not in OPERATORS:
            raise ValueError(f"Unsupported operator: {self.operator}")

    @classmethod
    def contains(cls, column: str, text: str) -> 'Condition':
        """Case-insensitive substring match."""
        return cls(column, "ilike", f"%{text}%")

    @classmethod
    def iexact(cls, column: str, text: str) -> 'Condition':
        """Case-insensitive whole-value match."""
        return cls(column, "ilike", text)

    def render(self) -> str:
        """Render as ``operator.value`` (the right-hand side of a filter)."""
        if self.operator == "in":
            items = ",".join(_quote(_render_value(v)) for v in self.value)
            return f"in.({items})"
        if self.operator == "ilike":
            return f"ilike.{self.value.replace('%', '*')}"
        return f"{self.operator}.{_render_value(self.value)}"

    def render_inline(self) -> str:
        """Render as ``column.operator.value`` for use inside ``or=(...)``."""
        if self.operator == "in":
            return f"{self.column}.{self.render()}"
        value = self.value.replace('%', '*') if self.operator == "ilike" else _render_value(self.value)
        return f"{self.column}.{self.operator}.{_quote(value)}"

    def matches(self, row: Dict[str, Any]) -> bool:
        """Evaluate the predicate against a row; a NULL column never matches."""
        actual = row.get(self.column)
        if actual is None:
            return False
        if self.operator == "eq":
            return actual == self.value or str(actual) == _render_value(self.value)
        if self.operator == "in":
            return any(actual == v or str(actual) == str(v) for v in self.value)
        if self.operator == "ilike":
            return _like_to_regex(self.value).fullmatch(str(actual)) is not None
        try:
            if self.operator == "gte":
                return actual >= self.value
            return actual <= self.value
        except TypeError:
            return False


class Query:
    """Chainable filter/order/limit description for a store table.

    Filters added with ``eq``/``gte``/``lte``/``ilike``/``in_`` and every
    ``or_`` group are combined with AND.
    """

    def __init__(self, columns: str = "*"):
        self.columns = columns
        self.filters: List[Condition] = []
        self.or_groups: List[Tuple[Condition, ...]] = []
        self.ordering: List[Tuple[str, bool]] = []
        self.row_limit: Optional[int] = None

    def where(self, condition: Condition) -> 'Query':
        self.filters.append(condition)
        return self

    def eq(self, column: str, value: Any) -> 'Query':
        return self.where(Condition(column, "eq", value))

    def gte(self, column: str, value: Any) -> 'Query':
        return self.where(Condition(column, "gte", value))

    def lte(self, column: str, value: Any) -> 'Query':
        return self.where(Condition(column, "lte", value))

    def ilike(self, column: str, pattern: str) -> 'Query':
        return self.where(Condition(column, "ilike", pattern))

    def in_(self, column: str, values: Iterable[Any]) -> 'Query':
        return self.where(Condition(column, "in", list(values)))

    def or_(self, *conditions: Condition) -> 'Query':
        """Add a group of conditions of which at least one must hold."""
        if conditions:
            self.or_groups.append(tuple(conditions))
        return self

    def order(self, column: str, descending: bool = False) -> 'Query':
        self.ordering.append((column, descending))
        return self

    def limit(self, count: int) -> 'Query':
        self.row_limit = count
        return self

    @property
    def is_unfiltered(self) -> bool:
        return not self.filters and not self.or_groups

    def to_params(self) -> List[Tuple[str, str]]:
        """Render as PostgREST query parameters.

        Returns a list of pairs rather than a dict because the same column
        may carry several filters (``price=gte.1&price=lte.2``).
        """
        params: List[Tuple[str, str]] = [("select", self.columns)]
        for condition in self.filters:
            params.append((condition.column, condition.render()))
        for group in self.or_groups:
            params.append(("or", "(" + ",".join(c.render_inline() for c in group) + ")"))
        if self.ordering:
            params.append((
                "order",
                ",".join(f"{col}.{'desc' if desc else 'asc'}" for col, desc in self.ordering),
            ))
        if self.row_limit is not None:
            params.append(("limit", str(self.row_limit)))
        return params

    def matches(self, row: Dict[str, Any]) -> bool:
        """True when the row satisfies every filter and every OR group."""
        if not all(condition.matches(row) for condition in self.filters):
            return False
        return all(any(c.matches(row) for c in group) for group in self.or_groups)

    def apply(self, rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Filter, order and limit rows in memory."""
        selected = [row for row in rows if self.matches(row)]
        # Sort by the least significant key first; NULLs always last
        for column, descending in reversed(self.ordering):
            present = [r for r in selected if r.get(column) is not None]
            missing = [r for r in selected if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=descending)
            selected = present + missing
        if self.row_limit is not None:
            selected = selected[:self.row_limit]
        return selected

    def __repr__(self) -> str:
        return f"Query({self.to_params()!r})"
