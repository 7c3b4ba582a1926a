"""Predicate tree models for bookworm.

A compiled query carries a tree of these nodes. Executors translate the tree
into their own query language; the in-memory executor evaluates it directly
with ``matches``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def column_value(row: Any, column: str) -> Any:
    """Read a column from a row mapping or model, None when absent."""
    if isinstance(row, Mapping):
        return row.get(column)
    return getattr(row, column, None)


class Eq(BaseModel):
    """Equality on a single column."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["eq"] = "eq"
    column: str
    value: Any

    def matches(self, row: Any) -> bool:
        return column_value(row, self.column) == self.value

    def __str__(self) -> str:
        return f"{self.column} = {self.value!r}"


class ILike(BaseModel):
    """Case-insensitive substring match on a single column."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ilike"] = "ilike"
    column: str
    value: str

    def matches(self, row: Any) -> bool:
        actual = column_value(row, self.column)
        if actual is None:
            return False
        return self.value.lower() in str(actual).lower()

    def __str__(self) -> str:
        return f"{self.column} ILIKE '%{self.value}%'"


class Range(BaseModel):
    """Inclusive range on a numeric or date column.

    Either bound may be omitted. A row whose column is missing, or holds a
    value that cannot be compared with the bounds, does not match.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    column: str
    gte: Optional[Any] = None
    lte: Optional[Any] = None

    def matches(self, row: Any) -> bool:
        actual = column_value(row, self.column)
        if actual is None:
            return False
        try:
            if self.gte is not None and actual < self.gte:
                return False
            if self.lte is not None and actual > self.lte:
                return False
        except TypeError:
            return False
        return True

    def __str__(self) -> str:
        parts = []
        if self.gte is not None:
            parts.append(f"{self.column} >= {self.gte!r}")
        if self.lte is not None:
            parts.append(f"{self.column} <= {self.lte!r}")
        return " AND ".join(parts) if parts else "TRUE"


class Contains(BaseModel):
    """Array containment: the column is a list holding ``value``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["contains"] = "contains"
    column: str
    value: str

    def matches(self, row: Any) -> bool:
        actual = column_value(row, self.column)
        if not isinstance(actual, (list, tuple, set, frozenset)):
            return False
        return self.value in actual

    def __str__(self) -> str:
        return f"{self.column} @> {{{self.value!r}}}"


Predicate = Annotated[
    Union[Eq, ILike, Range, Contains, "AnyOf", "AllOf"],
    Field(discriminator="kind"),
]


class AnyOf(BaseModel):
    """OR group. An empty group matches nothing."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["or"] = "or"
    clauses: tuple[Predicate, ...] = ()

    def matches(self, row: Any) -> bool:
        return any(clause.matches(row) for clause in self.clauses)

    def __str__(self) -> str:
        return "(" + " OR ".join(str(c) for c in self.clauses) + ")"


class AllOf(BaseModel):
    """AND group. An empty group matches every row."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["and"] = "and"
    clauses: tuple[Predicate, ...] = ()

    def matches(self, row: Any) -> bool:
        return all(clause.matches(row) for clause in self.clauses)

    def __str__(self) -> str:
        if not self.clauses:
            return "TRUE"
        return " AND ".join(str(c) for c in self.clauses)


AnyOf.model_rebuild()
AllOf.model_rebuild()
