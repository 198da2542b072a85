"""
Logical operator nodes for the planwright logical plan.

This module defines the logical operators that make up a plan tree:
- Scan: Leaf node bound to a data source
- Projection: Column selection and derivation
- Selection: Row filtering by a boolean predicate
- Aggregate: Grouping with aggregate expressions

All nodes are immutable (frozen dataclasses) and hold their input plan by
reference, so plans built from a common ancestor share it. Output schemas are
derived when a node is constructed; a node that cannot derive its schema is
never created.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from planwright.logical_plan.expressions import Aggregation, Expr
from planwright.logical_plan.types import Schema

if TYPE_CHECKING:
    from planwright.datasource import DataSource

logger = logging.getLogger(__name__)


# ============================================================================
# Base Node Class
# ============================================================================


class LogicalPlan(ABC):
    """
    Abstract base class for all logical plan nodes.

    Subclasses provide their output schema, their ordered inputs and a
    one-line description; the indented tree rendering is shared.
    """

    @abstractmethod
    def schema(self) -> Schema:
        """
        Return the schema of the rows this node produces.

        Returns
        -------
        Schema
            The output schema.
        """

    @abstractmethod
    def children(self) -> tuple[LogicalPlan, ...]:
        """
        Return the input plans of this node.

        Returns
        -------
        tuple[LogicalPlan, ...]
            Ordered input plans. Empty for Scan.
        """

    @abstractmethod
    def to_string(self) -> str:
        """
        Return the single-line description of this node.

        Returns
        -------
        str
            The node description, without its inputs.
        """

    def format(self) -> str:
        """
        Render this node and its inputs as an indented tree.

        Nodes are written in pre-order, one per line, indented by two spaces
        per level of depth.

        Returns
        -------
        str
            The formatted plan, each line terminated by a newline.

        Examples
        --------
        >>> print(plan.format(), end="")
        Projection: column1, column3
          Filter: column1=123
            Scan: test.csv, projection=None
        """
        lines: list[str] = []
        self._format_subtree(0, lines)
        return "".join(lines)

    def _format_subtree(self, depth: int, lines: list[str]) -> None:
        """Recursively format a subtree."""
        lines.append(f"{'  ' * depth}{self.to_string()}\n")
        for child in self.children():
            child._format_subtree(depth + 1, lines)

    def __str__(self) -> str:
        return self.format()


def _derive_fields(input: LogicalPlan, exprs: tuple[Expr, ...]) -> Schema:
    """Derive one field per expression against the input plan."""
    return Schema(tuple(e.to_field(input) for e in exprs))


def _warn_duplicates(node: LogicalPlan, derived: Schema) -> None:
    """Log derived field names that are no longer addressable."""
    duplicates = derived.duplicate_names()
    if duplicates:
        logger.warning(
            f"{type(node).__name__} produces duplicate field names {duplicates}; "
            f"they cannot be referenced by later expressions"
        )


# ============================================================================
# Source Node
# ============================================================================


@dataclass(frozen=True)
class Scan(LogicalPlan):
    """
    Leaf node reading from a data source.

    The reported schema is the bound schema verbatim; the stored projection
    is informational and does not narrow it.

    Parameters
    ----------
    path : str
        Path of the backing file, used for display.
    bound_schema : Schema
        The schema declared for the source.
    datasource : DataSource
        The data source that will produce the rows.
    projection : tuple[str, ...]
        Column names to read. Empty means every column.

    Raises
    ------
    ValueError
        If the data source reports a different schema than the bound one.
    UnknownColumnError
        If a projected name is not in the bound schema.

    Examples
    --------
    >>> scan = Scan("test.csv", s, CsvDataSource(s, "test.csv"))
    >>> scan.to_string()
    'Scan: test.csv, projection=None'
    """

    path: str
    bound_schema: Schema
    datasource: DataSource = field(compare=False, repr=False)
    projection: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.projection, str):
            raise TypeError(f"Projection must be a sequence of column names, got str: {self.projection!r}")
        if not isinstance(self.projection, tuple):
            object.__setattr__(self, "projection", tuple(self.projection))
        if self.datasource.schema() != self.bound_schema:
            raise ValueError(f"Data source schema does not match the schema bound to {self.path}")
        for name in self.projection:
            self.bound_schema.field(name)
        logger.debug(f"Created Scan of {self.path} with {len(self.bound_schema)} fields")

    def schema(self) -> Schema:
        return self.bound_schema

    def children(self) -> tuple[LogicalPlan, ...]:
        return ()

    def to_string(self) -> str:
        if not self.projection:
            return f"Scan: {self.path}, projection=None"
        return f"Scan: {self.path}, projection={list(self.projection)}"


# ============================================================================
# Relational Operators
# ============================================================================


@dataclass(frozen=True)
class Projection(LogicalPlan):
    """
    Column projection and derivation.

    Produces one field per expression, in expression order.

    Parameters
    ----------
    input : LogicalPlan
        Input plan.
    exprs : tuple[Expr, ...]
        Expressions to evaluate.

    Examples
    --------
    >>> # SELECT column1, column3
    >>> projection = Projection(scan, (col("column1"), col("column3")))
    >>> projection.to_string()
    'Projection: column1, column3'
    """

    input: LogicalPlan
    exprs: tuple[Expr, ...]
    _schema: Schema = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.exprs, tuple):
            object.__setattr__(self, "exprs", tuple(self.exprs))
        derived = _derive_fields(self.input, self.exprs)
        _warn_duplicates(self, derived)
        object.__setattr__(self, "_schema", derived)
        logger.debug(f"Created Projection of {len(self.exprs)} expressions")

    def schema(self) -> Schema:
        return self._schema

    def children(self) -> tuple[LogicalPlan, ...]:
        return (self.input,)

    def to_string(self) -> str:
        return f"Projection: {', '.join(e.to_string() for e in self.exprs)}"


@dataclass(frozen=True)
class Selection(LogicalPlan):
    """
    Row filtering (WHERE clause).

    The output schema is the input schema, unchanged. The predicate is
    resolved against the input when the node is built, so it may only
    reference existing columns.

    Parameters
    ----------
    input : LogicalPlan
        Input plan.
    predicate : Expr
        Boolean expression to filter rows.

    Examples
    --------
    >>> # WHERE column1 = 123
    >>> selection = Selection(scan, eq(col("column1"), lit(123)))
    >>> selection.to_string()
    'Filter: column1=123'
    """

    input: LogicalPlan
    predicate: Expr

    def __post_init__(self) -> None:
        self.predicate.to_field(self.input)
        logger.debug(f"Created Selection on {self.predicate}")

    def schema(self) -> Schema:
        return self.input.schema()

    def children(self) -> tuple[LogicalPlan, ...]:
        return (self.input,)

    def to_string(self) -> str:
        return f"Filter: {self.predicate.to_string()}"


@dataclass(frozen=True)
class Aggregate(LogicalPlan):
    """
    Grouping and aggregation.

    The output schema lists the grouping fields followed by the aggregate
    fields, each in the order given.

    Parameters
    ----------
    input : LogicalPlan
        Input plan.
    group_exprs : tuple[Expr, ...]
        Expressions to group by.
    aggregate_exprs : tuple[Aggregation, ...]
        Aggregations to compute per group.

    Raises
    ------
    TypeError
        If an aggregate expression is not an Aggregation.

    Examples
    --------
    >>> # GROUP BY column1 WITH SUM(column3)
    >>> aggregate = Aggregate(scan, (col("column1"),), (sum_(col("column3")),))
    >>> aggregate.to_string()
    'Aggregate: groupExpr=column1, aggregateExpr=sum(column3)'
    """

    input: LogicalPlan
    group_exprs: tuple[Expr, ...]
    aggregate_exprs: tuple[Aggregation, ...]
    _schema: Schema = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.group_exprs, tuple):
            object.__setattr__(self, "group_exprs", tuple(self.group_exprs))
        if not isinstance(self.aggregate_exprs, tuple):
            object.__setattr__(self, "aggregate_exprs", tuple(self.aggregate_exprs))
        for expr in self.aggregate_exprs:
            if not isinstance(expr, Aggregation):
                raise TypeError(f"Expected an aggregation, got: {expr}")

        groups = _derive_fields(self.input, self.group_exprs)
        aggregates = _derive_fields(self.input, self.aggregate_exprs)
        derived = Schema(groups.fields + aggregates.fields)
        _warn_duplicates(self, derived)
        object.__setattr__(self, "_schema", derived)
        logger.debug(
            f"Created Aggregate with {len(self.group_exprs)} groups "
            f"and {len(self.aggregate_exprs)} aggregates"
        )

    def schema(self) -> Schema:
        return self._schema

    def children(self) -> tuple[LogicalPlan, ...]:
        return (self.input,)

    def to_string(self) -> str:
        groups = ", ".join(e.to_string() for e in self.group_exprs)
        aggregates = ", ".join(e.to_string() for e in self.aggregate_exprs)
        return f"Aggregate: groupExpr={groups}, aggregateExpr={aggregates}"
