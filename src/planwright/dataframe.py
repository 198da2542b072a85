"""
DataFrame facade over a logical plan.
"""

from __future__ import annotations

from typing import Iterable

from planwright.logical_plan.expressions import Aggregation, Col, Expr
from planwright.logical_plan.nodes import Aggregate, LogicalPlan, Projection, Selection
from planwright.logical_plan.types import Schema


def _to_exprs(exprs: Iterable[Expr | str]) -> tuple[Expr, ...]:
    """Normalize a list of expressions, treating bare strings as columns."""
    return tuple(Col(e) if isinstance(e, str) else e for e in exprs)


class DataFrame:
    """
    A chainable, immutable view of a logical plan.

    Every transformation returns a new DataFrame whose plan wraps the
    current one; the receiver is left untouched and stays usable, and the
    untouched part of the tree is shared rather than copied.

    Parameters
    ----------
    plan : LogicalPlan
        The root of the plan this DataFrame describes.

    Examples
    --------
    >>> df = ctx.csv(s, "test.csv")
    >>> df = df.filter(eq(col("column1"), lit(123))).select([col("column1"), col("column3")])
    >>> print(df.explain(), end="")
    Projection: column1, column3
      Filter: column1=123
        Scan: test.csv, projection=None
    """

    __slots__ = ("_plan",)

    def __init__(self, plan: LogicalPlan) -> None:
        self._plan = plan

    def select(self, exprs: Iterable[Expr | str]) -> DataFrame:
        """
        Project the given expressions.

        Parameters
        ----------
        exprs : Iterable[Expr | str]
            Expressions to evaluate, in output order. Strings are column names.

        Returns
        -------
        DataFrame
            A DataFrame over a new Projection.

        Raises
        ------
        UnknownColumnError
            If an expression references a missing or ambiguous column.
        """
        return DataFrame(Projection(self._plan, _to_exprs(exprs)))

    def filter(self, expr: Expr) -> DataFrame:
        """
        Keep the rows matching a predicate.

        Parameters
        ----------
        expr : Expr
            Boolean predicate.

        Returns
        -------
        DataFrame
            A DataFrame over a new Selection, with an unchanged schema.

        Raises
        ------
        UnknownColumnError
            If the predicate references a missing or ambiguous column.
        """
        return DataFrame(Selection(self._plan, expr))

    def aggregate(
        self,
        group_by: Iterable[Expr | str],
        aggregates: Iterable[Aggregation],
    ) -> DataFrame:
        """
        Group rows and compute aggregates per group.

        Parameters
        ----------
        group_by : Iterable[Expr | str]
            Grouping expressions. Strings are column names.
        aggregates : Iterable[Aggregation]
            Aggregations to compute.

        Returns
        -------
        DataFrame
            A DataFrame over a new Aggregate.

        Raises
        ------
        UnknownColumnError
            If an expression references a missing or ambiguous column.
        TypeError
            If an aggregate is not an Aggregation.
        """
        return DataFrame(Aggregate(self._plan, _to_exprs(group_by), tuple(aggregates)))

    def schema(self) -> Schema:
        """Return the output schema of the plan."""
        return self._plan.schema()

    def plan(self) -> LogicalPlan:
        """Return the root of the plan."""
        return self._plan

    def explain(self) -> str:
        """Return the formatted plan tree."""
        return self._plan.format()

    def __repr__(self) -> str:
        return f"DataFrame({self._plan.to_string()})"
