"""
Expression AST for the planwright logical plan.

This module defines the expression tree used by Projection, Selection and
Aggregate nodes. Every expression can derive the Field it produces against an
input plan and render itself as text.

The AST supports:
- Column references
- String and integer literals
- Boolean binary operations (comparison, AND, OR)
- Math binary operations (+, -, *, /, %)
- Aggregations (SUM, MIN, MAX, AVG)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from planwright.logical_plan.types import DType, Field

if TYPE_CHECKING:
    from planwright.logical_plan.nodes import LogicalPlan

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class BinaryOp(Enum):
    """
    Binary operators for expressions.

    Boolean operators (comparisons, AND, OR) produce BOOLEAN fields; math
    operators produce a field typed after their left operand.
    """

    # Boolean operators
    EQ = auto()    # =
    NEQ = auto()   # !=
    GT = auto()    # >
    LT = auto()    # <
    GTEQ = auto()  # >=
    LTEQ = auto()  # <=
    AND = auto()
    OR = auto()

    # Math operators
    ADD = auto()       # +
    SUBTRACT = auto()  # -
    MULTIPLY = auto()  # *
    DIVIDE = auto()    # /
    MODULUS = auto()   # %

    def is_boolean(self) -> bool:
        """
        Check if this operator produces a boolean.

        Returns
        -------
        bool
            True for comparisons and AND/OR.
        """
        return self in (
            BinaryOp.EQ, BinaryOp.NEQ, BinaryOp.GT, BinaryOp.LT,
            BinaryOp.GTEQ, BinaryOp.LTEQ, BinaryOp.AND, BinaryOp.OR,
        )

    def is_math(self) -> bool:
        """
        Check if this is an arithmetic operator.

        Returns
        -------
        bool
            True if this is ADD, SUBTRACT, MULTIPLY, DIVIDE or MODULUS.
        """
        return self in (BinaryOp.ADD, BinaryOp.SUBTRACT, BinaryOp.MULTIPLY, BinaryOp.DIVIDE, BinaryOp.MODULUS)

    def symbol(self) -> str:
        """
        Get the symbolic representation of this operator.

        Returns
        -------
        str
            The symbol (e.g., "=", "+", "AND").
        """
        symbols = {
            BinaryOp.EQ: "=",
            BinaryOp.NEQ: "!=",
            BinaryOp.GT: ">",
            BinaryOp.LT: "<",
            BinaryOp.GTEQ: ">=",
            BinaryOp.LTEQ: "<=",
            BinaryOp.AND: "AND",
            BinaryOp.OR: "OR",
            BinaryOp.ADD: "+",
            BinaryOp.SUBTRACT: "-",
            BinaryOp.MULTIPLY: "*",
            BinaryOp.DIVIDE: "/",
            BinaryOp.MODULUS: "%",
        }
        return symbols[self]

    def field_name(self) -> str:
        """
        Get the name of the field this operator produces.

        Returns
        -------
        str
            The output field name (e.g., "eq", "add", "mult").
        """
        names = {
            BinaryOp.EQ: "eq",
            BinaryOp.NEQ: "neq",
            BinaryOp.GT: "gt",
            BinaryOp.LT: "lt",
            BinaryOp.GTEQ: "gteq",
            BinaryOp.LTEQ: "lteq",
            BinaryOp.AND: "and",
            BinaryOp.OR: "or",
            BinaryOp.ADD: "add",
            BinaryOp.SUBTRACT: "subtract",
            BinaryOp.MULTIPLY: "mult",
            BinaryOp.DIVIDE: "div",
            BinaryOp.MODULUS: "modulus",
        }
        return names[self]


class AggFunc(Enum):
    """
    Aggregation functions for Aggregate nodes.
    """

    SUM = auto()
    MIN = auto()
    MAX = auto()
    AVG = auto()

    def name_lower(self) -> str:
        """
        Get the lowercase name of the function.

        Returns
        -------
        str
            The function name in lowercase (e.g., "sum", "avg").
        """
        return self.name.lower()


@dataclass(frozen=True)
class Expr(ABC):
    """
    Abstract base class for all expressions in the AST.

    Expressions are immutable and form a tree structure representing
    computations over column values and literals.
    """

    @abstractmethod
    def to_field(self, input: LogicalPlan) -> Field:
        """
        Derive the field this expression produces over an input plan.

        Parameters
        ----------
        input : LogicalPlan
            The plan whose schema the expression is evaluated against.

        Returns
        -------
        Field
            The derived output field.

        Raises
        ------
        UnknownColumnError
            If a referenced column does not resolve to exactly one field.
        """

    @abstractmethod
    def children(self) -> tuple[Expr, ...]:
        """
        Return child expressions.

        Returns
        -------
        tuple[Expr, ...]
            Child expressions of this node. Empty for leaf nodes.
        """

    @abstractmethod
    def to_string(self) -> str:
        """
        Return a human-readable string representation.

        Returns
        -------
        str
            String representation of this expression.
        """

    def __str__(self) -> str:
        return self.to_string()

    def collect_columns(self) -> frozenset[str]:
        """
        Collect all column references in this expression.

        Returns
        -------
        frozenset[str]
            Set of column names referenced in this expression.
        """
        columns: set[str] = set()
        self._collect_columns_recursive(columns)
        return frozenset(columns)

    def _collect_columns_recursive(self, columns: set[str]) -> None:
        """Recursively collect column names into the provided set."""
        if isinstance(self, Col):
            columns.add(self.name)
        for child in self.children():
            child._collect_columns_recursive(columns)


@dataclass(frozen=True)
class Col(Expr):
    """
    A reference to a column of the input plan.

    Parameters
    ----------
    name : str
        The column name.

    Examples
    --------
    >>> Col("age").to_string()
    'age'
    """

    name: str

    def to_field(self, input: LogicalPlan) -> Field:
        return input.schema().field(self.name)

    def children(self) -> tuple[Expr, ...]:
        return ()

    def to_string(self) -> str:
        return self.name


@dataclass(frozen=True)
class LiteralString(Expr):
    """
    A constant string.

    The derived field is named after the value itself, so two equal
    literals in one projection produce the same field name.

    Examples
    --------
    >>> LiteralString("abc").to_string()
    "'abc'"
    """

    value: str

    def to_field(self, input: LogicalPlan) -> Field:
        return Field(self.value, DType.UTF8, False)

    def children(self) -> tuple[Expr, ...]:
        return ()

    def to_string(self) -> str:
        return f"'{self.value}'"


@dataclass(frozen=True)
class LiteralInt(Expr):
    """
    A constant 64-bit integer.

    Raises
    ------
    ValueError
        If the value does not fit in a signed 64-bit integer.

    Examples
    --------
    >>> LiteralInt(123).to_string()
    '123'
    """

    value: int

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"Integer literal out of int64 range: {self.value}")

    def to_field(self, input: LogicalPlan) -> Field:
        return Field(str(self.value), DType.INT64, False)

    def children(self) -> tuple[Expr, ...]:
        return ()

    def to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BinaryExpr(Expr):
    """
    Shared base of the two binary expression kinds.

    Parameters
    ----------
    op : BinaryOp
        The binary operator.
    left : Expr
        The left operand.
    right : Expr
        The right operand.
    """

    op: BinaryOp
    left: Expr
    right: Expr

    def name(self) -> str:
        """Return the name of the derived field."""
        return self.op.field_name()

    def symbol(self) -> str:
        """Return the operator symbol used for display."""
        return self.op.symbol()

    def children(self) -> tuple[Expr, ...]:
        return self.left, self.right


@dataclass(frozen=True)
class BooleanExpr(BinaryExpr):
    """
    A comparison or boolean connective.

    The derived field is always a BOOLEAN named after the operator. Both
    operands are still resolved against the input, so a predicate that
    references a missing column raises UnknownColumnError.

    Examples
    --------
    >>> expr = BooleanExpr(BinaryOp.EQ, Col("column1"), LiteralInt(123))
    >>> expr.to_string()
    'column1=123'
    """

    def __post_init__(self) -> None:
        if not self.op.is_boolean():
            raise ValueError(f"Not a boolean operator: {self.op.name}")

    def to_field(self, input: LogicalPlan) -> Field:
        # operands are resolved only to surface unknown columns
        self.left.to_field(input)
        self.right.to_field(input)
        return Field(self.name(), DType.BOOLEAN, False)

    def to_string(self) -> str:
        return f"{self.left.to_string()}{self.symbol()}{self.right.to_string()}"


@dataclass(frozen=True)
class MathExpr(BinaryExpr):
    """
    An arithmetic operation.

    The derived type is the left operand's type; the right operand's type
    is not checked against it.

    Examples
    --------
    >>> expr = MathExpr(BinaryOp.ADD, Col("a"), LiteralInt(1))
    >>> expr.to_string()
    'a + 1'
    """

    def __post_init__(self) -> None:
        if not self.op.is_math():
            raise ValueError(f"Not a math operator: {self.op.name}")

    def to_field(self, input: LogicalPlan) -> Field:
        left = self.left.to_field(input)
        self.right.to_field(input)
        return Field(self.name(), left.dtype, False)

    def to_string(self) -> str:
        return f"{self.left.to_string()} {self.symbol()} {self.right.to_string()}"


@dataclass(frozen=True)
class Aggregation(Expr):
    """
    An aggregation expression for use in Aggregate nodes.

    Parameters
    ----------
    func : AggFunc
        The aggregation function.
    expr : Expr
        The aggregated expression.

    Examples
    --------
    >>> Aggregation(AggFunc.SUM, Col("amount")).to_string()
    'sum(amount)'
    """

    func: AggFunc
    expr: Expr

    def to_field(self, input: LogicalPlan) -> Field:
        return Field(self.func.name_lower(), self.expr.to_field(input).dtype, False)

    def children(self) -> tuple[Expr, ...]:
        return (self.expr,)

    def to_string(self) -> str:
        return f"{self.func.name_lower()}({self.expr.to_string()})"


# ============================================================================
# Convenience constructors for building expressions fluently
# ============================================================================


def col(name: str) -> Col:
    """
    Create a column reference.

    Parameters
    ----------
    name : str
        Column name.

    Returns
    -------
    Col
        A column reference expression.
    """
    return Col(name)


def lit(value: Any) -> LiteralString | LiteralInt:
    """
    Create a literal with inferred type.

    Parameters
    ----------
    value : Any
        The literal value, a str or an int.

    Returns
    -------
    LiteralString | LiteralInt
        A literal expression.

    Raises
    ------
    TypeError
        If the value type is not supported.
    """
    # bool is an int subclass but has no literal kind
    if isinstance(value, bool):
        raise TypeError(f"Cannot create literal from type: {type(value)}")
    if isinstance(value, int):
        return LiteralInt(value)
    if isinstance(value, str):
        return LiteralString(value)
    raise TypeError(f"Cannot create literal from type: {type(value)}")


def eq(left: Expr, right: Expr) -> BooleanExpr:
    """Create an equality comparison (=)."""
    return BooleanExpr(BinaryOp.EQ, left, right)


def neq(left: Expr, right: Expr) -> BooleanExpr:
    """Create a not-equal comparison (!=)."""
    return BooleanExpr(BinaryOp.NEQ, left, right)


def gt(left: Expr, right: Expr) -> BooleanExpr:
    """Create a greater-than comparison (>)."""
    return BooleanExpr(BinaryOp.GT, left, right)


def lt(left: Expr, right: Expr) -> BooleanExpr:
    """Create a less-than comparison (<)."""
    return BooleanExpr(BinaryOp.LT, left, right)


def gteq(left: Expr, right: Expr) -> BooleanExpr:
    """Create a greater-than-or-equal comparison (>=)."""
    return BooleanExpr(BinaryOp.GTEQ, left, right)


def lteq(left: Expr, right: Expr) -> BooleanExpr:
    """Create a less-than-or-equal comparison (<=)."""
    return BooleanExpr(BinaryOp.LTEQ, left, right)


def and_(left: Expr, right: Expr) -> BooleanExpr:
    """Create a boolean AND."""
    return BooleanExpr(BinaryOp.AND, left, right)


def or_(left: Expr, right: Expr) -> BooleanExpr:
    """Create a boolean OR."""
    return BooleanExpr(BinaryOp.OR, left, right)


def add(left: Expr, right: Expr) -> MathExpr:
    """Create an addition (+)."""
    return MathExpr(BinaryOp.ADD, left, right)


def subtract(left: Expr, right: Expr) -> MathExpr:
    """Create a subtraction (-)."""
    return MathExpr(BinaryOp.SUBTRACT, left, right)


def multiply(left: Expr, right: Expr) -> MathExpr:
    """Create a multiplication (*)."""
    return MathExpr(BinaryOp.MULTIPLY, left, right)


def divide(left: Expr, right: Expr) -> MathExpr:
    """Create a division (/)."""
    return MathExpr(BinaryOp.DIVIDE, left, right)


def modulus(left: Expr, right: Expr) -> MathExpr:
    """Create a modulo (%)."""
    return MathExpr(BinaryOp.MODULUS, left, right)


def sum_(expr: Expr) -> Aggregation:
    """Create a SUM aggregation."""
    return Aggregation(AggFunc.SUM, expr)


def min_(expr: Expr) -> Aggregation:
    """Create a MIN aggregation."""
    return Aggregation(AggFunc.MIN, expr)


def max_(expr: Expr) -> Aggregation:
    """Create a MAX aggregation."""
    return Aggregation(AggFunc.MAX, expr)


def avg(expr: Expr) -> Aggregation:
    """Create an AVG aggregation."""
    return Aggregation(AggFunc.AVG, expr)
