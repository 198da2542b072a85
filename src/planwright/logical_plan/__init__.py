"""
planwright logical plan.

This module provides the logical plan model: types, expressions and operator
nodes, along with the errors raised while deriving schemas.

Example Usage
-------------
>>> from planwright.datasource import CsvDataSource
>>> from planwright.logical_plan import DType, Projection, Scan, Selection, col, eq, lit, schema
>>>
>>> s = schema([("column1", DType.INT64, False), ("column2", DType.UTF8, False)])
>>> scan = Scan("test.csv", s, CsvDataSource(s, "test.csv"))
>>> plan = Projection(Selection(scan, eq(col("column1"), lit(123))), (col("column2"),))
>>> plan.schema().field_names()
['column2']
"""

# Errors
from planwright.logical_plan.errors import DataSourceError, PlanError, UnknownColumnError

# Types
from planwright.logical_plan.types import DType, Field, Schema, schema

# Expressions
from planwright.logical_plan.expressions import (
    # Enums
    AggFunc,
    BinaryOp,
    # AST nodes
    Aggregation,
    BinaryExpr,
    BooleanExpr,
    Col,
    Expr,
    LiteralInt,
    LiteralString,
    MathExpr,
    # Convenience constructors
    add,
    and_,
    avg,
    col,
    divide,
    eq,
    gt,
    gteq,
    lit,
    lt,
    lteq,
    max_,
    min_,
    modulus,
    multiply,
    neq,
    or_,
    subtract,
    sum_,
)

# Nodes
from planwright.logical_plan.nodes import (
    Aggregate,
    LogicalPlan,
    Projection,
    Scan,
    Selection,
)

__all__ = [
    # Errors
    "DataSourceError",
    "PlanError",
    "UnknownColumnError",
    # Types
    "DType",
    "Field",
    "Schema",
    "schema",
    # Expression enums
    "AggFunc",
    "BinaryOp",
    # Expression AST
    "Aggregation",
    "BinaryExpr",
    "BooleanExpr",
    "Col",
    "Expr",
    "LiteralInt",
    "LiteralString",
    "MathExpr",
    # Expression constructors
    "add",
    "and_",
    "avg",
    "col",
    "divide",
    "eq",
    "gt",
    "gteq",
    "lit",
    "lt",
    "lteq",
    "max_",
    "min_",
    "modulus",
    "multiply",
    "neq",
    "or_",
    "subtract",
    "sum_",
    # Node types
    "Aggregate",
    "LogicalPlan",
    "Projection",
    "Scan",
    "Selection",
]
