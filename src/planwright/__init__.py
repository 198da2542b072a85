"""
The main entry point for planwright when using it as a library.
Users describe queries by chaining DataFrame transformations from an ExecutionContext.
planwright builds the corresponding logical plan as an immutable tree, derives each node's output schema as it is
built, and renders the plan as indented text.
"""

from planwright.context import ExecutionConfig, ExecutionContext
from planwright.dataframe import DataFrame
from planwright.datasource import CsvDataSource, DataSource
from planwright.logical_plan import *  # noqa: F401,F403
from planwright.logical_plan import __all__ as _logical_plan_all

__all__ = [
    "CsvDataSource",
    "DataFrame",
    "DataSource",
    "ExecutionConfig",
    "ExecutionContext",
    *_logical_plan_all,
]
