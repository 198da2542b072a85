"""
Entry point for building DataFrames over data sources.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from planwright.dataframe import DataFrame
from planwright.datasource import CsvDataSource
from planwright.logical_plan.nodes import Scan
from planwright.logical_plan.types import Schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionConfig:
    """
    Settings applied to every data source a context creates.

    Parameters
    ----------
    batch_size : int
        Maximum number of rows per batch returned by a scan.
    has_header : bool
        Whether CSV files start with a header line.
    delimiter : str
        CSV field delimiter.
    """

    batch_size: int = 1024
    has_header: bool = False
    delimiter: str = ","

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    def with_options(self, **changes: Any) -> ExecutionConfig:
        """
        Create a new ExecutionConfig with some settings changed.

        Parameters
        ----------
        **changes : Any
            Settings to override.

        Returns
        -------
        ExecutionConfig
            The updated configuration.
        """
        return replace(self, **changes)


class ExecutionContext:
    """
    Builds DataFrames rooted at Scan nodes.

    Parameters
    ----------
    config : ExecutionConfig | None
        Settings for created data sources. Defaults to ExecutionConfig().

    Examples
    --------
    >>> ctx = ExecutionContext()
    >>> df = ctx.csv(schema([("column1", DType.INT64, False)]), "test.csv")
    >>> df.explain()
    'Scan: test.csv, projection=None\\n'
    """

    def __init__(self, config: ExecutionConfig | None = None) -> None:
        self.config = config if config is not None else ExecutionConfig()

    def csv(self, schema: Schema, path: str) -> DataFrame:
        """
        Create a DataFrame scanning a CSV file.

        Parameters
        ----------
        schema : Schema
            Schema of the file's columns, in file order.
        path : str
            Path of the file. It is not opened until the source is scanned.

        Returns
        -------
        DataFrame
            A DataFrame over a Scan with an empty projection.

        Raises
        ------
        ValueError
            If the schema repeats a column name.
        """
        duplicates = schema.duplicate_names()
        if duplicates:
            raise ValueError(f"Duplicate column names: {set(duplicates)}")

        source = CsvDataSource(
            schema,
            path,
            batch_size=self.config.batch_size,
            has_header=self.config.has_header,
            delimiter=self.config.delimiter,
        )
        logger.debug(f"Registered CSV source {path}")
        return DataFrame(Scan(path, schema, source, ()))
