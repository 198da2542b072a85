"""
Data sources consumed by Scan nodes.

A data source reports the schema of its rows and produces them as column
batches (pandas DataFrames) restricted to a projection. The logical plan
never reads data itself; it only holds the source a Scan is bound to.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

import pandas as pd

from planwright.logical_plan.errors import DataSourceError
from planwright.logical_plan.types import Schema

logger = logging.getLogger(__name__)


class DataSource(ABC):
    """
    Abstract provider of column batches.
    """

    @abstractmethod
    def schema(self) -> Schema:
        """
        Return the schema of the rows this source produces.

        Returns
        -------
        Schema
            The source schema.
        """

    @abstractmethod
    def scan(self, projection: Iterable[str]) -> list[pd.DataFrame]:
        """
        Read every row of the source.

        Parameters
        ----------
        projection : Iterable[str]
            Column names to read. Empty means every column.

        Returns
        -------
        list[pd.DataFrame]
            The complete set of batches, each holding the projected columns.

        Raises
        ------
        UnknownColumnError
            If a projected name is not in the schema.
        DataSourceError
            If the source cannot be read or parsed.
        """


class CsvDataSource(DataSource):
    """
    A headerless (by default) delimited text file read with pandas.

    Parameters
    ----------
    schema : Schema
        Schema of the file's columns, in file order.
    path : str
        Path of the file.
    batch_size : int
        Maximum number of rows per batch.
    has_header : bool
        Whether the first line holds column names and must be skipped.
    delimiter : str
        Field delimiter.

    Examples
    --------
    >>> source = CsvDataSource(s, "input.csv")
    >>> batches = source.scan(["column1", "column3"])
    >>> batches[0].columns.tolist()
    ['column1', 'column3']
    """

    def __init__(
        self,
        schema: Schema,
        path: str,
        batch_size: int = 1024,
        has_header: bool = False,
        delimiter: str = ",",
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._schema = schema
        self.path = path
        self.batch_size = batch_size
        self.has_header = has_header
        self.delimiter = delimiter

    def schema(self) -> Schema:
        return self._schema

    def scan(self, projection: Iterable[str]) -> list[pd.DataFrame]:
        wanted = set(projection)
        for name in wanted:
            self._schema.field(name)

        # columns come back in file order, not projection order
        names = [f.name for f in self._schema if not wanted or f.name in wanted]
        expected = self._schema.select(names)

        # every column is read by position so rows of the wrong width are
        # detected before the projection is applied
        dtypes = {i: f.dtype.to_pandas_dtype(f.nullable) for i, f in enumerate(self._schema)}

        logger.debug(f"Scanning {self.path} for columns {names}")
        try:
            with pd.read_csv(
                self.path,
                sep=self.delimiter,
                header=None,
                skiprows=1 if self.has_header else 0,
                dtype=dtypes,
                on_bad_lines="error",
                chunksize=self.batch_size,
            ) as reader:
                batches = []
                for chunk in reader:
                    if not len(chunk):
                        continue
                    self._check_width(chunk)
                    chunk.columns = self._schema.field_names()
                    batch = chunk[names].reset_index(drop=True)
                    self._check_batch(batch, expected)
                    batches.append(batch)
        except pd.errors.EmptyDataError:
            logger.debug(f"{self.path} is empty")
            return []
        except (OSError, ValueError, TypeError) as e:
            raise DataSourceError(self.path, str(e)) from e

        logger.debug(f"Read {len(batches)} batches from {self.path}")
        return batches

    def _check_width(self, chunk: pd.DataFrame) -> None:
        """Reject rows whose field count differs from the schema."""
        if chunk.shape[1] != len(self._schema):
            raise DataSourceError(
                self.path,
                f"expected {len(self._schema)} fields per row, found {chunk.shape[1]}",
            )

    def _check_batch(self, batch: pd.DataFrame, expected: Schema) -> None:
        """Reject batches that do not conform to the projected schema."""
        for f in expected:
            if not f.nullable and batch[f.name].isna().any():
                raise DataSourceError(self.path, f"missing value in non-nullable column {f.name}")
        actual = Schema.from_dataframe(batch)
        if actual.dtypes() != expected.dtypes():
            raise DataSourceError(
                self.path,
                f"parsed types {[d.value for d in actual.dtypes()]} do not match "
                f"declared types {[d.value for d in expected.dtypes()]}",
            )

    def __repr__(self) -> str:
        return f"CsvDataSource(path={self.path!r}, fields={self._schema.field_names()})"
