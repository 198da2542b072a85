"""
Pytest configuration and shared fixtures for planwright tests.
"""

import pandas as pd
import pytest

from planwright import (
    CsvDataSource,
    DataFrame,
    DType,
    ExecutionContext,
    Scan,
    Schema,
    schema,
)


@pytest.fixture
def sample_schema() -> Schema:
    """Create the three Int64 column schema used across the tests."""
    return schema([
        ("column1", DType.INT64, False),
        ("column2", DType.INT64, False),
        ("column3", DType.INT64, False),
    ])


@pytest.fixture
def mixed_schema() -> Schema:
    """Create a schema with one field of every supported type."""
    return schema([
        ("id", DType.INT64, False),
        ("title", DType.UTF8, True),
        ("rating", DType.FLOAT64, True),
        ("is_classic", DType.BOOLEAN, False),
    ])


@pytest.fixture
def sample_dataframe() -> pd.DataFrame:
    """Create a sample pandas DataFrame for schema inference."""
    return pd.DataFrame({
        "id": [1, 2, 3],
        "title": ["The Matrix", "Inception", None],
        "rating": [8.7, 8.8, 8.6],
        "is_classic": [True, False, False],
    })


@pytest.fixture
def scan(sample_schema: Schema) -> Scan:
    """Create a Scan over test.csv; the file is never opened."""
    return Scan("test.csv", sample_schema, CsvDataSource(sample_schema, "test.csv"))


@pytest.fixture
def context() -> ExecutionContext:
    """Create an ExecutionContext with the default configuration."""
    return ExecutionContext()


@pytest.fixture
def base_df(context: ExecutionContext, sample_schema: Schema) -> DataFrame:
    """Create a DataFrame scanning test.csv."""
    return context.csv(sample_schema, "test.csv")


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper that writes lines to a CSV file and returns its path."""

    def _write(lines: list[str], name: str = "input.csv") -> str:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines))
        return str(path)

    return _write
