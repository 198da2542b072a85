"""
Core type definitions for the planwright logical plan.

This module defines the fundamental types used throughout the plan model:
- DType: Enumeration of supported data types
- Field: A named, typed, nullable-flagged column
- Schema: Ordered collection of fields
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

import numpy as np
import pandas as pd

from planwright.logical_plan.errors import UnknownColumnError


class DType(Enum):
    """
    All supported data types for columns in planwright.

    These types map to pandas/numpy dtypes when a data source parses a file,
    and are used for schema derivation in the logical plan.
    """

    UTF8 = "utf8"
    INT64 = "int64"
    BOOLEAN = "boolean"
    FLOAT64 = "float64"

    @classmethod
    def from_pandas_dtype(cls, dtype: np.dtype) -> DType:
        """
        Infer DType from a pandas/numpy dtype.

        Parameters
        ----------
        dtype : np.dtype
            A pandas or numpy dtype object.

        Returns
        -------
        DType
            The corresponding planwright DType.

        Raises
        ------
        ValueError
            If the dtype cannot be mapped to a supported DType.
        """
        dtype_str = str(dtype).lower()

        if "int" in dtype_str:
            return cls.INT64
        elif "float" in dtype_str:
            return cls.FLOAT64
        elif "bool" in dtype_str:
            return cls.BOOLEAN
        elif "object" in dtype_str or "string" in dtype_str:
            return cls.UTF8
        else:
            raise ValueError(f"Unsupported pandas dtype: {dtype}")

    def to_pandas_dtype(self, nullable: bool = False) -> str:
        """
        Return the pandas dtype used to parse a column of this type.

        Parameters
        ----------
        nullable : bool
            Whether the column may hold missing values. Nullable columns use
            the pandas extension types so that integers and booleans survive
            missing cells.

        Returns
        -------
        str
            A dtype string accepted by ``pandas.read_csv``.
        """
        if nullable:
            mapping = {
                DType.UTF8: "string",
                DType.INT64: "Int64",
                DType.BOOLEAN: "boolean",
                DType.FLOAT64: "Float64",
            }
        else:
            mapping = {
                DType.UTF8: "string",
                DType.INT64: "int64",
                DType.BOOLEAN: "bool",
                DType.FLOAT64: "float64",
            }
        return mapping[self]


@dataclass(frozen=True)
class Field:
    """
    A single named column of a schema.

    Parameters
    ----------
    name : str
        The column name.
    dtype : DType
        The column data type.
    nullable : bool
        Whether the column may contain missing values.

    Examples
    --------
    >>> Field("id", DType.INT64)
    Field(name='id', dtype=<DType.INT64: 'int64'>, nullable=False)
    """

    name: str
    dtype: DType
    nullable: bool = False

    def __str__(self) -> str:
        suffix = "" if not self.nullable else ", nullable"
        return f"{self.name}: {self.dtype.value}{suffix}"


@dataclass(frozen=True)
class Schema:
    """
    An ordered collection of fields.

    Schema is immutable and represents the shape of a relation. Field order
    is preserved and defines output column order.

    Schemas derived by plan nodes may repeat a name (for example two
    literals with the same value). Such a name can no longer be looked up;
    see `field`.

    Parameters
    ----------
    fields : tuple[Field, ...]
        Ordered sequence of fields.

    Examples
    --------
    >>> schema = Schema((Field("id", DType.INT64), Field("name", DType.UTF8)))
    >>> schema.field_names()
    ['id', 'name']
    >>> schema.field("name").dtype
    <DType.UTF8: 'utf8'>
    """

    fields: tuple[Field, ...] = ()

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> Schema:
        """
        Infer schema from a pandas DataFrame.

        Columns holding missing values are marked nullable.

        Parameters
        ----------
        df : pd.DataFrame
            The DataFrame to extract schema from.

        Returns
        -------
        Schema
            A Schema object representing the DataFrame's structure.
        """
        return cls(
            tuple(
                Field(str(name), DType.from_pandas_dtype(df[name].dtype), bool(df[name].isna().any()))
                for name in df.columns
            )
        )

    @classmethod
    def from_dict(cls, d: dict[str, DType | str], nullable: bool = False) -> Schema:
        """
        Create schema from a dictionary.

        Parameters
        ----------
        d : dict[str, DType | str]
            Mapping of column names to types. Types can be DType enums
            or their string values like "int64", "utf8", etc.
        nullable : bool
            Nullability applied to every field.

        Returns
        -------
        Schema
            A Schema object.

        Examples
        --------
        >>> schema = Schema.from_dict({"id": DType.INT64, "name": "utf8"})
        """
        fields = []
        for name, dtype in d.items():
            if isinstance(dtype, str):
                dtype = DType(dtype)
            fields.append(Field(name, dtype, nullable))
        return cls(tuple(fields))

    def field_names(self) -> list[str]:
        """
        Return list of field names in order.

        Returns
        -------
        list[str]
            Ordered list of field names.
        """
        return [f.name for f in self.fields]

    def dtypes(self) -> list[DType]:
        """
        Return list of field dtypes in order.

        Returns
        -------
        list[DType]
            Ordered list of field dtypes.
        """
        return [f.dtype for f in self.fields]

    def field(self, name: str) -> Field:
        """
        Look up the single field with the given name.

        Parameters
        ----------
        name : str
            Field name.

        Returns
        -------
        Field
            The matching field, unchanged.

        Raises
        ------
        UnknownColumnError
            If no field, or more than one field, has this name.
        """
        matches = [f for f in self.fields if f.name == name]
        if len(matches) != 1:
            raise UnknownColumnError(name, tuple(self.field_names()), ambiguous=len(matches) > 1)
        return matches[0]

    def has_column(self, name: str) -> bool:
        """
        Check if a field with this name exists in the schema.

        Parameters
        ----------
        name : str
            Field name to check.

        Returns
        -------
        bool
            True if at least one field has this name.
        """
        return name in self.field_names()

    def duplicate_names(self) -> list[str]:
        """
        Return the names that appear more than once, in first-seen order.

        Returns
        -------
        list[str]
            Repeated field names. Empty when every name is unique.
        """
        counts = Counter(self.field_names())
        return [name for name in counts if counts[name] > 1]

    def select(self, names: Iterable[str]) -> Schema:
        """
        Project schema to a subset of fields.

        Parameters
        ----------
        names : Iterable[str]
            Field names to keep, in the desired order.

        Returns
        -------
        Schema
            A new Schema with only the specified fields.

        Raises
        ------
        UnknownColumnError
            If any name does not resolve to exactly one field.
        """
        return Schema(tuple(self.field(name) for name in names))

    def to_dict(self) -> dict[str, str]:
        """
        Convert schema to a dictionary (for display and serialization).

        Returns
        -------
        dict[str, str]
            Mapping of field names to dtype string values.
        """
        return {f.name: f.dtype.value for f in self.fields}

    def __len__(self) -> int:
        """Return the number of fields."""
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        """Iterate over fields."""
        return iter(self.fields)

    def __contains__(self, name: str) -> bool:
        """Check if a field name exists."""
        return self.has_column(name)

    def __str__(self) -> str:
        return "\n".join(str(f) for f in self.fields)


def schema(fields: Iterable[tuple[str, DType | str, bool]]) -> Schema:
    """
    Build a schema from ``(name, dtype, nullable)`` tuples.

    Parameters
    ----------
    fields : Iterable[tuple[str, DType | str, bool]]
        One tuple per field. The dtype may be a DType or its string value.

    Returns
    -------
    Schema
        The schema, with fields in the given order.

    Examples
    --------
    >>> s = schema([
    ...     ("column1", DType.INT64, False),
    ...     ("column2", "utf8", True),
    ... ])
    >>> s.field_names()
    ['column1', 'column2']
    """
    result = []
    for name, dtype, nullable in fields:
        if isinstance(dtype, str):
            dtype = DType(dtype)
        result.append(Field(name, dtype, nullable))
    return Schema(tuple(result))
