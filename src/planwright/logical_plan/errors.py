"""
Exceptions raised while building or scanning planwright logical plans.

- PlanError: Base class for every planwright error
- UnknownColumnError: A column reference did not resolve to exactly one field
- DataSourceError: A data source failed to read or parse its backing file
"""

from __future__ import annotations


class PlanError(Exception):
    """Base class for errors raised by planwright."""


class UnknownColumnError(PlanError, KeyError):
    """
    Exception raised when a column name cannot be resolved against a schema.

    A lookup succeeds only when exactly one field carries the requested name,
    so both a missing column and an ambiguous one (the name appears more than
    once) raise this error.

    Attributes
    ----------
    column : str
        The column name that was looked up.
    available : tuple[str, ...]
        The field names of the schema the lookup ran against.
    ambiguous : bool
        True if the name matched more than one field.
    """

    def __init__(self, column: str, available: tuple[str, ...] = (), ambiguous: bool = False) -> None:
        self.column = column
        self.available = tuple(available)
        self.ambiguous = ambiguous
        if ambiguous:
            message = f"Ambiguous column: {column}"
        else:
            message = f"Column not found: {column}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class DataSourceError(PlanError):
    """
    Exception raised when a data source cannot produce its batches.

    Wraps I/O failures and malformed row content. The original exception is
    chained as ``__cause__``.

    Attributes
    ----------
    path : str
        Path of the backing file.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
