"""
Dataset model: data formats, logical column types and schema description.

A dataset is a pandas DataFrame. This module describes its columns in a
format-independent way so the project builder can tell whether two pages that
use the same dataset name really mean the same table.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import pandas as pd
from pandas.api import types as ptypes

from plotpages.exceptions import ConfigurationError


# =============================================================================
# ENUMS
# =============================================================================


class ColumnType(str, Enum):
    """Logical column types, independent of the storage format."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    DATE = "date"
    BOOLEAN = "boolean"
    CATEGORICAL = "categorical"
    MISSING = "missing"  # every value is missing, no type can be inferred


# =============================================================================
# SCHEMA
# =============================================================================


@dataclass(frozen=True)
class ColumnSchema:
    """Name and logical type of one column."""

    name: str
    column_type: ColumnType

    def __str__(self) -> str:
        return f"{self.name}:{self.column_type.value}"


_INFERRED_TYPES = {
    "string": ColumnType.STRING,
    "bytes": ColumnType.STRING,
    "integer": ColumnType.INTEGER,
    "floating": ColumnType.FLOAT,
    "mixed-integer-float": ColumnType.FLOAT,
    "decimal": ColumnType.FLOAT,
    "boolean": ColumnType.BOOLEAN,
    "date": ColumnType.DATE,
    "datetime": ColumnType.DATE,
    "datetime64": ColumnType.DATE,
    "empty": ColumnType.MISSING,
}


def column_type_of(series: pd.Series) -> ColumnType:
    """Derive the logical type of a column from its dtype (and values for object columns)."""
    dtype = series.dtype

    if isinstance(dtype, pd.CategoricalDtype):
        return ColumnType.CATEGORICAL
    if ptypes.is_bool_dtype(dtype):
        return ColumnType.BOOLEAN
    if ptypes.is_integer_dtype(dtype):
        return ColumnType.INTEGER
    if ptypes.is_float_dtype(dtype):
        return ColumnType.FLOAT
    if ptypes.is_datetime64_any_dtype(dtype):
        return ColumnType.DATE

    inferred = ptypes.infer_dtype(series, skipna=True)
    return _INFERRED_TYPES.get(inferred, ColumnType.STRING)


def describe_schema(df: pd.DataFrame) -> tuple[ColumnSchema, ...]:
    """Describe a dataset's columns in order.

    Args:
        df: Dataset to describe

    Returns:
        One ColumnSchema per column, in column order
    """
    return tuple(
        ColumnSchema(name=str(name), column_type=column_type_of(df[name]))
        for name in df.columns
    )


def coerce_dataset(name: str, value: Any) -> pd.DataFrame:
    """Accept a DataFrame, or a mapping of column name to values.

    Raises:
        ConfigurationError: If the value cannot be read as a table
    """
    if isinstance(value, pd.DataFrame):
        return value
    if isinstance(value, Mapping):
        try:
            return pd.DataFrame(dict(value))
        except ValueError as e:
            raise ConfigurationError(
                f"Dataset {name!r} is not a rectangular table: {e}",
                option="datasets",
                value=name,
            ) from e
    raise ConfigurationError(
        f"Dataset {name!r} must be a pandas DataFrame or a mapping of columns, "
        f"got {type(value).__name__}",
        option="datasets",
        value=name,
    )


def normalize_for_output(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy-on-need of ``df`` with timezone-aware columns as naive UTC.

    The caller's DataFrame is never modified.
    """
    tz_columns = [
        name for name in df.columns
        if isinstance(df[name].dtype, pd.DatetimeTZDtype)
    ]
    if not tz_columns:
        return df

    converted = df.copy()
    for name in tz_columns:
        converted[name] = converted[name].dt.tz_convert("UTC").dt.tz_localize(None)
    return converted


def estimate_bytes(df: pd.DataFrame) -> int:
    """In-memory size of a dataset, used for the oversized-embed warning."""
    if df.shape[1] == 0:
        return 0
    return int(df.memory_usage(deep=True, index=False).sum())
