"""
Data module for plotpages.

Contains the dataset schema description, the serializer for the five data
formats, and a reader that loads datasets back out of generated pages.
"""

from plotpages.data.schema import (
    ColumnSchema,
    ColumnType,
    coerce_dataset,
    column_type_of,
    describe_schema,
)
from plotpages.data.serializer import Locator, serialize
from plotpages.data.reader import find_data_markers, read_dataset, read_marker

__all__ = [
    # Schema
    "ColumnSchema",
    "ColumnType",
    "coerce_dataset",
    "column_type_of",
    "describe_schema",
    # Serialization
    "Locator",
    "serialize",
    # Reading back
    "find_data_markers",
    "read_dataset",
    "read_marker",
]
