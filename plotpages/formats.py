"""
Data formats a page can store its datasets in.

Embedded formats put the data inside the HTML file; external formats write
one file per dataset to a ``data/`` directory next to the page.
"""

from enum import Enum

from plotpages.exceptions import ConfigurationError


class DataFormat(str, Enum):
    """How datasets are stored alongside (or inside) a generated page."""

    CSV_EMBEDDED = "csv_embedded"
    JSON_EMBEDDED = "json_embedded"
    CSV_EXTERNAL = "csv_external"
    JSON_EXTERNAL = "json_external"
    PARQUET = "parquet"

    @classmethod
    def parse(cls, value: "DataFormat | str") -> "DataFormat":
        """Resolve an enum member or its string value.

        Raises:
            ConfigurationError: If the value names no known format
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            allowed = ", ".join(f.value for f in cls)
            raise ConfigurationError(
                f"dataformat must be one of {allowed}; got {value!r}",
                option="dataformat",
                value=value,
            ) from None

    @property
    def is_embedded(self) -> bool:
        return self in (DataFormat.CSV_EMBEDDED, DataFormat.JSON_EMBEDDED)

    @property
    def is_external(self) -> bool:
        return not self.is_embedded

    @property
    def file_extension(self) -> str:
        """File extension of external files (also used to label embedded blobs)."""
        if self in (DataFormat.CSV_EMBEDDED, DataFormat.CSV_EXTERNAL):
            return "csv"
        if self in (DataFormat.JSON_EMBEDDED, DataFormat.JSON_EXTERNAL):
            return "json"
        return "parquet"
