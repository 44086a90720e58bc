"""
Dataset serialization into the five supported data formats.

Embedded formats return their text blob inside the Locator; external formats
write ``data/<safe-name>.<ext>`` under the output directory and return the
relative path. Either way the page builder only ever deals with Locators.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from plotpages.data.schema import estimate_bytes, normalize_for_output
from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat
from plotpages.html_utils import encode_script_data, escape_json_for_script, escape_text
from plotpages.sanitize import sanitize
from plotpages.settings import BuildSettings, get_settings

logger = logging.getLogger(__name__)

DATA_DIRNAME = "data"
DATA_ELEMENT_PREFIX = "data_"


# =============================================================================
# LOCATOR
# =============================================================================


@dataclass(frozen=True)
class Locator:
    """Where a serialized dataset lives: inline blob or relative file path."""

    dataset_name: str
    safe_name: str
    dataformat: DataFormat
    blob: str | None = None
    path: str | None = None  # POSIX path relative to the page's directory

    @property
    def element_id(self) -> str:
        """DOM id of the marker element the viewer-side loader looks up."""
        return f"{DATA_ELEMENT_PREFIX}{self.safe_name}"

    @property
    def attribution(self) -> str:
        if self.dataformat.is_embedded:
            return f"Data: {self.dataset_name}"
        return f"Data: {self.dataset_name}.{self.dataformat.file_extension}"

    def to_html(self) -> str:
        """Render the marker element consumed by ``loadDataset`` in the page."""
        body = ""
        if self.blob:
            if self.dataformat is DataFormat.JSON_EMBEDDED:
                encoded = escape_json_for_script(self.blob)
            else:
                encoded = encode_script_data(self.blob)
            body = "\n" + encoded + "\n"
        return (
            f'<script type="text/plain" id="{self.element_id}" '
            f'data-name="{escape_text(self.dataset_name)}" '
            f'data-format="{self.dataformat.value}" '
            f'data-src="{escape_text(self.path or "")}">{body}</script>\n'
        )


# =============================================================================
# TEXT ENCODINGS
# =============================================================================


def to_csv_text(df: pd.DataFrame) -> str:
    """CSV with a header row; missing values are empty fields."""
    if df.shape[1] == 0:
        return ""
    return df.to_csv(index=False, na_rep="", lineterminator="\n")


def to_json_text(df: pd.DataFrame, indent: int | None = 2) -> str:
    """JSON array of row objects; missing values are ``null``, dates ISO-8601."""
    if df.shape[1] == 0 or len(df) == 0:
        return "[]"
    return df.to_json(
        orient="records",
        date_format="iso",
        indent=indent,
        force_ascii=False,
        default_handler=str,
    )


# =============================================================================
# SERIALIZATION
# =============================================================================


def data_file_path(safe_name: str, dataformat: DataFormat) -> str:
    """Relative POSIX path of an external data file."""
    return f"{DATA_DIRNAME}/{safe_name}.{dataformat.file_extension}"


def serialize(
    dataset: pd.DataFrame,
    dataformat: DataFormat | str,
    name: str,
    *,
    output_dir: Path | str | None = None,
    safe_name: str | None = None,
    settings: BuildSettings | None = None,
) -> Locator:
    """Serialize one dataset.

    Args:
        dataset: The table to serialize (left untouched)
        dataformat: Target format
        name: Dataset name as referenced by the page's elements
        output_dir: Directory of the HTML file; required for external formats
        safe_name: Precomputed sanitized name (defaults to ``sanitize(name)``)
        settings: Build settings (defaults to ``get_settings()``)

    Returns:
        Locator with the inline blob or the relative file path

    Raises:
        ConfigurationError: Unknown format, or external format without output_dir
    """
    dataformat = DataFormat.parse(dataformat)
    settings = settings or get_settings()
    safe_name = safe_name or sanitize(name)
    df = normalize_for_output(dataset)

    if dataformat.is_embedded:
        size = estimate_bytes(df)
        if size > settings.embed_warning_bytes:
            logger.warning(
                f"Embedding dataset '{name}' ({size / 1_048_576:.1f} MB) will slow page loading; "
                f"consider dataformat='parquet'"
            )
        if dataformat is DataFormat.CSV_EMBEDDED:
            blob = to_csv_text(df)
        else:
            blob = to_json_text(df, settings.json_indent)
        return Locator(name, safe_name, dataformat, blob=blob)

    if output_dir is None:
        raise ConfigurationError(
            f"dataformat '{dataformat.value}' writes files and needs an output directory",
            option="output_dir",
            value=name,
        )

    relative = data_file_path(safe_name, dataformat)
    target = Path(output_dir) / relative
    target.parent.mkdir(parents=True, exist_ok=True)

    if dataformat is DataFormat.CSV_EXTERNAL:
        target.write_text(to_csv_text(df), encoding="utf-8")
    elif dataformat is DataFormat.JSON_EXTERNAL:
        target.write_text(to_json_text(df, settings.json_indent), encoding="utf-8")
    else:
        df.to_parquet(
            target,
            engine="pyarrow",
            compression=settings.parquet_compression,
            index=False,
        )

    logger.info(f"Data saved to {target}")
    return Locator(name, safe_name, dataformat, path=relative)
