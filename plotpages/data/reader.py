"""
Read datasets back out of generated pages.

This is the Python counterpart of the page's ``loadDataset`` JavaScript: it
finds the ``data-format`` marker for a dataset and decodes the inline blob or
the referenced file into a DataFrame.
"""

import html
import json
import re
from dataclasses import dataclass
from io import StringIO
from pathlib import Path

import pandas as pd

from plotpages.exceptions import ConfigurationError, MissingDatasetError
from plotpages.formats import DataFormat
from plotpages.html_utils import decode_script_data

_MARKER = re.compile(
    r'<script type="text/plain" id="(?P<element_id>[^"]*)" '
    r'data-name="(?P<name>[^"]*)" '
    r'data-format="(?P<format>[^"]*)" '
    r'data-src="(?P<src>[^"]*)">(?P<body>.*?)</script>',
    re.DOTALL,
)


@dataclass(frozen=True)
class DataMarker:
    """One dataset marker found in a page."""

    element_id: str
    dataset_name: str
    dataformat: DataFormat
    src: str
    body: str


def find_data_markers(page_html: str) -> dict[str, DataMarker]:
    """Map dataset name to its marker for every dataset in a page."""
    markers: dict[str, DataMarker] = {}
    for match in _MARKER.finditer(page_html):
        name = html.unescape(match.group("name"))
        markers[name] = DataMarker(
            element_id=match.group("element_id"),
            dataset_name=name,
            dataformat=DataFormat.parse(match.group("format")),
            src=html.unescape(match.group("src")),
            body=match.group("body"),
        )
    return markers


def parse_csv_text(text: str) -> pd.DataFrame:
    """Parse an embedded CSV blob; empty text is an empty table."""
    text = text.strip("\n")
    if not text:
        return pd.DataFrame()
    return pd.read_csv(StringIO(text))


def parse_json_text(text: str) -> pd.DataFrame:
    """Parse a JSON array of row objects."""
    records = json.loads(text)
    if not isinstance(records, list):
        raise ConfigurationError(
            "JSON dataset must be an array of objects",
            option="dataformat",
            value=type(records).__name__,
        )
    return pd.DataFrame.from_records(records)


def read_marker(marker: DataMarker, base_dir: Path | str | None = None) -> pd.DataFrame:
    """Decode the dataset a marker points at.

    Args:
        marker: Marker found by ``find_data_markers``
        base_dir: Directory of the page, used to resolve external files

    Returns:
        The dataset as a DataFrame
    """
    fmt = marker.dataformat

    if fmt is DataFormat.CSV_EMBEDDED:
        return parse_csv_text(decode_script_data(marker.body))
    if fmt is DataFormat.JSON_EMBEDDED:
        return parse_json_text(marker.body.strip() or "[]")

    path = Path(base_dir or ".") / marker.src
    if fmt is DataFormat.CSV_EXTERNAL:
        return parse_csv_text(path.read_text(encoding="utf-8"))
    if fmt is DataFormat.JSON_EXTERNAL:
        return parse_json_text(path.read_text(encoding="utf-8"))
    return pd.read_parquet(path, engine="pyarrow")


def read_dataset(html_path: Path | str, name: str) -> pd.DataFrame:
    """Load a named dataset from a generated page on disk.

    Raises:
        MissingDatasetError: If the page has no marker for ``name``
    """
    html_path = Path(html_path)
    markers = find_data_markers(html_path.read_text(encoding="utf-8"))
    if name not in markers:
        raise MissingDatasetError(
            f"Page {html_path.name} holds no dataset named {name!r}",
            dataset_name=name,
            context={"available": sorted(markers)},
        )
    return read_marker(markers[name], html_path.parent)
