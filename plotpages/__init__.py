"""
plotpages: standalone interactive HTML pages from pandas DataFrames.

Pages hold visual elements (charts, pivot tables, tables, text, pictures) and
the datasets they read. Datasets are embedded in the page as CSV or JSON, or
written next to it as CSV, JSON or Parquet files; multi-page projects share
one ``data/`` directory.
"""

__version__ = "0.1.0"

from plotpages.exceptions import (
    AmbiguousIdentifierError,
    ConfigurationError,
    DuplicateIdentifierError,
    IdentifierError,
    MissingDatasetError,
    PlotPagesError,
    SchemaConflictError,
)
from plotpages.formats import DataFormat
from plotpages.settings import BuildSettings, get_settings, load_settings
from plotpages.sanitize import sanitize, sanitize_filename, sanitize_unique
from plotpages.data import Locator, describe_schema, read_dataset, serialize
from plotpages.scripts import ScriptLibrary, ScriptRegistry
from plotpages.elements import (
    Chart,
    Link,
    LinkList,
    Picture,
    PivotTable,
    RenderContext,
    Slides,
    Table,
    TextBlock,
    VisualElement,
)
from plotpages.pages import Page, Project
from plotpages.renderers import (
    BuildResult,
    PageBuilder,
    ProjectBuilder,
    ProjectResult,
    build_link_map,
    emit_launchers,
)
from plotpages.build import create_html, page_for_element

__all__ = [
    "__version__",
    # Errors
    "PlotPagesError",
    "ConfigurationError",
    "MissingDatasetError",
    "IdentifierError",
    "DuplicateIdentifierError",
    "AmbiguousIdentifierError",
    "SchemaConflictError",
    # Configuration
    "DataFormat",
    "BuildSettings",
    "get_settings",
    "load_settings",
    # Names and data
    "sanitize",
    "sanitize_filename",
    "sanitize_unique",
    "Locator",
    "describe_schema",
    "read_dataset",
    "serialize",
    # Scripts
    "ScriptLibrary",
    "ScriptRegistry",
    # Elements
    "VisualElement",
    "RenderContext",
    "Chart",
    "PivotTable",
    "Table",
    "TextBlock",
    "Link",
    "LinkList",
    "Picture",
    "Slides",
    # Pages and builders
    "Page",
    "Project",
    "BuildResult",
    "ProjectResult",
    "PageBuilder",
    "ProjectBuilder",
    "build_link_map",
    "emit_launchers",
    "create_html",
    "page_for_element",
]
