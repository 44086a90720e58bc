"""
Registry of the JavaScript libraries a page may include.

Elements declare the libraries they need by name. The page builder asks the
registry to resolve the union of those names into ``<script>``/``<link>`` tags
in a fixed order: registered libraries in registration order first, then
ad-hoc ScriptLibrary objects in the order elements first declared them.
Each library appears once, because including e.g. jQuery twice resets plugins
attached to the first copy.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptLibrary:
    """A named JS/CSS dependency and the head tags that load it."""

    name: str
    tags: tuple[str, ...]

    @classmethod
    def from_urls(cls, name: str, *urls: str) -> "ScriptLibrary":
        """Build a library from script (``.js``) and stylesheet (``.css``) URLs."""
        tags = []
        for url in urls:
            if url.endswith(".css"):
                tags.append(f'<link rel="stylesheet" href="{url}">')
            else:
                tags.append(f'<script src="{url}"></script>')
        return cls(name, tuple(tags))


# =============================================================================
# BUILT-IN LIBRARIES
# =============================================================================

JQUERY = "jquery"
JQUERY_UI = "jquery-ui"
D3 = "d3"
C3 = "c3"
PIVOTTABLE = "pivottable"
PLOTLY = "plotly"
LEAFLET = "leaflet"
PRISM = "prism"
PAPAPARSE = "papaparse"

_CDNJS = "https://cdnjs.cloudflare.com/ajax/libs"

BUILTIN_LIBRARIES: tuple[ScriptLibrary, ...] = (
    ScriptLibrary.from_urls(JQUERY, f"{_CDNJS}/jquery/3.7.1/jquery.min.js"),
    ScriptLibrary.from_urls(JQUERY_UI, f"{_CDNJS}/jqueryui/1.13.2/jquery-ui.min.js"),
    # pivottable's d3/c3 renderers still use the d3 v3 API
    ScriptLibrary.from_urls(D3, f"{_CDNJS}/d3/3.5.17/d3.min.js"),
    ScriptLibrary.from_urls(
        C3,
        f"{_CDNJS}/c3/0.4.24/c3.min.css",
        f"{_CDNJS}/c3/0.4.24/c3.min.js",
    ),
    ScriptLibrary.from_urls(
        PIVOTTABLE,
        f"{_CDNJS}/pivottable/2.23.0/pivot.min.css",
        f"{_CDNJS}/pivottable/2.23.0/pivot.min.js",
        f"{_CDNJS}/pivottable/2.23.0/d3_renderers.min.js",
        f"{_CDNJS}/pivottable/2.23.0/c3_renderers.min.js",
        f"{_CDNJS}/pivottable/2.23.0/export_renderers.min.js",
    ),
    ScriptLibrary.from_urls(PLOTLY, "https://cdn.plot.ly/plotly-2.35.2.min.js"),
    ScriptLibrary.from_urls(
        LEAFLET,
        "https://unpkg.com/leaflet@1.9.4/dist/leaflet.css",
        "https://unpkg.com/leaflet@1.9.4/dist/leaflet.js",
    ),
    ScriptLibrary.from_urls(
        PRISM,
        f"{_CDNJS}/prism/1.29.0/themes/prism.min.css",
        f"{_CDNJS}/prism/1.29.0/prism.min.js",
    ),
    ScriptLibrary.from_urls(PAPAPARSE, f"{_CDNJS}/PapaParse/5.4.1/papaparse.min.js"),
)

# Loaded as an ES module; exposes window.parquetWasm and window.Arrow to loadDataset
PARQUET_LOADER = """<script type="module">
    import * as arrow from "https://cdn.jsdelivr.net/npm/apache-arrow@17.0.0/+esm";
    import initWasm, * as parquetWasm from "https://cdn.jsdelivr.net/npm/parquet-wasm@0.6.1/esm/parquet_wasm.js";
    await initWasm();
    window.Arrow = arrow;
    window.parquetWasm = parquetWasm;
    window.dispatchEvent(new Event("parquet-ready"));
</script>"""


# =============================================================================
# REGISTRY
# =============================================================================


class ScriptRegistry:
    """Ordered set of known libraries, owned by a page builder."""

    def __init__(self, libraries: Iterable[ScriptLibrary] = BUILTIN_LIBRARIES) -> None:
        self._libraries: dict[str, ScriptLibrary] = {}
        for library in libraries:
            self.register(library)

    def register(self, library: ScriptLibrary) -> None:
        """Add a library after all previously registered ones."""
        if library.name in self._libraries:
            raise ConfigurationError(
                f"Script library {library.name!r} is already registered",
                option="scripts",
                value=library.name,
            )
        self._libraries[library.name] = library

    def __contains__(self, name: str) -> bool:
        return name in self._libraries

    @property
    def names(self) -> list[str]:
        return list(self._libraries)

    def resolve(self, requested: Iterable[str | ScriptLibrary]) -> list[ScriptLibrary]:
        """Deduplicate and order requested libraries.

        Args:
            requested: Library names or ScriptLibrary objects, in declaration order

        Returns:
            Registered libraries in priority order, then unregistered ones in
            first-declaration order

        Raises:
            ConfigurationError: If a name is neither registered nor given as a ScriptLibrary
        """
        wanted: set[str] = set()
        extra: dict[str, ScriptLibrary] = {}

        for item in requested:
            if isinstance(item, ScriptLibrary):
                if item.name in self._libraries:
                    wanted.add(item.name)
                else:
                    extra.setdefault(item.name, item)
            elif item in self._libraries:
                wanted.add(item)
            else:
                raise ConfigurationError(
                    f"Unknown script library {item!r}; known: {', '.join(self._libraries)}",
                    option="scripts",
                    value=item,
                )

        ordered = [lib for name, lib in self._libraries.items() if name in wanted]
        ordered.extend(extra.values())
        logger.debug(f"Resolved scripts: {[lib.name for lib in ordered]}")
        return ordered

    def head_html(
        self,
        requested: Sequence[str | ScriptLibrary],
        dataformat: DataFormat,
    ) -> str:
        """Render the head tags for a page, including what its data format needs."""
        names: list[str | ScriptLibrary] = list(requested)
        if dataformat in (DataFormat.CSV_EMBEDDED, DataFormat.CSV_EXTERNAL):
            names.append(PAPAPARSE)

        tags = [tag for lib in self.resolve(names) for tag in lib.tags]
        if dataformat is DataFormat.PARQUET:
            tags.append(PARQUET_LOADER)
        return "\n".join(f"    {tag}" for tag in tags)
