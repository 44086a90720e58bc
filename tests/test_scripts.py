"""
Tests for the script library registry.
"""

import pytest

from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat
from plotpages.scripts import (
    BUILTIN_LIBRARIES,
    C3,
    D3,
    JQUERY,
    PAPAPARSE,
    PARQUET_LOADER,
    PIVOTTABLE,
    PLOTLY,
    ScriptLibrary,
    ScriptRegistry,
)


@pytest.fixture
def registry() -> ScriptRegistry:
    return ScriptRegistry()


# =============================================================================
# RESOLUTION TESTS
# =============================================================================


class TestResolve:
    """Tests for ScriptRegistry.resolve()."""

    def test_each_library_once(self, registry: ScriptRegistry) -> None:
        resolved = registry.resolve([PLOTLY, PLOTLY, JQUERY, PLOTLY])
        assert [lib.name for lib in resolved] == [JQUERY, PLOTLY]

    def test_priority_order_independent_of_request_order(self, registry: ScriptRegistry) -> None:
        first = registry.resolve([PIVOTTABLE, C3, D3, JQUERY])
        second = registry.resolve([JQUERY, D3, C3, PIVOTTABLE])

        assert first == second
        assert [lib.name for lib in first] == [JQUERY, D3, C3, PIVOTTABLE]

    def test_custom_libraries_after_known_in_declaration_order(self, registry: ScriptRegistry) -> None:
        vega = ScriptLibrary.from_urls("vega", "https://cdn.example.org/vega.js")
        katex = ScriptLibrary.from_urls("katex", "https://cdn.example.org/katex.css")

        resolved = registry.resolve([katex, PLOTLY, vega, katex, JQUERY])

        assert [lib.name for lib in resolved] == [JQUERY, PLOTLY, "katex", "vega"]

    def test_unknown_name_rejected(self, registry: ScriptRegistry) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            registry.resolve(["mathjax"])
        assert exc_info.value.option == "scripts"

    def test_register_duplicate_rejected(self, registry: ScriptRegistry) -> None:
        with pytest.raises(ConfigurationError):
            registry.register(ScriptLibrary(JQUERY, ()))

    def test_registered_library_gets_priority(self) -> None:
        registry = ScriptRegistry([])
        registry.register(ScriptLibrary("b", ("<b>",)))
        registry.register(ScriptLibrary("a", ("<a>",)))

        assert [lib.name for lib in registry.resolve(["a", "b"])] == ["b", "a"]
        assert "a" in registry
        assert registry.names == ["b", "a"]

    def test_builtins_registered(self, registry: ScriptRegistry) -> None:
        assert registry.names == [lib.name for lib in BUILTIN_LIBRARIES]


# =============================================================================
# HEAD HTML TESTS
# =============================================================================


class TestHeadHtml:
    """Tests for ScriptRegistry.head_html()."""

    def test_from_urls_tags(self) -> None:
        lib = ScriptLibrary.from_urls("x", "https://e.org/x.css", "https://e.org/x.js")
        assert lib.tags == (
            '<link rel="stylesheet" href="https://e.org/x.css">',
            '<script src="https://e.org/x.js"></script>',
        )

    @pytest.mark.parametrize("dataformat", [DataFormat.CSV_EMBEDDED, DataFormat.CSV_EXTERNAL])
    def test_csv_adds_papaparse(self, registry: ScriptRegistry, dataformat: DataFormat) -> None:
        head = registry.head_html([PLOTLY], dataformat)
        assert "papaparse" in head.lower()
        assert PARQUET_LOADER not in head

    def test_parquet_adds_loader(self, registry: ScriptRegistry) -> None:
        head = registry.head_html([PLOTLY], DataFormat.PARQUET)

        assert "parquet-wasm" in head
        assert "apache-arrow" in head
        assert "papaparse" not in head.lower()

    def test_json_adds_nothing(self, registry: ScriptRegistry) -> None:
        head = registry.head_html([], DataFormat.JSON_EMBEDDED)
        assert head == ""

    def test_papaparse_not_duplicated(self, registry: ScriptRegistry) -> None:
        head = registry.head_html([PAPAPARSE], DataFormat.CSV_EMBEDDED)
        assert head.lower().count("papaparse.min.js") == 1
