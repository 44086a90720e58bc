"""
Tests for the page builder.

Tests cover:
- Validation before any write
- Embedded single-file layout
- External directory layout
- Escaping of page-level text
- Script inclusion and attribution
"""

from pathlib import Path

import html5lib
import pandas as pd
import pytest

from plotpages import (
    Chart,
    Page,
    PageBuilder,
    Picture,
    PivotTable,
    ScriptLibrary,
    ScriptRegistry,
    Table,
    TextBlock,
    __version__,
)
from plotpages.exceptions import (
    AmbiguousIdentifierError,
    ConfigurationError,
    DuplicateIdentifierError,
    MissingDatasetError,
)
from plotpages.html_utils import SEGMENT_SEPARATOR
from plotpages.settings import BuildSettings


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def xy_df() -> pd.DataFrame:
    return pd.DataFrame({"x": [1, 2, 3], "y": [10, 20, 30]})


@pytest.fixture
def builder() -> PageBuilder:
    return PageBuilder(BuildSettings())


def chart_page(df: pd.DataFrame, dataformat: str = "csv_embedded", **kwargs) -> Page:
    return Page(
        elements=[Chart("chart", "points", x="x", y="y")],
        datasets={"points": df},
        dataformat=dataformat,
        **kwargs,
    )


# =============================================================================
# PAGE MODEL TESTS
# =============================================================================


class TestPage:
    """Tests for the Page model."""

    def test_invalid_format_at_construction(self) -> None:
        with pytest.raises(ConfigurationError):
            Page(elements=[], dataformat="yaml")

    def test_mapping_dataset_coerced(self) -> None:
        page = Page(elements=[], datasets={"d": {"x": [1, 2]}})
        assert isinstance(page.datasets["d"], pd.DataFrame)

    def test_non_string_dataset_name(self) -> None:
        with pytest.raises(ConfigurationError):
            Page(elements=[], datasets={1: pd.DataFrame()})

    def test_non_element_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            Page(elements=["<h1>hi</h1>"])

    def test_defaults_from_settings(self) -> None:
        page = Page(elements=[])
        assert page.dataformat.value == "csv_embedded"
        assert page.tab_title == "plotpages"

    def test_referenced_datasets(self, xy_df: pd.DataFrame) -> None:
        page = Page(
            elements=[Chart("a", "p", x="x", y="y"), Chart("b", "q", x="x", y="y"), Chart("c", "p", x="x", y="y")],
            datasets={"p": xy_df, "q": xy_df},
        )
        assert page.referenced_datasets() == ["p", "q"]


# =============================================================================
# VALIDATION TESTS
# =============================================================================


class TestValidation:
    """Validation errors are raised before anything is written."""

    def test_missing_dataset(self, builder: PageBuilder, tmp_path: Path) -> None:
        page = Page(elements=[Chart("chart", "absent", x="x", y="y")], dataformat="parquet")

        with pytest.raises(MissingDatasetError) as exc_info:
            builder.build(page, tmp_path / "out.html")

        assert exc_info.value.dataset_name == "absent"
        assert exc_info.value.element_id == "chart"
        assert list(tmp_path.iterdir()) == []

    def test_duplicate_identifier(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        page = Page(
            elements=[TextBlock("intro", "a"), TextBlock("intro", "b")],
            dataformat="csv_external",
        )
        with pytest.raises(DuplicateIdentifierError):
            builder.build(page, tmp_path / "out.html")
        assert list(tmp_path.iterdir()) == []

    def test_identifiers_colliding_after_sanitization(self, builder: PageBuilder, tmp_path: Path) -> None:
        page = Page(elements=[TextBlock("my block", "a"), TextBlock("my-block", "b")])

        with pytest.raises(DuplicateIdentifierError) as exc_info:
            builder.build(page, tmp_path / "out.html")
        assert exc_info.value.originals == ["my block", "my-block"]

    def test_dataset_names_colliding(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        page = Page(elements=[], datasets={"a.b": xy_df, "a b": xy_df}, dataformat="json_external")

        with pytest.raises(AmbiguousIdentifierError):
            builder.build(page, tmp_path / "out.html")
        assert list(tmp_path.iterdir()) == []

    def test_unknown_script(self, tmp_path: Path) -> None:
        class NeedsMathjax(TextBlock):
            def required_scripts(self) -> tuple[str, ...]:
                return ("mathjax",)

        page = Page(elements=[NeedsMathjax("m", "x")], dataformat="parquet")
        with pytest.raises(ConfigurationError):
            PageBuilder().build(page, tmp_path / "out.html")
        assert list(tmp_path.iterdir()) == []


# =============================================================================
# EMBEDDED LAYOUT TESTS
# =============================================================================


class TestEmbeddedBuild:
    """Embedded formats produce one self-contained file."""

    def test_single_file(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        result = builder.build(chart_page(xy_df), tmp_path / "report.html")

        assert result.html_paths == [tmp_path / "report.html"]
        assert result.project_dir is None
        assert result.data_files == []
        assert result.launcher_files == []
        assert [p.name for p in tmp_path.iterdir()] == ["report.html"]

    def test_content(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        html = builder.build(chart_page(xy_df), tmp_path / "report.html").html_path.read_text()

        assert html.count('data-format="csv_embedded"') == 1
        assert "x,y\n1,10\n2,20\n3,30" in html
        assert "plotly" in html
        assert "papaparse" in html.lower()
        assert "function loadDataset(name)" in html
        assert '"points": "data_points"' in html
        assert "Data: points" in html
        assert f"plotpages {__version__}" in html

    def test_creates_parent_directory(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        result = builder.build(chart_page(xy_df), tmp_path / "nested" / "dir" / "r.html")
        assert result.html_path.is_file()

    def test_elements_in_order_with_separator(self, builder: PageBuilder, tmp_path: Path) -> None:
        page = Page(elements=[TextBlock("first", "FIRST"), TextBlock("second", "SECOND")])
        html = builder.build(page, tmp_path / "p.html").html_path.read_text()

        assert html.index("FIRST") < html.index("SECOND")
        assert SEGMENT_SEPARATOR.strip() in html

    def test_overwrites_on_rebuild(self, builder: PageBuilder, tmp_path: Path) -> None:
        builder.build(Page(elements=[TextBlock("t", "OLD")]), tmp_path / "p.html")
        builder.build(Page(elements=[TextBlock("t", "NEW")]), tmp_path / "p.html")

        html = (tmp_path / "p.html").read_text()
        assert "NEW" in html
        assert "OLD" not in html


# =============================================================================
# EXTERNAL LAYOUT TESTS
# =============================================================================


class TestExternalBuild:
    """External formats produce a directory with data and launchers."""

    @pytest.mark.parametrize("dataformat,ext", [
        ("csv_external", "csv"),
        ("json_external", "json"),
        ("parquet", "parquet"),
    ])
    def test_layout(
        self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path, dataformat: str, ext: str
    ) -> None:
        result = builder.build(chart_page(xy_df, dataformat), tmp_path / "my report.html")
        project = tmp_path / "my_report"

        assert result.project_dir == project
        assert result.html_paths == [project / "my_report.html"]
        assert result.data_files == [project / "data" / f"points.{ext}"]
        assert sorted(p.name for p in result.launcher_files) == ["README.md", "open.bat", "open.sh"]
        assert result.directories == [project, project / "data"]
        assert sorted(p.name for p in project.iterdir()) == [
            "README.md", "data", "my_report.html", "open.bat", "open.sh",
        ]

    def test_html_references_relative_path(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        html = builder.build(chart_page(xy_df, "parquet"), tmp_path / "r.html").html_path.read_text()

        assert 'data-src="data/points.parquet"' in html
        assert "parquet-wasm" in html
        assert "Data: points.parquet" in html

    def test_readme_optional(self, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        result = PageBuilder(BuildSettings(write_readme=False)).build(chart_page(xy_df, "parquet"), tmp_path / "r.html")
        assert sorted(p.name for p in result.launcher_files) == ["open.bat", "open.sh"]

    def test_picture_copied(self, builder: PageBuilder, tmp_path: Path) -> None:
        image = tmp_path / "dot.png"
        image.write_bytes(b"\x89PNG\r\n\x1a\n")
        page = Page(elements=[Picture("dot", image)], dataformat="csv_external")

        result = builder.build(page, tmp_path / "out" / "pics.html")

        assert result.asset_files == [tmp_path / "out" / "pics" / "pictures" / "dot.png"]
        assert tmp_path / "out" / "pics" / "pictures" in result.directories

    def test_to_dict(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        result = builder.build(chart_page(xy_df, "csv_external"), tmp_path / "r.html")
        d = result.to_dict()

        assert d["project_dir"] == str(tmp_path / "r")
        assert d["data_files"] == [str(tmp_path / "r" / "data" / "points.csv")]


# =============================================================================
# ESCAPING TESTS
# =============================================================================


class TestEscaping:
    """User text cannot break the page structure."""

    def test_title_escaped(self, builder: PageBuilder, tmp_path: Path) -> None:
        page = Page(elements=[], tab_title="</title><script>alert(1)</script>")
        html = builder.build(page, tmp_path / "p.html").html_path.read_text()

        assert "<title>&lt;/title&gt;&lt;script&gt;" in html

    def test_notes_and_header_neutralized(self, builder: PageBuilder, tmp_path: Path) -> None:
        page = Page(
            elements=[],
            page_header="Header</script>",
            notes="<em>Notes</em></style>",
        )
        html = builder.build(page, tmp_path / "p.html").html_path.read_text()

        assert "Header<\\/script>" in html
        assert "<em>Notes</em><\\/style>" in html
        assert "Header</script>" not in html

    def test_text_block_close_tag(self, builder: PageBuilder, tmp_path: Path) -> None:
        page = Page(elements=[TextBlock("t", "before</script>after")])
        html = builder.build(page, tmp_path / "p.html").html_path.read_text()

        assert "before</script>after" not in html
        assert "before<\\/script>after" in html

    def test_table_in_page(self, builder: PageBuilder, tmp_path: Path) -> None:
        df = pd.DataFrame({"v": ["</script>"]})
        html = builder.build(Page(elements=[Table("t", df)]), tmp_path / "p.html").html_path.read_text()
        assert "<td>&lt;/script&gt;</td>" in html

    @pytest.mark.parametrize("dataformat", ["csv_embedded", "json_embedded"])
    def test_comment_opener_keeps_structure(self, builder: PageBuilder, tmp_path: Path, dataformat: str) -> None:
        df = pd.DataFrame({"x": [1], "y": [2], "note": ["<!--<script>"]})
        page = Page(
            elements=[Chart("chart", "points", x="x", y="y", title="<!--<script>")],
            datasets={"points": df},
            dataformat=dataformat,
        )
        html = builder.build(page, tmp_path / "p.html").html_path.read_text()

        doc = html5lib.parse(html, namespaceHTMLElements=False)
        marker = doc.find(".//script[@id='data_points']")

        assert doc.find(".//div[@class='plotpages-page']") is not None
        assert doc.find(".//footer[@class='plotpages-footer']") is not None
        assert marker is not None
        assert "plotpages-page" not in marker.text


# =============================================================================
# SCRIPT TESTS
# =============================================================================


class TestScripts:
    """Script tags in the page head."""

    def test_each_library_once_in_priority_order(self, builder: PageBuilder, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        page = Page(
            elements=[
                Chart("c1", "points", x="x", y="y"),
                PivotTable("p", "points"),
                Chart("c2", "points", x="x", y="y"),
            ],
            datasets={"points": xy_df},
            dataformat="json_embedded",
        )
        html = builder.build(page, tmp_path / "p.html").html_path.read_text()

        assert html.count("plotly-2.35.2.min.js") == 1
        assert html.count("jquery.min.js") == 1
        assert html.index("jquery.min.js") < html.index("pivot.min.js") < html.index("plotly-2.35.2.min.js")

    def test_custom_library(self, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        custom = ScriptLibrary.from_urls("custom", "https://cdn.example.org/custom.js")

        class CustomText(TextBlock):
            def required_scripts(self) -> tuple[ScriptLibrary, ...]:
                return (custom,)

        page = Page(elements=[CustomText("t", "x")], dataformat="json_embedded")
        html = PageBuilder(registry=ScriptRegistry()).build(page, tmp_path / "p.html").html_path.read_text()

        assert '<script src="https://cdn.example.org/custom.js"></script>' in html
