"""
Tests for the create_html entry point.
"""

from pathlib import Path

import pandas as pd
import pytest

from plotpages import (
    Chart,
    Page,
    Project,
    ProjectResult,
    TextBlock,
    create_html,
    page_for_element,
    read_dataset,
)
from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat


@pytest.fixture
def xy_df() -> pd.DataFrame:
    return pd.DataFrame({"x": [1, 2], "y": [3, 4]})


class TestPageForElement:
    """Tests for page_for_element()."""

    def test_single_dependency(self, xy_df: pd.DataFrame) -> None:
        page = page_for_element(Chart("c", "points", x="x", y="y"), xy_df)

        assert list(page.datasets) == ["points"]
        assert page.tab_title == "c"

    def test_no_dataset(self) -> None:
        page = page_for_element(TextBlock("t", "hello"), tab_title="Hello")
        assert page.datasets == {}
        assert page.tab_title == "Hello"

    def test_mapping_for_element_without_dependencies(self, xy_df: pd.DataFrame) -> None:
        page = page_for_element(TextBlock("t", "hello"), {"extra": xy_df})
        assert list(page.datasets) == ["extra"]

    def test_frame_for_element_without_dependencies(self, xy_df: pd.DataFrame) -> None:
        with pytest.raises(ConfigurationError):
            page_for_element(TextBlock("t", "hello"), xy_df)

    def test_dataformat(self, xy_df: pd.DataFrame) -> None:
        page = page_for_element(Chart("c", "points", x="x", y="y"), xy_df, dataformat="parquet")
        assert page.dataformat is DataFormat.PARQUET


class TestCreateHtml:
    """Tests for create_html() dispatch."""

    def test_element(self, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        result = create_html(Chart("c", "points", x="x", y="y"), tmp_path / "c.html", xy_df)

        assert result.html_path == tmp_path / "c.html"
        assert read_dataset(result.html_path, "points")["y"].tolist() == [3, 4]

    def test_page(self, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        page = Page(elements=[Chart("c", "points", x="x", y="y")], datasets={"points": xy_df}, dataformat="parquet")
        result = create_html(page, tmp_path / "page.html")

        assert result.project_dir == tmp_path / "page"
        assert read_dataset(result.html_path, "points")["x"].tolist() == [1, 2]

    def test_project(self, xy_df: pd.DataFrame, tmp_path: Path) -> None:
        project = Project.from_pages([], [Page(elements=[Chart("c", "points", x="x", y="y")], datasets={"points": xy_df})])
        result = create_html(project, tmp_path / "site.html")

        assert isinstance(result, ProjectResult)
        assert len(result.html_paths) == 2

    def test_unsupported_object(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            create_html("<h1>hi</h1>", tmp_path / "x.html")
