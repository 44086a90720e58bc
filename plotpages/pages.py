"""
Page and project models.

A Page is one HTML document: ordered visual elements plus the datasets they
read. A Project is a cover page plus linked sub-pages written into one flat
directory that shares a single ``data/`` folder.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from plotpages.data.schema import coerce_dataset
from plotpages.elements import LinkList, VisualElement
from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat
from plotpages.settings import get_settings


@dataclass
class Page:
    """One HTML page.

    Attributes:
        elements: Visual elements, rendered in order
        datasets: Dataset name -> DataFrame (or mapping of columns)
        tab_title: Browser tab title
        page_header: Heading shown at the top of the page (raw HTML)
        notes: Introductory notes under the header (raw HTML)
        dataformat: How datasets are stored; defaults to the configured default
    """

    elements: list[VisualElement]
    datasets: dict[str, pd.DataFrame] = field(default_factory=dict)
    tab_title: str | None = None
    page_header: str = ""
    notes: str = ""
    dataformat: DataFormat | str | None = None

    def __post_init__(self) -> None:
        settings = get_settings()
        self.dataformat = DataFormat.parse(
            settings.default_dataformat if self.dataformat is None else self.dataformat
        )
        if self.tab_title is None:
            self.tab_title = settings.default_tab_title

        self.elements = list(self.elements)
        for element in self.elements:
            if not isinstance(element, VisualElement):
                raise ConfigurationError(
                    f"Page elements must be VisualElement instances, got {type(element).__name__}",
                    option="elements",
                    value=type(element).__name__,
                )

        datasets: dict[str, pd.DataFrame] = {}
        for name, value in self.datasets.items():
            if not isinstance(name, str):
                raise ConfigurationError(
                    f"Dataset names must be strings, got {name!r}",
                    option="datasets",
                    value=repr(name),
                )
            datasets[name] = coerce_dataset(name, value)
        self.datasets = datasets

    def referenced_datasets(self) -> list[str]:
        """Dataset names the elements depend on, in first-use order."""
        seen: dict[str, None] = {}
        for element in self.elements:
            for name in element.dependencies():
                seen.setdefault(name, None)
        return list(seen)


@dataclass
class Project:
    """A cover page plus ordered sub-pages.

    ``dataformat``, when given, overrides the format of every page.
    """

    cover: Page
    pages: list[Page] = field(default_factory=list)
    dataformat: DataFormat | str | None = None

    def __post_init__(self) -> None:
        self.pages = list(self.pages)
        if self.dataformat is not None:
            self.dataformat = DataFormat.parse(self.dataformat)

    @property
    def effective_dataformat(self) -> DataFormat:
        return self.dataformat if self.dataformat is not None else self.cover.dataformat

    @property
    def all_pages(self) -> list[Page]:
        """Cover first, then sub-pages in order."""
        return [self.cover, *self.pages]

    @staticmethod
    def page_filename(index: int) -> str:
        """Positional file name of the 1-based sub-page ``index``."""
        return f"page_{index}.html"

    @classmethod
    def from_pages(
        cls,
        cover_elements: Sequence[VisualElement],
        pages: Sequence[Page] | Mapping[str, Sequence[Page]],
        *,
        tab_title: str = "Home",
        page_header: str = "",
        notes: str = "",
        dataformat: DataFormat | str = DataFormat.PARQUET,
        datasets: dict[str, Any] | None = None,
    ) -> "Project":
        """Build a project whose cover page links to every sub-page.

        Args:
            cover_elements: Elements shown on the cover above the generated links
            pages: Sub-pages, or an ordered ``{heading: [pages]}`` for grouped links
            tab_title: Cover page tab title
            page_header: Cover page header
            notes: Cover page notes
            dataformat: Format applied to every page of the project
            datasets: Datasets used by the cover elements

        Returns:
            Project with a LinkList appended to the cover elements
        """
        index = 0

        def link_for(page: Page) -> tuple[str, str, str]:
            nonlocal index
            index += 1
            return (page.tab_title, cls.page_filename(index), page.notes)

        if isinstance(pages, Mapping):
            grouped = {heading: [link_for(p) for p in group] for heading, group in pages.items()}
            ordered_pages = [p for group in pages.values() for p in group]
            link_list = LinkList(grouped)
        else:
            ordered_pages = list(pages)
            link_list = LinkList([link_for(p) for p in ordered_pages])

        cover = Page(
            elements=[*cover_elements, link_list],
            datasets=datasets or {},
            tab_title=tab_title,
            page_header=page_header,
            notes=notes,
            dataformat=dataformat,
        )
        return cls(cover=cover, pages=ordered_pages, dataformat=dataformat)
