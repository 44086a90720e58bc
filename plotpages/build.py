"""
Module: build

Purpose: One call to turn a page, a project or a single element into HTML.

Key Functions:
- create_html: dispatch to the page or project builder
- page_for_element: wrap one element and its data into a Page
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from plotpages.elements import VisualElement
from plotpages.exceptions import ConfigurationError
from plotpages.formats import DataFormat
from plotpages.pages import Page, Project
from plotpages.renderers import BuildResult, PageBuilder, ProjectBuilder
from plotpages.scripts import ScriptRegistry
from plotpages.settings import BuildSettings


def page_for_element(
    element: VisualElement,
    dataset: Any = None,
    *,
    dataformat: DataFormat | str | None = None,
    tab_title: str | None = None,
) -> Page:
    """Wrap one element in a page.

    Args:
        element: The element to show
        dataset: Its data. For an element reading one dataset, a DataFrame or
            a mapping of columns; for several, a mapping of dataset name to data
        dataformat: Data format of the page
        tab_title: Browser tab title (defaults to the element identifier)
    """
    dependencies = element.dependencies()
    if dataset is None:
        datasets = {}
    elif len(dependencies) == 1:
        datasets = {dependencies[0]: dataset}
    elif isinstance(dataset, Mapping):
        datasets = dict(dataset)
    else:
        raise ConfigurationError(
            f"Element {element.identifier!r} reads {len(dependencies)} datasets; "
            "pass a mapping of dataset name to data",
            option="dataset",
            value=type(dataset).__name__,
        )
    return Page(
        elements=[element],
        datasets=datasets,
        tab_title=element.identifier if tab_title is None else tab_title,
        dataformat=dataformat,
    )


def create_html(
    obj: Page | Project | VisualElement,
    output_path: Path | str = "plotpages.html",
    dataset: Any = None,
    *,
    dataformat: DataFormat | str | None = None,
    settings: BuildSettings | None = None,
    registry: ScriptRegistry | None = None,
) -> BuildResult:
    """Build HTML output for a page, a project or a single element.

    Example:
        >>> chart = Chart("sales", "sales", x="month", y="revenue")
        >>> create_html(chart, "sales.html", df)
        >>> create_html(Page([chart], {"sales": df}), "report.html")

    Args:
        obj: What to build
        output_path: Target HTML path
        dataset: Data for a single element (ignored for pages and projects)
        dataformat: Format for a single element
        settings: Build settings (defaults to ``get_settings()``)
        registry: Script registry (defaults to the built-in libraries)

    Returns:
        BuildResult (ProjectResult for projects)
    """
    if isinstance(obj, Project):
        return ProjectBuilder(settings, registry).build(obj, output_path)

    if isinstance(obj, VisualElement):
        obj = page_for_element(obj, dataset, dataformat=dataformat)

    if not isinstance(obj, Page):
        raise ConfigurationError(
            f"create_html expects a Page, a Project or a VisualElement, got {type(obj).__name__}",
            option="obj",
            value=type(obj).__name__,
        )
    return PageBuilder(settings, registry).build(obj, output_path)
