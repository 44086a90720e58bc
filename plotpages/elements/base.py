"""
Base classes for visual elements.

A visual element is anything that can be placed on a page: a chart, a table,
a block of text, a picture. The page builder only talks to elements through
the VisualElement interface, so new element kinds never require changes to
the builders.

Every element exposes:
- identifier: unique within a page, sanitized into a DOM id / JS identifier
- dependencies(): names of datasets it reads through ``loadDataset``
- required_scripts(): JS libraries it needs, by registry name
- functional_fragment(ctx): JavaScript run once the page has loaded
- appearance_fragment(ctx): static markup placed in the page body
- write_assets(ctx): side files (images) written next to external-format pages
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from plotpages.data.serializer import Locator
from plotpages.exceptions import AmbiguousIdentifierError, MissingDatasetError
from plotpages.formats import DataFormat
from plotpages.html_utils import neutralize_closing_tags
from plotpages.sanitize import sanitize
from plotpages.scripts import ScriptLibrary
from plotpages.settings import BuildSettings, get_settings


@dataclass(frozen=True)
class RenderContext:
    """Everything an element may consult while rendering.

    Attributes:
        dataformat: Effective data format of the page being written
        output_dir: Directory the HTML file is written to
        locators: Serialized dataset locations, by dataset name
        link_map: Intra-project link aliases and the file they resolve to
        ambiguous_links: Aliases claimed by more than one page
        asset_namespace: Subdirectory for this page's side files; set in
            projects, where every page shares pictures/ and slides/
        settings: Build settings in effect
    """

    dataformat: DataFormat
    output_dir: Path | None = None
    locators: Mapping[str, Locator] = field(default_factory=dict)
    link_map: Mapping[str, str] = field(default_factory=dict)
    ambiguous_links: frozenset[str] = frozenset()
    asset_namespace: str = ""
    settings: BuildSettings = field(default_factory=get_settings)

    def asset_path(self, dirname: str, filename: str) -> str:
        """Relative POSIX path of a side file written by an element."""
        if self.asset_namespace:
            return f"{dirname}/{self.asset_namespace}/{filename}"
        return f"{dirname}/{filename}"

    def locator(self, dataset_name: str, element_id: str | None = None) -> Locator:
        """Look up where a dataset was serialized."""
        try:
            return self.locators[dataset_name]
        except KeyError:
            raise MissingDatasetError(
                f"Dataset {dataset_name!r} was not serialized for this page",
                dataset_name=dataset_name,
                element_id=element_id,
            ) from None

    def resolve_link(self, href: str) -> str:
        """Rewrite an intra-project link to the file it points at.

        Links that are not project aliases (external URLs, anchors) pass through.

        Raises:
            AmbiguousIdentifierError: If the alias is claimed by two pages
        """
        if href in self.ambiguous_links:
            raise AmbiguousIdentifierError(
                f"Link target {href!r} matches more than one page of the project",
                identifier=href,
            )
        return self.link_map.get(href, href)


class VisualElement(ABC):
    """Abstract base class for anything placed on a page."""

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Caller-chosen identifier, unique within the page."""
        ...

    @property
    def safe_id(self) -> str:
        """Sanitized identifier used for DOM ids and JS names."""
        return sanitize(self.identifier)

    def dependencies(self) -> tuple[str, ...]:
        """Dataset names this element loads."""
        return ()

    def required_scripts(self) -> tuple[str | ScriptLibrary, ...]:
        """JS libraries this element needs."""
        return ()

    @abstractmethod
    def functional_fragment(self, ctx: RenderContext) -> str:
        """JavaScript executed after the page is loaded ("" for none)."""
        ...

    @abstractmethod
    def appearance_fragment(self, ctx: RenderContext) -> str:
        """Markup placed in the page body."""
        ...

    def write_assets(self, ctx: RenderContext) -> list[Path]:
        """Write side files for external formats. Returns the files written."""
        return []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(identifier={self.identifier!r})"


def notes_html(notes: str) -> str:
    """Caller-supplied notes, kept as raw HTML with closing tags neutralized."""
    if not notes:
        return ""
    return f'<div class="plotpages-notes">{neutralize_closing_tags(notes)}</div>'
