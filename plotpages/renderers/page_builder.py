"""
Module: page_builder

Purpose: Assemble one HTML page from its datasets and visual elements.

Key Functions:
- PageBuilder.build: validate, serialize datasets and write a page (plus data,
  assets and launchers for external formats)
- PageBuilder.write_page: write a page whose datasets are already serialized
  (used by the project builder)
- BuildResult: everything a build wrote

Architecture Notes:
- Validation always completes before the first file is written
- Embedded formats write a single file at the requested path
- External formats write ``<parent>/<safe-stem>/<safe-stem>.html`` with
  ``data/``, launchers and README next to it
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from plotpages.data.serializer import DATA_DIRNAME, Locator, serialize
from plotpages.elements import RenderContext
from plotpages.exceptions import DuplicateIdentifierError, MissingDatasetError
from plotpages.formats import DataFormat
from plotpages.html_utils import SEGMENT_SEPARATOR, attribution_html, neutralize_closing_tags
from plotpages.pages import Page
from plotpages.renderers.launchers import emit_launchers
from plotpages.renderers.templates import (
    _get_loader_js,
    _get_page_css,
    _get_page_template,
    get_page_env,
)
from plotpages.sanitize import sanitize, sanitize_unique
from plotpages.scripts import ScriptLibrary, ScriptRegistry
from plotpages.settings import BuildSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Files and directories written by a page build."""

    html_paths: list[Path] = field(default_factory=list)
    project_dir: Path | None = None
    data_files: list[Path] = field(default_factory=list)
    asset_files: list[Path] = field(default_factory=list)
    launcher_files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)

    @property
    def html_path(self) -> Path:
        """The main page (the cover, for projects)."""
        return self.html_paths[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "html_paths": [str(p) for p in self.html_paths],
            "project_dir": str(self.project_dir) if self.project_dir else None,
            "data_files": [str(p) for p in self.data_files],
            "asset_files": [str(p) for p in self.asset_files],
            "launcher_files": [str(p) for p in self.launcher_files],
            "directories": [str(p) for p in self.directories],
        }


class PageBuilder:
    """Builds single pages. Owns the script registry used to resolve head tags."""

    def __init__(
        self,
        settings: BuildSettings | None = None,
        registry: ScriptRegistry | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or ScriptRegistry()

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate(self, page: Page) -> dict[str, str]:
        """Check a page before anything is written.

        Returns:
            Mapping of dataset name to sanitized name

        Raises:
            DuplicateIdentifierError: Two elements share a (sanitized) identifier
            MissingDatasetError: An element references an absent dataset
            AmbiguousIdentifierError: Two dataset names sanitize to the same name
            ConfigurationError: An element requires an unknown script library
        """
        self.validate_elements(page)
        for element in page.elements:
            for name in element.dependencies():
                if name not in page.datasets:
                    raise MissingDatasetError(
                        f"Element {element.identifier!r} uses dataset {name!r}, "
                        f"which the page does not define (available: {sorted(page.datasets)})",
                        dataset_name=name,
                        element_id=element.identifier,
                    )
        self.registry.resolve(self.requested_scripts(page))
        return sanitize_unique(page.datasets, kind="dataset")

    @staticmethod
    def validate_elements(page: Page) -> None:
        claimed: dict[str, str] = {}
        for element in page.elements:
            safe = element.safe_id
            if safe in claimed:
                raise DuplicateIdentifierError(
                    f"Elements {claimed[safe]!r} and {element.identifier!r} share the identifier {safe!r}",
                    identifier=safe,
                    originals=[claimed[safe], element.identifier],
                )
            claimed[safe] = element.identifier

    @staticmethod
    def requested_scripts(page: Page) -> list[str | ScriptLibrary]:
        return [lib for element in page.elements for lib in element.required_scripts()]

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self, page: Page, output_path: Path | str) -> BuildResult:
        """Validate and write a page.

        Args:
            page: Page to build
            output_path: Requested HTML path; external formats turn its stem
                into a directory next to it

        Returns:
            BuildResult listing every file and directory written
        """
        output_path = Path(output_path)
        dataformat = page.dataformat
        safe_names = self.validate(page)

        if dataformat.is_embedded:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            locators = {
                name: serialize(df, dataformat, name, safe_name=safe_names[name], settings=self.settings)
                for name, df in page.datasets.items()
            }
            _, assets = self.write_page(page, output_path, dataformat=dataformat, locators=locators)
            return BuildResult(html_paths=[output_path], asset_files=assets)

        stem = sanitize(output_path.stem)
        project_dir = output_path.parent / stem
        project_dir.mkdir(parents=True, exist_ok=True)
        html_path = project_dir / f"{stem}.html"

        locators = {
            name: serialize(
                df,
                dataformat,
                name,
                output_dir=project_dir,
                safe_name=safe_names[name],
                settings=self.settings,
            )
            for name, df in page.datasets.items()
        }
        _, assets = self.write_page(page, html_path, dataformat=dataformat, locators=locators)
        launchers = emit_launchers(project_dir, html_path.name, write_readme=self.settings.write_readme)

        data_files = [project_dir / loc.path for loc in locators.values() if loc.path]
        directories = [project_dir]
        if data_files:
            directories.append(project_dir / DATA_DIRNAME)
        directories.extend(sorted({p.parent for p in assets} - set(directories)))

        logger.info(f"Page project created at {project_dir} ({len(data_files)} data files)")
        return BuildResult(
            html_paths=[html_path],
            project_dir=project_dir,
            data_files=data_files,
            asset_files=assets,
            launcher_files=launchers,
            directories=directories,
        )

    def write_page(
        self,
        page: Page,
        html_path: Path,
        *,
        dataformat: DataFormat,
        locators: Mapping[str, Locator],
        link_map: Mapping[str, str] | None = None,
        ambiguous_links: frozenset[str] = frozenset(),
        asset_namespace: str = "",
    ) -> tuple[Path, list[Path]]:
        """Write a page whose datasets are already serialized.

        Args:
            page: Page to write (already validated)
            html_path: Target HTML file
            dataformat: Effective format (may override the page's own)
            locators: Serialized datasets the page references, by name
            link_map: Intra-project link aliases
            ambiguous_links: Aliases claimed by more than one page
            asset_namespace: Subdirectory of pictures/ and slides/ for this
                page's images

        Returns:
            (html_path, asset files written by the elements)
        """
        ctx = RenderContext(
            dataformat=dataformat,
            output_dir=html_path.parent,
            locators=dict(locators),
            link_map=dict(link_map or {}),
            ambiguous_links=ambiguous_links,
            asset_namespace=asset_namespace,
            settings=self.settings,
        )
        html = self.render(page, ctx)

        assets: list[Path] = []
        for element in page.elements:
            assets.extend(element.write_assets(ctx))

        html_path.write_text(html, encoding="utf-8")
        logger.info(f"Page written to {html_path}")
        return html_path, assets

    def render(self, page: Page, ctx: RenderContext) -> str:
        """Render a page to an HTML string."""
        from plotpages import __version__

        segments = []
        functional = []
        for element in page.elements:
            segment = element.appearance_fragment(ctx)
            for name in element.dependencies():
                segment += "\n" + attribution_html(ctx.locator(name, element.identifier).attribution)
            segments.append(segment)

            script = element.functional_fragment(ctx)
            if script.strip():
                functional.append(script)

        template = get_page_env().from_string(_get_page_template())
        return template.render(
            tab_title=page.tab_title,
            page_header=neutralize_closing_tags(page.page_header),
            notes=neutralize_closing_tags(page.notes),
            head_scripts=self.registry.head_html(self.requested_scripts(page), ctx.dataformat),
            page_css=_get_page_css(),
            loader_js=_get_loader_js(),
            data_markers=[loc.to_html() for loc in ctx.locators.values()],
            dataset_ids={name: loc.element_id for name, loc in ctx.locators.items()},
            functional_fragments=functional,
            body=SEGMENT_SEPARATOR.join(segments),
            version=__version__,
            dataformat=ctx.dataformat.value,
        )
