"""
Module: project_builder

Purpose: Write a cover page and its sub-pages into one flat project directory.

Layout::

    <parent>/<safe-stem>/
        <safe-stem>.html    cover
        page_1.html ... page_N.html
        data/               every dataset, written once
        pictures/<page>/    images, one folder per page (external formats)
        open.sh, open.bat, README.md

The cover may not be named ``page_<n>``; that name belongs to a sub-page.

Architecture Notes:
- All pages are validated, and all dataset schemas compared, before any write
- A dataset name used by several pages is serialized once; each page gets
  the same Locator
- The link map (aliases -> positional file names) is fixed before the first
  page is rendered
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from plotpages.data.schema import describe_schema
from plotpages.data.serializer import DATA_DIRNAME, Locator, serialize
from plotpages.elements import LinkList
from plotpages.exceptions import AmbiguousIdentifierError, ConfigurationError, SchemaConflictError
from plotpages.pages import Project
from plotpages.renderers.launchers import emit_launchers
from plotpages.renderers.page_builder import BuildResult, PageBuilder
from plotpages.sanitize import sanitize, sanitize_filename, sanitize_unique
from plotpages.scripts import ScriptRegistry
from plotpages.settings import BuildSettings, get_settings

logger = logging.getLogger(__name__)

_POSITIONAL_NAME = re.compile(r"page_\d+")
_POSITIONAL_FILE = re.compile(r"page_\d+\.html")


@dataclass
class ProjectResult(BuildResult):
    """Files written by a project build; ``html_paths[0]`` is the cover."""

    page_files: dict[str, Path] = field(default_factory=dict)  # tab title -> file

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["page_files"] = {title: str(p) for title, p in self.page_files.items()}
        return result


@dataclass
class LinkMap:
    """Intra-project link aliases resolved to positional page files."""

    targets: dict[str, str] = field(default_factory=dict)
    ambiguous: set[str] = field(default_factory=set)

    def add(self, alias: str, target: str) -> None:
        if alias in self.ambiguous:
            return
        existing = self.targets.get(alias)
        if existing is not None and existing != target:
            del self.targets[alias]
            self.ambiguous.add(alias)
            logger.warning(f"Link alias {alias!r} matches more than one page; links using it will fail")
            return
        self.targets[alias] = target


def build_link_map(project: Project, cover_file: str) -> LinkMap:
    """Map every page alias to its file.

    A sub-page ``i`` answers to ``page_i.html``, to its tab title and to its
    tab title as a filename (``sanitize_filename(title) + ".html"``).
    """
    positional = {Project.page_filename(i) for i in range(1, len(project.pages) + 1)}
    links = LinkMap(targets={name: name for name in positional})

    for index, page in enumerate(project.pages, start=1):
        filename = Project.page_filename(index)
        for alias in (page.tab_title, f"{sanitize_filename(page.tab_title)}.html"):
            if alias not in positional:
                links.add(alias, filename)

    for alias in (project.cover.tab_title, f"{sanitize_filename(project.cover.tab_title)}.html"):
        if alias not in positional:
            links.add(alias, cover_file)
    return links


class ProjectBuilder:
    """Builds multi-page projects on top of a PageBuilder."""

    def __init__(
        self,
        settings: BuildSettings | None = None,
        registry: ScriptRegistry | None = None,
        page_builder: PageBuilder | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.page_builder = page_builder or PageBuilder(self.settings, registry)

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def collect_datasets(self, project: Project) -> dict[str, pd.DataFrame]:
        """Deduplicate datasets by name across all pages.

        Returns:
            Dataset name -> the first DataFrame declared under it

        Raises:
            SchemaConflictError: A name is used with different column names or types
        """
        datasets: dict[str, pd.DataFrame] = {}
        origins: dict[str, str] = {}

        for page in project.all_pages:
            for name, df in page.datasets.items():
                if name not in datasets:
                    datasets[name] = df
                    origins[name] = page.tab_title
                    continue

                first = datasets[name]
                if first is df:
                    continue

                first_schema = describe_schema(first)
                schema = describe_schema(df)
                if first_schema != schema:
                    raise SchemaConflictError(
                        f"Dataset {name!r} has different schemas on pages "
                        f"{origins[name]!r} and {page.tab_title!r}",
                        dataset_name=name,
                        schemas=[[str(c) for c in first_schema], [str(c) for c in schema]],
                    )
                if not first.equals(df):
                    logger.warning(
                        f"Dataset '{name}' on page '{page.tab_title}' differs in values from the one "
                        f"on page '{origins[name]}'; keeping the first"
                    )

        return datasets

    def validate(self, project: Project) -> dict[str, str]:
        """Validate every page and the shared dataset namespace.

        Returns:
            Dataset name -> sanitized name, across the whole project
        """
        for page in project.all_pages:
            self.page_builder.validate(page)
        return sanitize_unique(
            (name for page in project.all_pages for name in page.datasets),
            kind="dataset",
        )

    @staticmethod
    def cover_stem(output_path: Path) -> str:
        """Sanitized stem of the cover, which also names the project directory.

        Raises:
            ConfigurationError: The stem is a sub-page name (``page_<n>``)
        """
        stem = sanitize(output_path.stem)
        if _POSITIONAL_NAME.fullmatch(stem):
            raise ConfigurationError(
                f"Cover name {stem!r} is reserved for sub-pages; choose another output file name",
                option="output_path",
                value=str(output_path),
            )
        return stem

    @staticmethod
    def check_links(project: Project, link_map: LinkMap) -> None:
        """Reject links to ambiguous aliases or to sub-pages that do not exist."""
        for page in project.all_pages:
            for element in page.elements:
                if not isinstance(element, LinkList):
                    continue
                for link in element.links:
                    if link.href in link_map.ambiguous:
                        raise AmbiguousIdentifierError(
                            f"Link {link.title!r} on page {page.tab_title!r} targets {link.href!r}, "
                            f"which matches more than one page of the project",
                            identifier=link.href,
                        )
                    if _POSITIONAL_FILE.fullmatch(link.href) and link.href not in link_map.targets:
                        raise ConfigurationError(
                            f"Link {link.title!r} on page {page.tab_title!r} targets {link.href!r}, "
                            f"but the project has {len(project.pages)} sub-pages",
                            option="links",
                            value=link.href,
                        )

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self, project: Project, output_path: Path | str) -> ProjectResult:
        """Validate and write a project.

        Args:
            project: Cover page plus sub-pages
            output_path: Requested cover path; its sanitized stem names the project directory

        Returns:
            ProjectResult listing every file written
        """
        output_path = Path(output_path)
        dataformat = project.effective_dataformat

        stem = self.cover_stem(output_path)
        safe_names = self.validate(project)
        datasets = self.collect_datasets(project)

        project_dir = output_path.parent / stem
        cover_path = project_dir / f"{stem}.html"
        link_map = build_link_map(project, cover_path.name)
        self.check_links(project, link_map)

        project_dir.mkdir(parents=True, exist_ok=True)
        output_dir = project_dir if dataformat.is_external else None
        locators: dict[str, Locator] = {
            name: serialize(
                df,
                dataformat,
                name,
                output_dir=output_dir,
                safe_name=safe_names[name],
                settings=self.settings,
            )
            for name, df in datasets.items()
        }

        targets = [(project.cover, cover_path)]
        targets += [
            (page, project_dir / Project.page_filename(index))
            for index, page in enumerate(project.pages, start=1)
        ]

        html_paths: list[Path] = []
        assets: list[Path] = []
        page_files: dict[str, Path] = {}
        for page, path in targets:
            _, written = self.page_builder.write_page(
                page,
                path,
                dataformat=dataformat,
                locators={name: locators[name] for name in page.datasets},
                link_map=link_map.targets,
                ambiguous_links=frozenset(link_map.ambiguous),
                asset_namespace=path.stem,
            )
            html_paths.append(path)
            assets.extend(written)
            page_files.setdefault(page.tab_title, path)

        launchers = emit_launchers(project_dir, cover_path.name, write_readme=self.settings.write_readme)

        data_files = [project_dir / loc.path for loc in locators.values() if loc.path]
        directories = [project_dir]
        if data_files:
            directories.append(project_dir / DATA_DIRNAME)
        directories.extend(sorted({p.parent for p in assets} - set(directories)))

        self._log_summary(project, project_dir, cover_path, html_paths, dataformat.value, len(data_files))
        return ProjectResult(
            html_paths=html_paths,
            project_dir=project_dir,
            data_files=data_files,
            asset_files=assets,
            launcher_files=launchers,
            directories=directories,
            page_files=page_files,
        )

    @staticmethod
    def _log_summary(
        project: Project,
        project_dir: Path,
        cover_path: Path,
        html_paths: list[Path],
        dataformat: str,
        n_data_files: int,
    ) -> None:
        logger.info(f"Multi-page project created at {project_dir}")
        logger.info(f"  Main page: {cover_path.name}")
        logger.info(f"  Subpages: {len(project.pages)}")
        for page, path in zip(project.pages, html_paths[1:]):
            logger.info(f"    - {page.tab_title}: {path.name}")
        if n_data_files:
            logger.info(f"  Data format: {dataformat} ({n_data_files} files shared in data/)")
        else:
            logger.info(f"  Data format: {dataformat} (embedded in each page)")

