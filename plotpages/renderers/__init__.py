"""
HTML rendering for plotpages.

This module writes pages and multi-page projects to disk, together with the
launcher scripts that open external-format builds in a browser.
"""

from plotpages.renderers.launchers import emit_launchers
from plotpages.renderers.page_builder import BuildResult, PageBuilder
from plotpages.renderers.project_builder import ProjectBuilder, ProjectResult, build_link_map

__all__ = [
    "BuildResult",
    "PageBuilder",
    "ProjectBuilder",
    "ProjectResult",
    "build_link_map",
    "emit_launchers",
]
