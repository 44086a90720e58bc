"""
Text elements: raw HTML blocks and navigation link lists.
"""

from collections.abc import Mapping, Sequence
from typing import NamedTuple

from plotpages.elements.base import RenderContext, VisualElement, notes_html
from plotpages.exceptions import ConfigurationError
from plotpages.html_utils import escape_text, neutralize_closing_tags


class TextBlock(VisualElement):
    """Caller-supplied HTML placed in the page as-is.

    The HTML is trusted; only ``</script`` and ``</style`` sequences are
    neutralized so the block cannot break out of the page structure.
    """

    def __init__(self, block_id: str, html: str) -> None:
        self.block_id = block_id
        self.html = html

    @property
    def identifier(self) -> str:
        return self.block_id

    def functional_fragment(self, ctx: RenderContext) -> str:
        return ""

    def appearance_fragment(self, ctx: RenderContext) -> str:
        return f'<div class="plotpages-text" id="{self.safe_id}">\n{neutralize_closing_tags(self.html)}\n</div>'


class Link(NamedTuple):
    title: str
    href: str
    blurb: str = ""


LinkSpec = tuple[str, str] | tuple[str, str, str] | Link


def _to_links(items: Sequence[LinkSpec]) -> list[Link]:
    links = []
    for item in items:
        if len(item) not in (2, 3):
            raise ConfigurationError(
                f"Links are (title, href) or (title, href, blurb) tuples; got {item!r}",
                option="links",
                value=item,
            )
        links.append(Link(*item))
    return links


class LinkList(VisualElement):
    """List of links, optionally grouped under headings.

    Hrefs that name a page of the same project (``"page_2.html"``, the page's
    title, or its title as a filename) are rewritten to the page's file when
    the project is built.

    Args:
        links: ``[(title, href, blurb), ...]`` or ``{heading: [(title, href, blurb), ...]}``
        list_id: Element identifier
        title: Heading shown above the links
        notes: Raw HTML shown below the links
    """

    def __init__(
        self,
        links: Sequence[LinkSpec] | Mapping[str, Sequence[LinkSpec]],
        *,
        list_id: str = "link_list",
        title: str = "Pages",
        notes: str = "",
    ) -> None:
        if isinstance(links, Mapping):
            self.groups = [(heading, _to_links(items)) for heading, items in links.items()]
        else:
            self.groups = [(None, _to_links(links))]
        self.list_id = list_id
        self.title = title
        self.notes = notes

    @property
    def identifier(self) -> str:
        return self.list_id

    @property
    def links(self) -> list[Link]:
        """All links, flattened in display order."""
        return [link for _, links in self.groups for link in links]

    def functional_fragment(self, ctx: RenderContext) -> str:
        return ""

    def appearance_fragment(self, ctx: RenderContext) -> str:
        parts = [
            f'<div class="plotpages-links" id="{self.safe_id}" '
            'style="margin: 20px 0; padding: 15px; border: 1px solid #ddd; background-color: #f9f9f9;">',
            f"<h3>{escape_text(self.title)}</h3>",
        ]
        for heading, links in self.groups:
            if heading is not None:
                parts.append(f'<h4 style="margin-top: 15px; margin-bottom: 5px;">{escape_text(heading)}</h4>')
            parts.append("<ul>")
            for link in links:
                href = ctx.resolve_link(link.href)
                item = f'<li><strong><a href="{escape_text(href)}">{escape_text(link.title)}</a></strong>'
                if link.blurb:
                    item += f": {escape_text(link.blurb)}"
                parts.append(item + "</li>")
            parts.append("</ul>")
        parts.append(notes_html(self.notes))
        parts.append("</div>")
        return "\n".join(parts)
