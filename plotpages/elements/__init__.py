"""
Visual elements for plotpages.

Each element implements the VisualElement interface; the builders never
inspect concrete element kinds.
"""

from plotpages.elements.base import RenderContext, VisualElement
from plotpages.elements.charts import CHART_TYPES, Chart, PivotTable
from plotpages.elements.media import Picture, Slides
from plotpages.elements.table import Table
from plotpages.elements.text import Link, LinkList, TextBlock

__all__ = [
    # Interface
    "RenderContext",
    "VisualElement",
    # Charts
    "CHART_TYPES",
    "Chart",
    "PivotTable",
    # Tables and text
    "Table",
    "TextBlock",
    "Link",
    "LinkList",
    # Media
    "Picture",
    "Slides",
]
