"""
Chart elements: declarative Plotly charts and pivot tables.

A chart does no plotting in Python. It holds a specification (which dataset,
which columns, which layout) and emits JavaScript that loads the dataset with
``loadDataset`` and hands the rows to the charting library.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from plotpages.elements.base import RenderContext, VisualElement, notes_html
from plotpages.exceptions import ConfigurationError
from plotpages.html_utils import escape_json_for_script, escape_text
from plotpages.scripts import C3, D3, JQUERY, JQUERY_UI, PIVOTTABLE, PLOTLY


def to_js_literal(value: Any) -> str:
    """JSON literal safe to place inside a ``<script>`` block."""
    return escape_json_for_script(json.dumps(value, default=str))


# =============================================================================
# PLOTLY CHART
# =============================================================================

# chart_type -> base Plotly trace
CHART_TYPES: dict[str, dict[str, Any]] = {
    "scatter": {"type": "scatter", "mode": "markers"},
    "line": {"type": "scatter", "mode": "lines"},
    "area": {"type": "scatter", "mode": "lines", "fill": "tozeroy"},
    "bar": {"type": "bar"},
    "histogram": {"type": "histogram"},
    "box": {"type": "box"},
}

_CHART_JS = """
    loadDataset({dataset}).then(function(rows) {{
        var spec = {spec};
        var groups = {{}};
        var order = [];
        rows.forEach(function(row) {{
            var key = spec.group_by ? String(row[spec.group_by]) : (spec.y || spec.x);
            if (!(key in groups)) {{
                groups[key] = {{x: [], y: []}};
                order.push(key);
            }}
            groups[key].x.push(row[spec.x]);
            if (spec.y) groups[key].y.push(row[spec.y]);
        }});
        var traces = order.map(function(key) {{
            var trace = Object.assign({{name: key}}, spec.trace);
            if (spec.trace.type === 'box') {{
                trace.y = groups[key].y.length ? groups[key].y : groups[key].x;
            }} else {{
                trace.x = groups[key].x;
                if (spec.y) trace.y = groups[key].y;
            }}
            return trace;
        }});
        Plotly.newPlot({element_id}, traces, spec.layout, {{responsive: true}});
    }}).catch(function(error) {{
        console.error('Error loading data for chart {safe_id}:', error);
    }});
"""


@dataclass
class Chart(VisualElement):
    """Plotly chart over one dataset.

    Rows are grouped by ``group_by`` (one trace per distinct value) or drawn
    as a single trace.

    Example:
        >>> Chart("revenue", "sales", chart_type="line", x="date", y="revenue",
        ...       group_by="region", title="Revenue by region")
    """

    chart_id: str
    dataset: str
    chart_type: str = "scatter"
    x: str = "x"
    y: str | None = "y"
    group_by: str | None = None
    title: str = ""
    notes: str = ""
    layout: dict[str, Any] = field(default_factory=dict)
    trace_options: dict[str, Any] = field(default_factory=dict)
    height: int = 500

    def __post_init__(self) -> None:
        if self.chart_type not in CHART_TYPES:
            raise ConfigurationError(
                f"chart_type must be one of {', '.join(CHART_TYPES)}; got {self.chart_type!r}",
                option="chart_type",
                value=self.chart_type,
            )
        if self.y is None and self.chart_type not in ("histogram", "box"):
            raise ConfigurationError(
                f"chart_type {self.chart_type!r} needs a y column",
                option="y",
                value=self.chart_id,
            )

    @property
    def identifier(self) -> str:
        return self.chart_id

    def dependencies(self) -> tuple[str, ...]:
        return (self.dataset,)

    def required_scripts(self) -> tuple[str, ...]:
        return (PLOTLY,)

    def to_dict(self) -> dict[str, Any]:
        """Specification handed to the page's JavaScript."""
        layout = {"title": {"text": self.title}, "height": self.height, **self.layout}
        return {
            "chart_id": self.chart_id,
            "chart_type": self.chart_type,
            "x": self.x,
            "y": self.y,
            "group_by": self.group_by,
            "trace": {**CHART_TYPES[self.chart_type], **self.trace_options},
            "layout": layout,
        }

    def functional_fragment(self, ctx: RenderContext) -> str:
        return _CHART_JS.format(
            dataset=to_js_literal(self.dataset),
            spec=to_js_literal(self.to_dict()),
            element_id=to_js_literal(self.safe_id),
            safe_id=self.safe_id,
        )

    def appearance_fragment(self, ctx: RenderContext) -> str:
        heading = f"<h2>{escape_text(self.title)}</h2>\n" if self.title else ""
        return (
            f'<div class="plotpages-chart">\n{heading}{notes_html(self.notes)}\n'
            f'<div id="{self.safe_id}" style="width: 100%; min-height: {self.height}px;"></div>\n'
            "</div>"
        )


# =============================================================================
# PIVOT TABLE
# =============================================================================

# Keeps the filter dropdown visible when the page is scrolled
PIVOTTABLE_STYLE_FIXES = """<style>
    .pvtFilterBox {
        z-index: 10000 !important;
        position: fixed !important;
    }
</style>"""

_PIVOT_JS = """
    loadDataset({dataset}).then(function(rows) {{
        var config = {config};
        var headers = rows.length ? Object.keys(rows[0]) : [];
        var table = [headers];
        rows.forEach(function(row) {{
            table.push(headers.map(function(h) {{
                var v = row[h];
                if (v === null || v === undefined) return '';
                if (v instanceof Date) return v.toISOString().replace('T00:00:00.000Z', '');
                return v;
            }}));
        }});
        $({selector}).pivotUI(table, $.extend({{
            renderers: $.extend(
                $.pivotUtilities.renderers,
                $.pivotUtilities.c3_renderers,
                $.pivotUtilities.d3_renderers,
                $.pivotUtilities.export_renderers
            ),
            hiddenAttributes: [""]
        }}, config));
    }}).catch(function(error) {{
        console.error('Error loading data for pivot table {safe_id}:', error);
        $({selector}).text('Error loading pivot table: ' + error.message);
    }});
"""


@dataclass
class PivotTable(VisualElement):
    """Interactive drag-and-drop pivot table (pivottable.js) over one dataset."""

    chart_id: str
    dataset: str
    rows: list[str] = field(default_factory=list)
    cols: list[str] = field(default_factory=list)
    vals: list[str] = field(default_factory=list)
    aggregator: str = "Count"
    renderer: str = "Table"
    inclusions: dict[str, list[str]] = field(default_factory=dict)
    exclusions: dict[str, list[str]] = field(default_factory=dict)
    title: str = ""
    notes: str = ""

    @property
    def identifier(self) -> str:
        return self.chart_id

    def dependencies(self) -> tuple[str, ...]:
        return (self.dataset,)

    def required_scripts(self) -> tuple[str, ...]:
        return (JQUERY, JQUERY_UI, D3, C3, PIVOTTABLE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "vals": self.vals,
            "aggregatorName": self.aggregator,
            "rendererName": self.renderer,
            "inclusions": self.inclusions,
            "exclusions": self.exclusions,
        }

    def functional_fragment(self, ctx: RenderContext) -> str:
        return _PIVOT_JS.format(
            dataset=to_js_literal(self.dataset),
            config=to_js_literal(self.to_dict()),
            selector=to_js_literal(f"#{self.safe_id}"),
            safe_id=self.safe_id,
        )

    def appearance_fragment(self, ctx: RenderContext) -> str:
        heading = f"<h2>{escape_text(self.title)}</h2>\n" if self.title else ""
        return (
            f"{PIVOTTABLE_STYLE_FIXES}\n"
            f'<div class="plotpages-pivot">\n{heading}{notes_html(self.notes)}\n'
            f'<div id="{self.safe_id}"></div>\n'
            "</div>"
        )
