"""
Self-contained sortable HTML table.

Unlike charts, a Table carries its own DataFrame and renders it straight into
the page markup; it does not need an entry in the page's dataset mapping.
"""

import pandas as pd

from plotpages.elements.base import RenderContext, VisualElement, notes_html
from plotpages.html_utils import escape_text

TABLE_STYLE = """<style>
    .plotpages-table-container { padding: 20px; margin: 10px 0; }
    .plotpages-table-container .table-wrapper { overflow-x: auto; border: 1px solid #ddd; border-radius: 5px; }
    .plotpages-table-container table { width: 100%; border-collapse: collapse; background-color: white; }
    .plotpages-table-container th {
        background-color: #f8f9fa; text-align: left; padding: 12px 15px;
        border-bottom: 2px solid #dee2e6; position: sticky; top: 0;
        cursor: pointer; user-select: none; white-space: nowrap;
    }
    .plotpages-table-container td { padding: 10px 15px; border-bottom: 1px solid #dee2e6; }
    .plotpages-table-container th.sort-asc .sort-indicator::after { content: "\\25B2"; }
    .plotpages-table-container th.sort-desc .sort-indicator::after { content: "\\25BC"; }
</style>"""

# Click a header to sort: ascending first, then toggling. Numeric when both cells parse.
_SORT_JS = """
    (function() {{
        var table = document.getElementById('table_{safe_id}');
        if (!table) return;
        var headers = table.querySelectorAll('th');
        var currentCol = -1;
        var currentDir = 'none';
        headers.forEach(function(header, colIndex) {{
            header.addEventListener('click', function() {{
                var dir = (currentCol === colIndex && currentDir === 'asc') ? 'desc' : 'asc';
                currentCol = colIndex;
                currentDir = dir;
                headers.forEach(function(h, i) {{
                    h.classList.remove('sort-asc', 'sort-desc');
                    if (i === colIndex) h.classList.add('sort-' + dir);
                }});
                var tbody = table.querySelector('tbody');
                var rows = Array.from(tbody.querySelectorAll('tr'));
                rows.sort(function(a, b) {{
                    var aVal = a.cells[colIndex].textContent.trim();
                    var bVal = b.cells[colIndex].textContent.trim();
                    var aNum = parseFloat(aVal.replace(/,/g, ''));
                    var bNum = parseFloat(bVal.replace(/,/g, ''));
                    var cmp = (!isNaN(aNum) && !isNaN(bNum)) ? aNum - bNum : aVal.localeCompare(bVal);
                    return dir === 'asc' ? cmp : -cmp;
                }});
                rows.forEach(function(row) {{ tbody.appendChild(row); }});
            }});
        }});
    }})();
"""


def _cell_text(value: object) -> str:
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    return escape_text(value)


def dataframe_to_html_table(df: pd.DataFrame, table_id: str) -> str:
    """Render a DataFrame as an HTML table; headers and cells are escaped, missing cells empty."""
    lines = [f'<table id="table_{table_id}">', "  <thead>", "    <tr>"]
    for col in df.columns:
        lines.append(f'      <th>{escape_text(col)}<span class="sort-indicator"></span></th>')
    lines += ["    </tr>", "  </thead>", "  <tbody>"]

    for row in df.itertuples(index=False, name=None):
        cells = "".join(f"<td>{_cell_text(value)}</td>" for value in row)
        lines.append(f"    <tr>{cells}</tr>")

    lines += ["  </tbody>", "</table>"]
    return "\n".join(lines)


class Table(VisualElement):
    """Sortable table embedded directly in the page."""

    def __init__(self, table_id: str, df: pd.DataFrame, *, title: str | None = None, notes: str = "") -> None:
        self.table_id = table_id
        self.df = df
        self.title = table_id if title is None else title
        self.notes = notes

    @property
    def identifier(self) -> str:
        return self.table_id

    def functional_fragment(self, ctx: RenderContext) -> str:
        return _SORT_JS.format(safe_id=self.safe_id)

    def appearance_fragment(self, ctx: RenderContext) -> str:
        return "\n".join([
            TABLE_STYLE,
            '<div class="plotpages-table-container">',
            f"<h2>{escape_text(self.title)}</h2>",
            notes_html(self.notes),
            '<div class="table-wrapper">',
            dataframe_to_html_table(self.df, self.safe_id),
            "</div>",
            "</div>",
        ])
