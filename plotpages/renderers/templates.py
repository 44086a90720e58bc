"""
Inline Jinja2 templates for pages and launcher files.

Templates are kept as Python strings so the package needs no template files
at runtime. Page templates autoescape; launcher templates produce shell,
batch and Markdown text and do not.
"""

from jinja2 import Environment, select_autoescape


def get_page_env() -> Environment:
    """Jinja2 environment for HTML pages (autoescaping on)."""
    return Environment(
        autoescape=select_autoescape(["html", "xml"], default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def get_text_env() -> Environment:
    """Jinja2 environment for launcher scripts and README (no escaping)."""
    return Environment(
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


# =============================================================================
# PAGE
# =============================================================================


def _get_page_template() -> str:
    """Get the HTML page template."""
    return '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ tab_title }}</title>
{{ head_scripts | safe }}
    <style>
{{ page_css | safe }}
    </style>
</head>
<body>
{% for marker in data_markers %}
{{ marker | safe }}
{% endfor %}
    <script>
{{ loader_js | safe }}
    var PLOTPAGES_DATASETS = {{ dataset_ids | tojson }};

    document.addEventListener('DOMContentLoaded', function() {
{% for fragment in functional_fragments %}
{{ fragment | safe }}
{% endfor %}
    });
    </script>

    <div class="plotpages-page">
{% if page_header %}
        <h1>{{ page_header | safe }}</h1>
{% endif %}
{% if notes %}
        <div class="plotpages-page-notes">{{ notes | safe }}</div>
{% endif %}
{{ body | safe }}
    </div>

    <footer class="plotpages-footer">
        Generated by plotpages {{ version }} ({{ dataformat }})
    </footer>
</body>
</html>
'''


def _get_page_css() -> str:
    """Get the base page stylesheet."""
    return '''
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
            margin: 0;
            padding: 20px;
            color: #333;
        }
        .plotpages-page { max-width: 1400px; margin: 0 auto; }
        .plotpages-page h1 { font-size: 2em; margin-bottom: 0.5em; }
        .plotpages-page-notes, .plotpages-notes { color: #555; margin-bottom: 1em; }
        .plotpages-footer {
            max-width: 1400px;
            margin: 40px auto 0;
            font-size: 0.8em;
            color: #999;
            text-align: center;
        }
'''


def _get_loader_js() -> str:
    """Viewer-side ``loadDataset(name)``: resolves to an array of row objects.

    Embedded blobs are read from their ``<script type="text/plain">`` marker;
    external files are fetched relative to the page; parquet is decoded with
    parquet-wasm and Apache Arrow once the loader module has signalled ready.
    """
    return r'''
    function plotpagesDecodeScriptData(text) {
        return text.replace(/\\([\s\S])/g, '$1');
    }

    function plotpagesParseCsv(text) {
        if (!text.trim()) return [];
        return Papa.parse(text.trim(), {header: true, dynamicTyping: true, skipEmptyLines: true}).data;
    }

    function plotpagesParquetReady() {
        if (window.parquetWasm && window.Arrow) return Promise.resolve();
        return new Promise(function(resolve) {
            window.addEventListener('parquet-ready', resolve, {once: true});
        });
    }

    function plotpagesFetch(src) {
        return fetch(src).then(function(response) {
            if (!response.ok) throw new Error('Failed to load ' + src + ': ' + response.status);
            return response;
        });
    }

    function loadDataset(name) {
        var id = PLOTPAGES_DATASETS[name];
        var el = id ? document.getElementById(id) : null;
        if (!el) return Promise.reject(new Error('Dataset not found: ' + name));

        var format = el.getAttribute('data-format');
        var src = el.getAttribute('data-src');

        if (format === 'csv_embedded') {
            return Promise.resolve(plotpagesParseCsv(plotpagesDecodeScriptData(el.textContent)));
        }
        if (format === 'json_embedded') {
            var text = el.textContent.trim();
            return Promise.resolve(text ? JSON.parse(text) : []);
        }
        if (format === 'csv_external') {
            return plotpagesFetch(src).then(function(r) { return r.text(); }).then(plotpagesParseCsv);
        }
        if (format === 'json_external') {
            return plotpagesFetch(src).then(function(r) { return r.json(); });
        }
        if (format === 'parquet') {
            return plotpagesParquetReady()
                .then(function() { return plotpagesFetch(src); })
                .then(function(r) { return r.arrayBuffer(); })
                .then(function(buffer) {
                    var wasmTable = window.parquetWasm.readParquet(new Uint8Array(buffer));
                    var table = window.Arrow.tableFromIPC(wasmTable.intoIPCStream());
                    return table.toArray().map(function(row) { return row.toJSON(); });
                });
        }
        return Promise.reject(new Error('Unknown data format: ' + format));
    }
'''


# =============================================================================
# LAUNCHERS
# =============================================================================


def _get_sh_template() -> str:
    """POSIX launcher: Brave, Chrome, Chromium, Firefox, then the system opener."""
    return '''#!/bin/bash
# Opens {{ main_file }} with local file access enabled.
# Tries browsers in order: Brave, Chrome, Chromium, Firefox, then system default

SCRIPT_DIR="$( cd "$( dirname "${BASH_SOURCE[0]}" )" && pwd )"
HTML_FILE="$SCRIPT_DIR/{{ main_file }}"

# Chromium-based browsers need a fresh profile for the relaxed flags to apply
TEMP_USER_DIR="$(mktemp -d)"
FLAGS="--allow-file-access-from-files --disable-web-security --user-data-dir=$TEMP_USER_DIR"

{% for name, binary in chromium_browsers %}
if command -v {{ binary }} &> /dev/null; then
    echo "Opening with {{ name }}..."
    {{ binary }} $FLAGS "$HTML_FILE" &
    exit 0
fi

{% endfor %}
if command -v firefox &> /dev/null; then
    echo "Opening with Firefox..."
    firefox "$HTML_FILE" &
    exit 0
fi

echo "Opening with default browser..."
if command -v xdg-open &> /dev/null; then
    xdg-open "$HTML_FILE" &
elif command -v open &> /dev/null; then
    open "$HTML_FILE" &
else
    echo "Could not find a suitable browser. Please open $HTML_FILE manually."
    exit 1
fi
'''


def _get_bat_template() -> str:
    """Windows launcher: Brave, Chrome, Firefox, then the default browser."""
    return '''@echo off
REM Opens {{ main_file }} with local file access enabled.
REM Tries browsers in order: Brave, Chrome, Firefox, then system default

set "HTML_FILE=%~dp0{{ main_file }}"

where brave.exe >nul 2>&1
if %ERRORLEVEL% EQU 0 (
    echo Opening with Brave Browser...
    start brave.exe --allow-file-access-from-files "%HTML_FILE%"
    exit /b
)

where chrome.exe >nul 2>&1
if %ERRORLEVEL% EQU 0 (
    echo Opening with Google Chrome...
    start chrome.exe --allow-file-access-from-files "%HTML_FILE%"
    exit /b
)

{% for path in chrome_paths %}
if exist "{{ path }}" (
    echo Opening with Google Chrome...
    start "" "{{ path }}" --allow-file-access-from-files "%HTML_FILE%"
    exit /b
)

{% endfor %}
where firefox.exe >nul 2>&1
if %ERRORLEVEL% EQU 0 (
    echo Opening with Firefox...
    start firefox.exe "%HTML_FILE%"
    exit /b
)

if exist "C:\\Program Files\\Mozilla Firefox\\firefox.exe" (
    echo Opening with Firefox...
    start "" "C:\\Program Files\\Mozilla Firefox\\firefox.exe" "%HTML_FILE%"
    exit /b
)

echo Opening with default browser...
start "" "%HTML_FILE%"
'''


def _get_readme_template() -> str:
    """README placed next to the launchers."""
    return '''# Viewing {{ main_file }}

This folder was generated by plotpages. It holds the page `{{ main_file }}`,
the data files it loads from `data/`, and two launcher scripts.

## Opening the page

Browsers block pages opened from disk (`file://`) from reading other local
files, so the charts cannot load their data when the page is double-clicked.
Use a launcher instead; it starts a browser with local file access enabled:

- Linux / macOS: `./open.sh`
- Windows: double-click `open.bat`

## If the launchers do not work

Rebuild the page with `dataformat="csv_embedded"` or `dataformat="json_embedded"`.
The data is then stored inside the HTML file, which opens anywhere without
special permissions at the cost of a larger file.
'''
