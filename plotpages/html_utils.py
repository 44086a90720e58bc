"""
HTML escaping helpers shared by the serializer, the elements and the page builder.

Escaping depends on where the text lands:
- ``escape_text``: full HTML escaping for plain text (titles, table cells, link labels)
- ``neutralize_closing_tags``: caller-supplied raw HTML (notes, text blocks); only
  ``</script`` and ``</style`` are rewritten
- ``encode_script_data`` / ``decode_script_data``: CSV blobs inside
  ``<script type="text/plain">`` markers
- ``escape_json_for_script``: JSON placed inside any ``<script>`` element
"""

import html
import re

_CLOSING_TAG = re.compile(r"</(script|style)", re.IGNORECASE)
_SCRIPT_DATA_UNSAFE = re.compile(r"\\|</(?=script|style)|<!--", re.IGNORECASE)
_BACKSLASH_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


def escape_text(value: object) -> str:
    """Escape plain text for use in element content or a quoted attribute."""
    return html.escape("" if value is None else str(value), quote=True)


def neutralize_closing_tags(content: str) -> str:
    """Rewrite ``</script`` / ``</style`` as ``<\\/script`` / ``<\\/style``.

    Used for raw HTML that is shown, never read back, so no inverse exists.
    """
    return _CLOSING_TAG.sub(r"<\\/\1", content)


def _escape_script_data(match: re.Match) -> str:
    token = match.group(0)
    if token == "\\":
        return "\\\\"
    return token[0] + "\\" + token[1:]


def encode_script_data(content: str) -> str:
    """Encode text for the body of a ``<script type="text/plain">`` marker.

    Backslashes are doubled, then ``</script``, ``</style`` and ``<!--`` get a
    backslash after the ``<``. Script data can then never end early or enter
    the tokenizer's escaped state, and ``decode_script_data`` (and its
    JavaScript twin in the page loader) restores the exact input.
    """
    return _SCRIPT_DATA_UNSAFE.sub(_escape_script_data, content)


def decode_script_data(content: str) -> str:
    """Inverse of ``encode_script_data``: every ``\\x`` becomes ``x``."""
    return _BACKSLASH_ESCAPE.sub(r"\1", content)


def escape_json_for_script(text: str) -> str:
    """Make JSON text safe inside a ``<script>`` element.

    ``<`` only occurs inside JSON strings, where ``\\u003c`` decodes to the
    same character, so the value is unchanged for any JSON parser.
    """
    return text.replace("<", "\\u003c")


def attribution_html(text: str) -> str:
    """Small right-aligned caption shown under a chart ("Data: sales.parquet")."""
    return (
        '<p class="plotpages-attribution" style="text-align: right; font-size: 0.8em; '
        f'color: #666; margin-top: -10px; margin-bottom: 10px;">{escape_text(text)}</p>'
    )


SEGMENT_SEPARATOR = "\n<br>\n<hr>\n<br>\n"
