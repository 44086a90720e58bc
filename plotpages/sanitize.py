"""
Filename and script-identifier sanitization.

The same sanitized name must be reproducible by the page builder and the
project builder independently, so everything here is a pure function of its
input.
"""

import re
from collections.abc import Iterable

from plotpages.exceptions import AmbiguousIdentifierError

PLACEHOLDER = "unnamed"
FILENAME_PLACEHOLDER = "page"
MAX_FILENAME_LENGTH = 50

_ILLEGAL = re.compile(r"[^A-Za-z0-9_]")
_UNDERSCORE_RUNS = re.compile(r"_{2,}")


def sanitize(name: str) -> str:
    """Map an arbitrary name to a safe file stem and script identifier.

    Args:
        name: User-chosen name (dataset label, chart title, output stem)

    Returns:
        Non-empty string matching ``[A-Za-z_][A-Za-z0-9_]*``
    """
    safe = _ILLEGAL.sub("_", str(name))
    safe = _UNDERSCORE_RUNS.sub("_", safe).strip("_")
    if not safe:
        return PLACEHOLDER
    if safe[0].isdigit():
        safe = f"_{safe}"
    return safe


def sanitize_unique(names: Iterable[str], *, kind: str = "name") -> dict[str, str]:
    """Sanitize many names at once, rejecting collisions.

    Args:
        names: Original names, in declaration order
        kind: Label used in the error message ("dataset", "element", ...)

    Returns:
        Mapping of original name to sanitized name

    Raises:
        AmbiguousIdentifierError: If two distinct names share a sanitized name
    """
    mapping: dict[str, str] = {}
    claimed: dict[str, str] = {}

    for name in names:
        if name in mapping:
            continue
        safe = sanitize(name)
        if safe in claimed:
            raise AmbiguousIdentifierError(
                f"{kind} names {claimed[safe]!r} and {name!r} both sanitize to {safe!r}",
                identifier=safe,
                originals=[claimed[safe], name],
            )
        claimed[safe] = name
        mapping[name] = safe

    return mapping


def sanitize_filename(title: str) -> str:
    """Turn a page title into a lowercase filename stem.

    Used for link aliases: a caller may link to ``"<sanitized title>.html"``
    and the project builder resolves it to the page's positional file.
    """
    safe = re.sub(r"[\s\-.:/\\]", "_", title)
    safe = re.sub(r"[^\w]", "", safe).lower()
    safe = safe[:MAX_FILENAME_LENGTH]
    return safe or FILENAME_PLACEHOLDER
