"""
Image elements: a single picture and a slideshow of images.

Embedded formats inline the images (base64 data URIs, SVG as markup) so the
page stays a single file. External formats copy the images next to the page
(``pictures/`` and ``slides/``) and reference them by relative path.
"""

import base64
import logging
import shutil
from pathlib import Path

from plotpages.elements.base import RenderContext, VisualElement, notes_html
from plotpages.exceptions import ConfigurationError
from plotpages.html_utils import escape_text, neutralize_closing_tags

logger = logging.getLogger(__name__)

PICTURES_DIRNAME = "pictures"
SLIDES_DIRNAME = "slides"

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}


def _check_image(path: Path | str) -> Path:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image file not found: {path}")
    if path.suffix.lower() not in MIME_TYPES:
        raise ConfigurationError(
            f"Unsupported image type {path.suffix!r}; use one of {', '.join(MIME_TYPES)}",
            option="image_path",
            value=str(path),
        )
    return path


def image_data_uri(path: Path, ctx: RenderContext) -> str:
    """Base64 data URI of an image, warning when it bloats the page."""
    size = path.stat().st_size
    if size > ctx.settings.image_warning_bytes:
        logger.warning(
            f"Embedding image {path.name} ({size / 1_048_576:.1f} MB) makes the page large; "
            f"consider an external dataformat"
        )
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{MIME_TYPES[path.suffix.lower()]};base64,{encoded}"


def _copy_image(source: Path, ctx: RenderContext, relative: str) -> Path:
    target = Path(ctx.output_dir or ".") / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    logger.info(f"Image copied to {target}")
    return target


# =============================================================================
# PICTURE
# =============================================================================


class Picture(VisualElement):
    """A single image file (PNG, JPEG, GIF or SVG)."""

    def __init__(self, picture_id: str, image_path: Path | str, *, title: str = "", notes: str = "") -> None:
        self.picture_id = picture_id
        self.image_path = _check_image(image_path)
        self.title = title
        self.notes = notes

    @property
    def identifier(self) -> str:
        return self.picture_id

    @property
    def is_svg(self) -> bool:
        return self.image_path.suffix.lower() == ".svg"

    def relative_path(self, ctx: RenderContext) -> str:
        return ctx.asset_path(PICTURES_DIRNAME, f"{self.safe_id}{self.image_path.suffix.lower()}")

    def functional_fragment(self, ctx: RenderContext) -> str:
        return ""

    def _image_html(self, ctx: RenderContext) -> str:
        alt = escape_text(self.title or self.picture_id)
        if ctx.dataformat.is_external:
            return f'<img src="{self.relative_path(ctx)}" alt="{alt}" style="max-width: 100%;">'
        if self.is_svg:
            svg = self.image_path.read_text(encoding="utf-8")
            return neutralize_closing_tags(svg)
        return f'<img src="{image_data_uri(self.image_path, ctx)}" alt="{alt}" style="max-width: 100%;">'

    def appearance_fragment(self, ctx: RenderContext) -> str:
        heading = f"<h2>{escape_text(self.title)}</h2>\n" if self.title else ""
        return (
            f'<div class="plotpages-picture" id="{self.safe_id}">\n{heading}'
            f"{self._image_html(ctx)}\n{notes_html(self.notes)}\n</div>"
        )

    def write_assets(self, ctx: RenderContext) -> list[Path]:
        if ctx.dataformat.is_embedded:
            return []
        return [_copy_image(self.image_path, ctx, self.relative_path(ctx))]


# =============================================================================
# SLIDES
# =============================================================================

MIN_DELAY = 0.05
MAX_DELAY = 5.0

_SLIDES_JS = """
    (function() {{
        var container = document.getElementById('{safe_id}');
        if (!container) return;
        var slides = container.querySelectorAll('.plotpages-slide');
        var counter = container.querySelector('.plotpages-slide-counter');
        var index = 0;
        var timer = null;
        function show(i) {{
            index = (i + slides.length) % slides.length;
            slides.forEach(function(s, j) {{ s.style.display = j === index ? '' : 'none'; }});
            counter.textContent = (index + 1) + ' / ' + slides.length;
        }}
        function toggle() {{
            if (timer) {{
                clearInterval(timer);
                timer = null;
            }} else {{
                timer = setInterval(function() {{ show(index + 1); }}, {delay_ms});
            }}
        }}
        container.querySelector('.plotpages-prev').addEventListener('click', function() {{ show(index - 1); }});
        container.querySelector('.plotpages-next').addEventListener('click', function() {{ show(index + 1); }});
        container.querySelector('.plotpages-play').addEventListener('click', toggle);
        show(0);
        if ({autoplay}) toggle();
    }})();
"""


class Slides(VisualElement):
    """Slideshow over an ordered list of images with prev/next and autoplay."""

    def __init__(
        self,
        slides_id: str,
        image_paths: list[Path | str],
        *,
        title: str = "Slides",
        notes: str = "",
        autoplay: bool = False,
        delay: float = 0.5,
    ) -> None:
        if not image_paths:
            raise ConfigurationError("Slides need at least one image", option="image_paths", value=slides_id)
        if not MIN_DELAY <= delay <= MAX_DELAY:
            raise ConfigurationError(
                f"delay must be between {MIN_DELAY} and {MAX_DELAY} seconds; got {delay}",
                option="delay",
                value=delay,
            )
        self.slides_id = slides_id
        self.image_paths = [_check_image(p) for p in image_paths]
        self.title = title
        self.notes = notes
        self.autoplay = autoplay
        self.delay = delay

    @property
    def identifier(self) -> str:
        return self.slides_id

    def relative_path(self, ctx: RenderContext, index: int) -> str:
        suffix = self.image_paths[index].suffix.lower()
        return ctx.asset_path(SLIDES_DIRNAME, f"{self.safe_id}_{index + 1}{suffix}")

    def functional_fragment(self, ctx: RenderContext) -> str:
        return _SLIDES_JS.format(
            safe_id=self.safe_id,
            delay_ms=int(self.delay * 1000),
            autoplay="true" if self.autoplay else "false",
        )

    def appearance_fragment(self, ctx: RenderContext) -> str:
        parts = [
            f'<div class="plotpages-slides" id="{self.safe_id}">',
            f"<h2>{escape_text(self.title)}</h2>",
            '<div class="plotpages-slide-controls">',
            '<button type="button" class="plotpages-prev">&larr;</button>',
            '<span class="plotpages-slide-counter"></span>',
            '<button type="button" class="plotpages-next">&rarr;</button>',
            '<button type="button" class="plotpages-play">Play/Pause</button>',
            "</div>",
        ]
        for index, path in enumerate(self.image_paths):
            if ctx.dataformat.is_external:
                src = self.relative_path(ctx, index)
            else:
                src = image_data_uri(path, ctx)
            parts.append(
                f'<div class="plotpages-slide"><img src="{src}" alt="Slide {index + 1}" '
                'style="max-width: 100%;"></div>'
            )
        parts.append(notes_html(self.notes))
        parts.append("</div>")
        return "\n".join(parts)

    def write_assets(self, ctx: RenderContext) -> list[Path]:
        if ctx.dataformat.is_embedded:
            return []
        return [_copy_image(path, ctx, self.relative_path(ctx, i)) for i, path in enumerate(self.image_paths)]
