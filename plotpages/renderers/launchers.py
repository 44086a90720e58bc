"""
Launcher scripts for pages that load data from disk.

Browsers refuse ``file://`` pages access to neighbouring files, so external
and parquet builds ship ``open.sh`` / ``open.bat`` that start a browser with
local file access enabled, plus a README explaining them.
"""

import logging
from pathlib import Path

from plotpages.renderers.templates import (
    _get_bat_template,
    _get_readme_template,
    _get_sh_template,
    get_text_env,
)

logger = logging.getLogger(__name__)

SH_LAUNCHER = "open.sh"
BAT_LAUNCHER = "open.bat"
README = "README.md"

# (display name, command) tried in order by open.sh
CHROMIUM_BROWSERS = [
    ("Brave Browser", "brave-browser"),
    ("Brave Browser", "brave"),
    ("Google Chrome", "google-chrome"),
    ("Chrome", "chrome"),
    ("Chromium", "chromium-browser"),
    ("Chromium", "chromium"),
]

WINDOWS_CHROME_PATHS = [
    "C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe",
    "C:\\Program Files (x86)\\Google\\Chrome\\Application\\chrome.exe",
]


def render_sh_launcher(main_file: str) -> str:
    template = get_text_env().from_string(_get_sh_template())
    return template.render(main_file=main_file, chromium_browsers=CHROMIUM_BROWSERS)


def render_bat_launcher(main_file: str) -> str:
    template = get_text_env().from_string(_get_bat_template())
    return template.render(main_file=main_file, chrome_paths=WINDOWS_CHROME_PATHS)


def render_readme(main_file: str) -> str:
    template = get_text_env().from_string(_get_readme_template())
    return template.render(main_file=main_file)


def emit_launchers(directory: Path | str, main_file: str, *, write_readme: bool = True) -> list[Path]:
    """Write the launcher scripts (and README) into ``directory``.

    Re-running overwrites the previous files.

    Args:
        directory: Project directory holding the page
        main_file: File name of the page to open, relative to ``directory``
        write_readme: Also write README.md

    Returns:
        Paths of the files written
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    sh_path = directory / SH_LAUNCHER
    sh_path.write_text(render_sh_launcher(main_file), encoding="utf-8", newline="\n")
    sh_path.chmod(0o755)

    bat_path = directory / BAT_LAUNCHER
    bat_path.write_text(render_bat_launcher(main_file), encoding="utf-8", newline="\r\n")

    written = [sh_path, bat_path]
    if write_readme:
        readme_path = directory / README
        readme_path.write_text(render_readme(main_file), encoding="utf-8")
        written.append(readme_path)

    logger.info(f"Launchers written to {directory} for {main_file}")
    return written
