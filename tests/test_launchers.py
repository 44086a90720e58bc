"""
Tests for the launcher scripts written next to external pages.
"""

import stat
from pathlib import Path

import pytest

from plotpages.renderers.launchers import (
    BAT_LAUNCHER,
    README,
    SH_LAUNCHER,
    emit_launchers,
    render_bat_launcher,
    render_sh_launcher,
)


@pytest.fixture
def launchers(tmp_path: Path) -> list[Path]:
    return emit_launchers(tmp_path / "report", "report.html")


# =============================================================================
# SHELL LAUNCHER TESTS
# =============================================================================


class TestShellLauncher:
    """Tests for open.sh."""

    def test_executable(self, launchers: list[Path]) -> None:
        sh_path = launchers[0]
        assert sh_path.name == SH_LAUNCHER
        assert stat.S_IMODE(sh_path.stat().st_mode) == 0o755

    def test_unix_line_endings(self, launchers: list[Path]) -> None:
        content = launchers[0].read_bytes()
        assert content.startswith(b"#!/bin/bash\n")
        assert b"\r\n" not in content

    def test_targets_main_file(self) -> None:
        script = render_sh_launcher("cover.html")
        assert 'HTML_FILE="$SCRIPT_DIR/cover.html"' in script

    def test_browser_order(self) -> None:
        script = render_sh_launcher("x.html")
        positions = [
            script.index("command -v brave-browser"),
            script.index("command -v google-chrome"),
            script.index("command -v chromium-browser"),
            script.index("command -v firefox"),
            script.index("command -v xdg-open"),
        ]
        assert positions == sorted(positions)

    def test_chromium_flags(self) -> None:
        script = render_sh_launcher("x.html")
        assert "--allow-file-access-from-files" in script
        assert "--user-data-dir=$TEMP_USER_DIR" in script
        assert 'firefox "$HTML_FILE"' in script


# =============================================================================
# WINDOWS LAUNCHER TESTS
# =============================================================================


class TestBatchLauncher:
    """Tests for open.bat."""

    def test_crlf_line_endings(self, launchers: list[Path]) -> None:
        bat_path = launchers[1]
        content = bat_path.read_bytes()

        assert bat_path.name == BAT_LAUNCHER
        assert b"\r\n" in content
        assert b"\n" not in content.replace(b"\r\n", b"")

    def test_content(self) -> None:
        script = render_bat_launcher("cover.html")

        assert script.startswith("@echo off")
        assert 'set "HTML_FILE=%~dp0cover.html"' in script
        assert "C:\\Program Files\\Google\\Chrome\\Application\\chrome.exe" in script
        assert script.index("brave.exe") < script.index("chrome.exe") < script.index("firefox.exe")
        assert 'start "" "%HTML_FILE%"' in script


# =============================================================================
# EMIT TESTS
# =============================================================================


class TestEmitLaunchers:
    """Tests for emit_launchers()."""

    def test_files_written(self, tmp_path: Path, launchers: list[Path]) -> None:
        directory = tmp_path / "report"
        assert launchers == [directory / SH_LAUNCHER, directory / BAT_LAUNCHER, directory / README]
        assert "report.html" in (directory / README).read_text()

    def test_without_readme(self, tmp_path: Path) -> None:
        written = emit_launchers(tmp_path, "a.html", write_readme=False)

        assert [p.name for p in written] == [SH_LAUNCHER, BAT_LAUNCHER]
        assert not (tmp_path / README).exists()

    def test_rerun_overwrites(self, tmp_path: Path) -> None:
        emit_launchers(tmp_path, "old.html")
        emit_launchers(tmp_path, "new.html")

        content = (tmp_path / SH_LAUNCHER).read_text()
        assert "new.html" in content
        assert "old.html" not in content
        assert stat.S_IMODE((tmp_path / SH_LAUNCHER).stat().st_mode) == 0o755
