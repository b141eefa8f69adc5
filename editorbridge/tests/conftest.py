"""Shared fixtures: throwaway shell scripts standing in for external tools."""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

ToolFactory = Callable[[str, str], Path]


@pytest.fixture()
def make_tool(tmp_path: Path) -> ToolFactory:
    if sys.platform == "win32":
        pytest.skip("shell script tools require a POSIX shell")
    tool_dir = tmp_path / "bin"
    tool_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = tool_dir / name
        script.write_text("#!/bin/sh\n" + body.lstrip("\n"), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make
