"""Path and platform helper utilities."""

from __future__ import annotations

import os
import platform
import sys
from pathlib import Path

from .errors import PersistenceError
from .logging import get_logger

LOGGER = get_logger(__name__)

_GOOS = {"linux": "linux", "darwin": "darwin", "win32": "windows", "cygwin": "windows"}
_GOARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
}


def platform_identifiers() -> tuple[str, str]:
    """Return Go-style ``(GOOS, GOARCH)`` names for the running host."""
    goos = next((name for prefix, name in _GOOS.items() if sys.platform.startswith(prefix)), sys.platform)
    machine = platform.machine().lower()
    return goos, _GOARCH.get(machine, machine)


def workspace_lib_path(user_workspace: str) -> str:
    """Return the compiled-package search path for every workspace in the list."""
    goos, goarch = platform_identifiers()
    lib_path = ""
    for workspace in user_workspace.split(os.pathsep):
        if not workspace:
            continue
        lib_path += str(Path(workspace) / "pkg" / f"{goos}_{goarch}") + os.pathsep
    return lib_path


def split_source_path(path: str | Path) -> tuple[Path, str]:
    """Return the containing directory and file name of a source path."""
    source = Path(path)
    return source.parent, source.name


def persist_buffer(path: str | Path, code: str) -> None:
    """Write the edited buffer so the query tool sees the same snapshot."""
    target = Path(path)
    try:
        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.write(code)
    except OSError as error:
        LOGGER.error("Unable to persist %s: %s", target, error)
        raise PersistenceError(f"cannot write {target}: {error}") from error


__all__ = ["persist_buffer", "platform_identifiers", "split_source_path", "workspace_lib_path"]
