"""Wrapper around the offset-based completion tool (gocode)."""

from __future__ import annotations

import threading

from ..errors import BridgeError
from ..logging import get_logger
from ..position import ENCODING
from .base import ExternalTool

LOGGER = get_logger(__name__)

# gocode keeps lib-path in daemon-wide state; set + autocomplete must not interleave.
_LIB_PATH_LOCK = threading.Lock()


class CompletionTool(ExternalTool):
    """Invoke ``<tool> -f=json autocomplete <offset>`` with source on stdin."""

    def autocomplete(self, code: str, offset: int) -> str:
        result = self.run(
            ["-f=json", "autocomplete", str(offset)],
            stdin_payload=code.encode(ENCODING),
        )
        return result.text

    def set_lib_path(self, lib_path: str) -> None:
        """Best-effort reconfiguration of the tool's package search path."""
        LOGGER.debug("%s set lib-path %s", self.executable, lib_path)
        try:
            self.run(["set", "lib-path", lib_path], combined_output=True)
        except BridgeError as error:
            LOGGER.warning("Unable to set lib-path for %s: %s", self.executable, error)

    def autocomplete_in_workspace(self, code: str, offset: int, lib_path: str) -> str:
        """Point the tool at a workspace's packages and complete in one step.

        Serialised within this process only; other processes sharing the
        tool daemon can still swap lib-path between the two calls.
        """
        with _LIB_PATH_LOCK:
            self.set_lib_path(lib_path)
            result = self.run(
                ["-f=json", "autocomplete", str(offset)],
                stdin_payload=code.encode(ENCODING),
                combined_output=True,
            )
        return result.text


__all__ = ["CompletionTool"]
