"""Blocking request flows shared by the HTTP and channel endpoints."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..channels.messages import AUTOCOMPLETE, CursorRequest, EditorReply
from ..channels.registry import SessionRegistry
from ..config import BridgeConfig
from ..errors import BridgeError
from ..locations import SourceLocation, parse_location, parse_locations
from ..logging import get_logger
from ..paths import persist_buffer, workspace_lib_path
from ..position import cursor_offset
from ..tools.base import resolve_executable
from ..tools.completion import CompletionTool
from ..tools.query import QueryMode, QueryTool
from .models import BufferRequest

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class BridgeServices:
    config: BridgeConfig
    registry: SessionRegistry
    completion: CompletionTool
    query: QueryTool

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "BridgeServices":
        tools = config.tools
        return cls(
            config=config,
            registry=SessionRegistry(send_timeout=config.send_timeout_seconds),
            completion=CompletionTool(
                resolve_executable(tools.completion, tools.tool_dir),
                timeout=tools.timeout_seconds,
            ),
            query=QueryTool(
                resolve_executable(tools.query, tools.tool_dir),
                timeout=tools.timeout_seconds,
                goroot=tools.goroot or os.environ.get("GOROOT"),
            ),
        )

    def complete_turn(self, request: CursorRequest) -> EditorReply:
        """One live-channel turn; failures are reported in the reply."""
        try:
            offset = cursor_offset(request.code, request.cursor_line, request.cursor_ch)
            output = self.completion.autocomplete(request.code, offset)
        except BridgeError as error:
            LOGGER.warning("Autocomplete turn failed: %s", error)
            return EditorReply(output="", cmd=AUTOCOMPLETE, error=str(error))
        return EditorReply(output=output, cmd=AUTOCOMPLETE)

    def complete_once(self, body: BufferRequest, username: str) -> str:
        persist_buffer(body.path, body.code)
        offset = cursor_offset(body.code, body.cursor_line, body.cursor_ch)
        lib_path = workspace_lib_path(self.config.user_workspace(username))
        return self.completion.autocomplete_in_workspace(body.code, offset, lib_path)

    def run_query(self, body: BufferRequest, username: str, mode: QueryMode) -> str | None:
        """Persist the buffer and run a cursor query.

        Returns ``None`` when the query yields nothing usable. Only
        :class:`PersistenceError` propagates.
        """
        persist_buffer(body.path, body.code)
        try:
            offset = cursor_offset(body.code, body.cursor_line, body.cursor_ch)
            output = self.query.query(body.path, offset, mode, self.config.user_workspace(username))
        except BridgeError as error:
            LOGGER.error("Query -%s failed for %s: %s", mode.value, body.path, error)
            return None
        return output or None

    def find_declaration(self, body: BufferRequest, username: str) -> SourceLocation | None:
        output = self.run_query(body, username, QueryMode.DEFINITION)
        if output is None:
            return None
        try:
            return parse_location(output)
        except BridgeError as error:
            LOGGER.error("Unexpected declaration output %r: %s", output, error)
            return None

    def find_usages(self, body: BufferRequest, username: str) -> list[SourceLocation] | None:
        output = self.run_query(body, username, QueryMode.USAGES)
        if output is None:
            return None
        try:
            return parse_locations(output)
        except BridgeError as error:
            LOGGER.error("Unexpected usages output: %s", error)
            return None


__all__ = ["BridgeServices"]
