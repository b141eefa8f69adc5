"""Typed frames exchanged over the editor channel."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

INIT_EDITOR = "init-editor"
AUTOCOMPLETE = "autocomplete"


class CursorRequest(BaseModel):
    """Source snapshot plus a zero-based cursor."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    cursor_line: int = Field(alias="cursorLine", ge=0)
    cursor_ch: int = Field(alias="cursorCh", ge=0)


class EditorReply(BaseModel):
    output: str
    cmd: Literal["init-editor", "autocomplete"]
    error: str | None = None

    def payload(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


__all__ = ["AUTOCOMPLETE", "CursorRequest", "EditorReply", "INIT_EDITOR"]
