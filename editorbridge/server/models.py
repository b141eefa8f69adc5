"""Request and response bodies of the HTTP endpoints."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel

from ..channels.messages import CursorRequest


class BufferRequest(CursorRequest):
    """Edited buffer plus the path it is saved under."""

    path: str


class ErrorResponse(BaseModel):
    error: str
    detail: Any = None


class ExprInfoResponse(BaseModel):
    succ: bool
    info: Optional[str] = None


class DeclarationResponse(BaseModel):
    succ: bool
    path: Optional[str] = None
    cursorLine: Optional[int] = None
    cursorCh: Optional[int] = None


class Usage(BaseModel):
    path: str
    line: int
    ch: int
    contents: List[str]


class UsagesResponse(BaseModel):
    succ: bool
    founds: Optional[List[Usage]] = None


__all__ = [
    "BufferRequest",
    "DeclarationResponse",
    "ErrorResponse",
    "ExprInfoResponse",
    "Usage",
    "UsagesResponse",
]
