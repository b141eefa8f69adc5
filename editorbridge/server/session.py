"""Session identity lookup for HTTP requests and editor channels.

Authentication lives outside the bridge; these helpers only read the session
token and user name the front end already carries.
"""

from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import HTTPConnection

from ..config import BridgeConfig

USER_HEADER = "X-Editor-User"


@dataclass(slots=True, frozen=True)
class EditorIdentity:
    session_id: str | None
    username: str


def resolve_identity(connection: HTTPConnection, config: BridgeConfig) -> EditorIdentity:
    session_id = connection.cookies.get(config.session_cookie) or connection.query_params.get("sid")
    username = (
        connection.headers.get(USER_HEADER)
        or connection.query_params.get("user")
        or config.default_user
    )
    return EditorIdentity(session_id=session_id or None, username=username)


__all__ = ["EditorIdentity", "USER_HEADER", "resolve_identity"]
