"""HTTP and WebSocket endpoints of the editor bridge."""

from __future__ import annotations

from fastapi import APIRouter, Request, WebSocket, status
from fastapi.responses import Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..channels.messages import INIT_EDITOR, CursorRequest, EditorReply
from ..errors import SessionClosed, TransportError
from ..logging import get_logger, session_logger
from ..tools.query import QueryMode
from .models import BufferRequest, DeclarationResponse, ExprInfoResponse, Usage, UsagesResponse
from .services import BridgeServices
from .session import resolve_identity

LOGGER = get_logger(__name__)


async def _receive_frame(websocket: WebSocket) -> str | None:
    """Return the next text frame, or ``None`` when the client hung up cleanly."""
    try:
        message = await websocket.receive()
    except RuntimeError as error:
        raise TransportError(str(error)) from error
    if message["type"] == "websocket.disconnect":
        return None
    if message.get("text") is not None:
        return message["text"]
    if message.get("bytes") is not None:
        try:
            return message["bytes"].decode("utf-8")
        except UnicodeDecodeError as error:
            raise TransportError(f"binary frame is not UTF-8: {error}") from error
    raise TransportError(f"unexpected frame {message['type']}")


def create_editor_router(services: BridgeServices) -> APIRouter:
    router = APIRouter()
    registry = services.registry

    @router.websocket("/editor/ws")
    async def editor_channel(websocket: WebSocket) -> None:
        identity = resolve_identity(websocket, services.config)
        session_id = identity.session_id
        if not session_id:
            LOGGER.warning("Rejecting editor channel without a session")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        log = session_logger(LOGGER, session_id)
        await websocket.accept()
        registry.register(session_id, websocket)
        try:
            await registry.send(
                session_id,
                EditorReply(output="Editor initialized", cmd=INIT_EDITOR).payload(),
                channel=websocket,
            )
            while True:
                raw = await _receive_frame(websocket)
                if raw is None:
                    log.info("Editor channel closed by client")
                    return
                if registry.get(session_id) is not websocket:
                    log.info("Editor channel superseded by a reconnect")
                    return
                try:
                    request = CursorRequest.model_validate_json(raw)
                except ValidationError as error:
                    log.error("Editor WS ERROR: %s", error)
                    await websocket.close(code=status.WS_1003_UNSUPPORTED_DATA)
                    return
                reply = await run_in_threadpool(services.complete_turn, request)
                await registry.send(session_id, reply.payload(), channel=websocket)
        except (TransportError, SessionClosed) as error:
            log.error("Editor WS ERROR: %s", error)
        finally:
            registry.remove(session_id, websocket)

    @router.post("/autocomplete")
    async def autocomplete(body: BufferRequest, request: Request) -> Response:
        identity = resolve_identity(request, services.config)
        output = await run_in_threadpool(services.complete_once, body, identity.username)
        return Response(content=output, media_type="application/json")

    @router.post("/exprinfo", response_model=ExprInfoResponse, response_model_exclude_none=True)
    async def expression_info(body: BufferRequest, request: Request) -> ExprInfoResponse:
        identity = resolve_identity(request, services.config)
        info = await run_in_threadpool(services.run_query, body, identity.username, QueryMode.INFO)
        if info is None:
            return ExprInfoResponse(succ=False)
        return ExprInfoResponse(succ=True, info=info)

    @router.post("/find/decl", response_model=DeclarationResponse, response_model_exclude_none=True)
    async def find_declaration(body: BufferRequest, request: Request) -> DeclarationResponse:
        identity = resolve_identity(request, services.config)
        found = await run_in_threadpool(services.find_declaration, body, identity.username)
        if found is None:
            return DeclarationResponse(succ=False)
        return DeclarationResponse(succ=True, path=found.path, cursorLine=found.line, cursorCh=found.column)

    @router.post("/find/usages", response_model=UsagesResponse, response_model_exclude_none=True)
    async def find_usages(body: BufferRequest, request: Request) -> UsagesResponse:
        identity = resolve_identity(request, services.config)
        founds = await run_in_threadpool(services.find_usages, body, identity.username)
        if founds is None:
            return UsagesResponse(succ=False)
        return UsagesResponse(succ=True, founds=[Usage(**found.as_usage()) for found in founds])

    return router


__all__ = ["create_editor_router"]
