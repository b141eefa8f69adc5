"""Process-wide table of live editor channels keyed by session id."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Mapping, Protocol

import orjson

from ..errors import SessionClosed
from ..logging import get_logger

LOGGER = get_logger(__name__)


class DuplexChannel(Protocol):
    """Anything that can push a text frame to one client (a WebSocket)."""

    async def send_text(self, data: str) -> None: ...


class SessionRegistry:
    """Own the channel handle of every live editing session.

    Map access is guarded by a lock that is never held across channel writes
    or tool calls.
    """

    def __init__(self, *, send_timeout: float | None = 5.0) -> None:
        self._channels: dict[str, DuplexChannel] = {}
        self._lock = threading.Lock()
        self.send_timeout = send_timeout

    def register(self, session_id: str, channel: DuplexChannel) -> DuplexChannel | None:
        """Bind a channel to a session, replacing (not closing) any previous one."""
        with self._lock:
            previous = self._channels.get(session_id)
            self._channels[session_id] = channel
            total = len(self._channels)
        if previous is not None and previous is not channel:
            LOGGER.info("Session [%s] reconnected; previous channel replaced", session_id)
        LOGGER.info("Registered editor channel for session [%s], %d open", session_id, total)
        return previous

    def get(self, session_id: str) -> DuplexChannel | None:
        with self._lock:
            return self._channels.get(session_id)

    def remove(self, session_id: str, channel: DuplexChannel | None = None) -> bool:
        """Drop a session's channel.

        With ``channel`` given, only drop it if it is still the registered one,
        so a finishing flow cannot evict the channel of a reconnect.
        """
        with self._lock:
            current = self._channels.get(session_id)
            if current is None or (channel is not None and current is not channel):
                return False
            del self._channels[session_id]
            total = len(self._channels)
        LOGGER.info("Removed editor channel for session [%s], %d open", session_id, total)
        return True

    async def send(
        self, session_id: str, message: Mapping[str, Any], *, channel: DuplexChannel | None = None
    ) -> None:
        """Write one JSON frame to a session, failing fast instead of queueing.

        With ``channel`` given, the frame is only written if that channel is
        still the registered one; a replaced channel gets ``SessionClosed``.
        """
        current = self.get(session_id)
        if current is None:
            raise SessionClosed(f"no channel registered for session {session_id}")
        if channel is not None and current is not channel:
            raise SessionClosed(f"session {session_id} was taken over by a newer channel")
        data = orjson.dumps(dict(message)).decode("utf-8")
        try:
            await asyncio.wait_for(current.send_text(data), timeout=self.send_timeout)
        except asyncio.TimeoutError as exc:
            LOGGER.error("Send to session [%s] timed out after %ss", session_id, self.send_timeout)
            raise SessionClosed(f"send to session {session_id} timed out") from exc
        except Exception as exc:  # noqa: BLE001 - any transport failure closes the session
            LOGGER.error("Send to session [%s] failed: %s", session_id, exc)
            raise SessionClosed(f"send to session {session_id} failed: {exc}") from exc

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._channels


__all__ = ["DuplexChannel", "SessionRegistry"]
