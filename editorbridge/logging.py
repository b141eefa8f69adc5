"""Logging utilities."""

from __future__ import annotations

import logging
from typing import Any, Iterable, MutableMapping

from rich.console import Console
from rich.logging import RichHandler

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str = "INFO", *, rich_tracebacks: bool = True) -> None:
    """Send root and uvicorn records through one rich stderr handler."""
    console = Console(stderr=True)
    handler = RichHandler(console=console, rich_tracebacks=rich_tracebacks, markup=False, show_path=False)
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str, *extra_names: Iterable[str]) -> logging.Logger:
    """Return a namespaced logger."""
    namespace = ".".join([name, *extra_names]) if extra_names else name
    return logging.getLogger(namespace)


class SessionLogAdapter(logging.LoggerAdapter):
    """Prefix records with the editor session they belong to."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['session']}] {msg}", kwargs


def session_logger(logger: logging.Logger, session_id: str) -> SessionLogAdapter:
    return SessionLogAdapter(logger, {"session": session_id})


__all__ = ["SessionLogAdapter", "configure_logging", "get_logger", "session_logger"]
