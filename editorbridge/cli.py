"""Command-line interface for the editor bridge."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import orjson
import typer
import uvicorn

from .config import CONFIG_FILENAME, load_config
from .errors import MalformedLocation, OutOfRange
from .locations import parse_locations
from .logging import configure_logging, get_logger
from .position import cursor_offset
from .server.app import create_app

app = typer.Typer(help="Bridge a web editor to offset-based code analysis tools.")
LOGGER = get_logger(__name__)


@app.callback()
def main() -> None:
    """editorbridge CLI root."""
    return None


@app.command("serve")
def serve(
    config_path: Path = typer.Option(Path(CONFIG_FILENAME), "--config", help="YAML config file."),
    host: Optional[str] = typer.Option(None, help="Interface to bind."),
    port: Optional[int] = typer.Option(None, min=1, max=65535, help="Port to listen on."),
    log_level: Optional[str] = typer.Option(None, help="Log level."),
    tool_dir: Optional[Path] = typer.Option(None, file_okay=False, help="Directory holding gocode and ide_stub."),
    workspace_root: Optional[Path] = typer.Option(None, file_okay=False, help="Parent of per-user workspaces."),
) -> None:
    config = load_config(
        config_path,
        {
            "host": host,
            "port": port,
            "log_level": log_level,
            "workspace_root": str(workspace_root) if workspace_root else None,
            "tools.tool_dir": str(tool_dir) if tool_dir else None,
        },
    )
    configure_logging(config.log_level)
    LOGGER.info("Serving editor bridge on %s:%d", config.host, config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


@app.command("offset")
def offset(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file."),
    line: int = typer.Argument(..., help="Zero-based line."),
    column: int = typer.Argument(..., help="Zero-based column in characters."),
) -> None:
    """Print the byte offset the tools expect for a cursor."""
    text = source.read_bytes().decode("utf-8")
    try:
        value = cursor_offset(text, line, column)
    except OutOfRange as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error
    typer.echo(str(value))


@app.command("locate")
def locate(
    report: str = typer.Argument("-", help="File with path:line:column lines, '-' for stdin."),
) -> None:
    """Parse a positional report into JSON locations."""
    blob = sys.stdin.read() if report == "-" else Path(report).read_bytes().decode("utf-8")
    try:
        found = parse_locations(blob)
    except MalformedLocation as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2) from error
    if found is None:
        typer.echo("[]")
        raise typer.Exit(code=1)
    payload = [location.as_usage() for location in found]
    typer.echo(orjson.dumps(payload).decode("utf-8"))
