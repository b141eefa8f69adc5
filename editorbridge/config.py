"""Configuration models for the editor bridge."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping

import typer
import yaml
from pydantic import BaseModel, Field

CONFIG_FILENAME = "editorbridge.yaml"


class ToolsConfig(BaseModel):
    tool_dir: str | None = None
    completion: str = "gocode"
    query: str = "ide_stub"
    timeout_seconds: float | None = 10.0
    goroot: str | None = None


class BridgeConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 7070
    log_level: str = "INFO"
    workspace_root: str = "workspaces"
    user_workspaces: Dict[str, str] = Field(default_factory=dict)
    session_cookie: str = "wide-session"
    default_user: str = "admin"
    send_timeout_seconds: float = 5.0
    tools: ToolsConfig = Field(default_factory=ToolsConfig)

    def user_workspace(self, username: str) -> str:
        """Return the workspace path list for a user."""
        explicit = self.user_workspaces.get(username)
        if explicit:
            return explicit
        return str(Path(self.workspace_root) / username)


def _load_yaml_config(path: Path) -> dict[str, object]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise typer.BadParameter(f"Failed to parse {path}: {error}") from error
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path.name} must contain a mapping")
    return data


def load_config(path: Path | None = None, overrides: Mapping[str, object] | None = None) -> BridgeConfig:
    """Merge the YAML config file with non-empty CLI overrides."""
    file_values = _load_yaml_config(path or Path(CONFIG_FILENAME))
    merged: dict[str, object] = dict(file_values)
    tools: dict[str, object] = dict(merged.get("tools") or {})  # type: ignore[arg-type]
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key.startswith("tools."):
            tools[key.split(".", 1)[1]] = value
        else:
            merged[key] = value
    merged["tools"] = tools
    return BridgeConfig(**merged)


__all__ = ["BridgeConfig", "CONFIG_FILENAME", "ToolsConfig", "load_config"]
