"""HTTP and editor channel endpoints driven by fake tools."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from editorbridge.config import BridgeConfig, ToolsConfig
from editorbridge.server.app import create_app
from editorbridge.server.services import BridgeServices
from editorbridge.server.session import USER_HEADER

GOCODE = """
if [ "$1" = "set" ]; then
  printf '%s' "$3" > "$(dirname "$0")/lib-path"
  exit 0
fi
input=$(cat)
printf '{"args":"%s","stdin":"%s"}' "$*" "$input"
"""

IDE_STUB = """
case "$4" in
  -info) printf 'func main() cursor=%s gopath=%s\\n' "$3" "$GOPATH" ;;
  -def) printf '%s\\n' 'C:\\ws\\src\\hello\\main.go:3:6' ;;
  -use) printf '%s/main.go:3:6\\n%s/util.go:10:2\\n' "$(pwd)" "$(pwd)" ;;
esac
"""


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    source_dir = tmp_path / "ws" / "alice" / "src" / "hello"
    source_dir.mkdir(parents=True)
    return source_dir


def _client(tmp_path: Path, make_tool, *, gocode: str = GOCODE, ide_stub: str = IDE_STUB) -> TestClient:
    make_tool("gocode", gocode)
    bin_dir = make_tool("ide_stub", ide_stub).parent
    config = BridgeConfig(
        workspace_root=str(tmp_path / "ws"),
        tools=ToolsConfig(tool_dir=str(bin_dir), timeout_seconds=5),
    )
    return TestClient(create_app(services=BridgeServices.from_config(config)))


@pytest.fixture()
def client(tmp_path: Path, make_tool) -> TestClient:
    return _client(tmp_path, make_tool)


def _body(path: Path, code: str = "package main\n", line: int = 0, ch: int = 7) -> dict[str, object]:
    return {"path": str(path), "code": code, "cursorLine": line, "cursorCh": ch}


def _registry(client: TestClient):
    return client.app.state.services.registry


# --- live completion channel ----------------------------------------------------


def test_live_completion_round_trip(client: TestClient) -> None:
    with client.websocket_connect("/editor/ws?sid=abc") as channel:
        assert channel.receive_json() == {"output": "Editor initialized", "cmd": "init-editor"}
        assert "abc" in _registry(client)
        channel.send_json({"code": "package main\n", "cursorLine": 0, "cursorCh": 7})
        reply = channel.receive_json()
    assert reply["cmd"] == "autocomplete"
    assert json.loads(reply["output"]) == {"args": "-f=json autocomplete 7", "stdin": "package main"}
    assert "abc" not in _registry(client)


def test_session_cookie_identifies_channel(client: TestClient) -> None:
    client.cookies.set("wide-session", "from-cookie")
    with client.websocket_connect("/editor/ws") as channel:
        channel.receive_json()
        assert "from-cookie" in _registry(client)


def test_channel_without_session_is_rejected(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect) as info:
        with client.websocket_connect("/editor/ws"):
            pass
    assert info.value.code == 1008


def test_bad_cursor_fails_only_that_turn(client: TestClient) -> None:
    with client.websocket_connect("/editor/ws?sid=abc") as channel:
        channel.receive_json()
        channel.send_json({"code": "package main\n", "cursorLine": 9, "cursorCh": 0})
        failed = channel.receive_json()
        channel.send_json({"code": "package main\n", "cursorLine": 1, "cursorCh": 0})
        recovered = channel.receive_json()
    assert failed["cmd"] == "autocomplete"
    assert failed["output"] == ""
    assert "line 9" in failed["error"]
    assert "error" not in recovered
    assert json.loads(recovered["output"])["args"] == "-f=json autocomplete 13"


def test_malformed_frame_ends_session(client: TestClient) -> None:
    with client.websocket_connect("/editor/ws?sid=abc") as channel:
        channel.receive_json()
        channel.send_text("{not json")
        with pytest.raises(WebSocketDisconnect) as info:
            channel.receive_json()
    assert info.value.code == 1003
    assert "abc" not in _registry(client)


def test_reconnect_replaces_channel(client: TestClient) -> None:
    registry = _registry(client)
    with client.websocket_connect("/editor/ws?sid=abc") as first:
        first.receive_json()
        other = client.websocket_connect("/editor/ws?sid=xyz")
        other.__enter__()
        other.receive_json()
        second_context = client.websocket_connect("/editor/ws?sid=abc")
        second = second_context.__enter__()
        assert second.receive_json()["cmd"] == "init-editor"
    assert "abc" in registry
    assert "xyz" in registry
    second.send_json({"code": "package main\n", "cursorLine": 0, "cursorCh": 7})
    assert second.receive_json()["cmd"] == "autocomplete"
    second_context.__exit__(None, None, None)
    other.__exit__(None, None, None)
    assert len(registry) == 0


# --- one-shot completion ----------------------------------------------------------


def test_one_shot_completion(client: TestClient, workspace: Path) -> None:
    target = workspace / "main.go"
    response = client.post("/autocomplete", json=_body(target), headers={USER_HEADER: "alice"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"args": "-f=json autocomplete 7", "stdin": "package main"}
    assert target.read_text(encoding="utf-8") == "package main\n"
    lib_path = (Path(client.app.state.services.completion.executable).parent / "lib-path").read_text()
    assert "alice" in lib_path and "/pkg/" in lib_path


def test_one_shot_persist_failure_is_server_error(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/autocomplete", json=_body(tmp_path / "missing" / "main.go"))
    assert response.status_code == 500
    assert response.json()["error"] == "persistence_failed"


def test_one_shot_tool_failure_is_server_error(tmp_path: Path, make_tool, workspace: Path) -> None:
    client = _client(tmp_path, make_tool, gocode='cat > /dev/null\necho "boom"\nexit 2\n')
    response = client.post("/autocomplete", json=_body(workspace / "main.go"))
    assert response.status_code == 500
    assert response.json()["error"] == "ExecutionError"


def test_invalid_body_is_single_validation_error(client: TestClient) -> None:
    response = client.post("/autocomplete", json={"path": "/tmp/x.go", "code": 3})
    assert response.status_code == 500
    payload = response.json()
    assert payload["error"] == "invalid_request"
    assert isinstance(payload["detail"], list) and payload["detail"]


# --- cursor queries -------------------------------------------------------------


def test_expression_info(client: TestClient, workspace: Path) -> None:
    response = client.post("/exprinfo", json=_body(workspace / "main.go"), headers={USER_HEADER: "alice"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["succ"] is True
    assert payload["info"].startswith("func main() cursor=main.go:7 gopath=")
    assert payload["info"].endswith(str(Path("ws") / "alice"))


def test_find_declaration_with_drive_letter_path(client: TestClient, workspace: Path) -> None:
    response = client.post("/find/decl", json=_body(workspace / "main.go"))
    assert response.json() == {
        "succ": True,
        "path": "C:\\ws\\src\\hello\\main.go",
        "cursorLine": 3,
        "cursorCh": 6,
    }


def test_find_usages(client: TestClient, workspace: Path) -> None:
    response = client.post("/find/usages", json=_body(workspace / "main.go"))
    payload = response.json()
    assert payload["succ"] is True
    assert [(Path(found["path"]).name, found["line"], found["ch"]) for found in payload["founds"]] == [
        ("main.go", 3, 6),
        ("util.go", 10, 2),
    ]
    assert all(found["contents"] == [""] for found in payload["founds"])


@pytest.mark.parametrize("endpoint", ["/exprinfo", "/find/decl", "/find/usages"])
def test_empty_tool_output_is_unsuccessful(tmp_path: Path, make_tool, workspace: Path, endpoint: str) -> None:
    client = _client(tmp_path, make_tool, ide_stub="exit 0\n")
    response = client.post(endpoint, json=_body(workspace / "main.go"))
    assert response.status_code == 200
    assert response.json() == {"succ": False}


@pytest.mark.parametrize("endpoint", ["/find/decl", "/find/usages"])
def test_unparseable_tool_output_is_unsuccessful(tmp_path: Path, make_tool, workspace: Path, endpoint: str) -> None:
    client = _client(tmp_path, make_tool, ide_stub="echo 'no package here'\n")
    response = client.post(endpoint, json=_body(workspace / "main.go"))
    assert response.json() == {"succ": False}


def test_query_tool_failure_is_unsuccessful(tmp_path: Path, make_tool, workspace: Path) -> None:
    client = _client(tmp_path, make_tool, ide_stub="echo crashed\nexit 1\n")
    response = client.post("/exprinfo", json=_body(workspace / "main.go"))
    assert response.status_code == 200
    assert response.json() == {"succ": False}


def test_query_out_of_range_cursor_is_unsuccessful(client: TestClient, workspace: Path) -> None:
    response = client.post("/find/decl", json=_body(workspace / "main.go", line=4))
    assert response.json() == {"succ": False}


def test_query_persist_failure_is_server_error(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/find/usages", json=_body(tmp_path / "absent" / "main.go"))
    assert response.status_code == 500
