from __future__ import annotations

from typing import Any, Dict

import pytest

from src.cli import main as cli


def test_parser_defaults_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_HOST", "127.0.0.1")
    monkeypatch.setenv("CHESS_PORT", "9001")
    monkeypatch.delenv("CHESS_LOG_LEVEL", raising=False)
    args = cli.build_parser().parse_args([])
    assert args.host == "127.0.0.1"
    assert args.port == 9001
    assert args.log_level == "info"


def test_main_runs_app_factory(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: Dict[str, Any] = {}

    def fake_run(target: str, **kwargs: Any) -> None:
        calls["target"] = target
        calls.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    monkeypatch.setenv("CHESS_LOG_LEVEL", "info")
    cli.main(["--port", "8123", "--log-level", "debug"])
    assert calls["target"] == "src.protocol.http.app:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 8123
    assert calls["log_level"] == "debug"
