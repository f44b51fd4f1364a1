from __future__ import annotations

from pathlib import Path

import pytest

from blockreg.loader import DEFAULT_DECLARATIONS
from blockreg.settings import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    for key in ("BLOCKREG_DECLARATIONS", "BLOCKREG_LOG_LEVEL", "BLOCKREG_DEFAULT_PLUGIN", "BLOCKREG_HOST", "BLOCKREG_PORT"):
        monkeypatch.delenv(key, raising=False)
    cfg = Settings.from_env()
    assert cfg.declarations == DEFAULT_DECLARATIONS
    assert cfg.log_level == "INFO"
    assert cfg.default_plugin == "minecraft"
    assert (cfg.host, cfg.port) == ("127.0.0.1", 8765)


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("BLOCKREG_DECLARATIONS", str(tmp_path / "b.json"))
    monkeypatch.setenv("BLOCKREG_LOG_LEVEL", "debug")
    monkeypatch.setenv("BLOCKREG_DEFAULT_PLUGIN", "steven")
    monkeypatch.setenv("BLOCKREG_PORT", "9000")
    cfg = Settings.from_env()
    assert cfg.declarations == tmp_path / "b.json"
    assert cfg.log_level == "DEBUG"
    assert cfg.default_plugin == "steven"
    assert cfg.port == 9000


@pytest.mark.parametrize("port", ["abc", "0", "70000"])
def test_invalid_port_exits(monkeypatch: pytest.MonkeyPatch, port: str):
    monkeypatch.setenv("BLOCKREG_PORT", port)
    with pytest.raises(SystemExit, match="BLOCKREG_PORT"):
        Settings.from_env()
