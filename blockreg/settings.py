from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .blocks import DEFAULT_PLUGIN
from .loader import DEFAULT_DECLARATIONS


@dataclass(frozen=True)
class Settings:
    declarations: Path
    log_level: str
    default_plugin: str
    host: str
    port: int

    @classmethod
    def from_env(cls) -> "Settings":
        declarations = Path(os.environ.get("BLOCKREG_DECLARATIONS", "") or DEFAULT_DECLARATIONS)
        log_level = (os.environ.get("BLOCKREG_LOG_LEVEL", "INFO").strip() or "INFO").upper()
        default_plugin = os.environ.get("BLOCKREG_DEFAULT_PLUGIN", DEFAULT_PLUGIN).strip() or DEFAULT_PLUGIN
        host = os.environ.get("BLOCKREG_HOST", "127.0.0.1").strip() or "127.0.0.1"

        port_raw = os.environ.get("BLOCKREG_PORT", "8765").strip() or "8765"
        try:
            port = int(port_raw)
        except ValueError as exc:
            raise SystemExit(f"Invalid BLOCKREG_PORT: {port_raw}") from exc
        if not 0 < port < 65536:
            raise SystemExit(f"Invalid BLOCKREG_PORT: {port_raw}")

        return cls(
            declarations=declarations,
            log_level=log_level,
            default_plugin=default_plugin,
            host=host,
            port=port,
        )
