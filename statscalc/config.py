"""Runtime configuration read from environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

__all__: list[str] = [
    "Settings",
    "load_settings",
]


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"       # Root logger level name
    data_dir: Path = Path(".")    # Base directory for file paths received over HTTP
    host: str = "127.0.0.1"       # Bind host for `statscalc serve`
    port: int = 8000              # Bind port for `statscalc serve`


def load_settings() -> Settings:
    """Build Settings from STATSCALC_* environment variables (with defaults)."""
    return Settings(
        log_level=os.environ.get("STATSCALC_LOG_LEVEL", "INFO").upper(),
        data_dir=Path(os.environ.get("STATSCALC_DATA_DIR", ".")).resolve(),
        host=os.environ.get("STATSCALC_HOST", "127.0.0.1"),
        port=int(os.environ.get("STATSCALC_PORT", 8000)),
    )
