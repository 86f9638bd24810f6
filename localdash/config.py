from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_HTTP_PORT = 9999


def _default_file_browser() -> str:
    return "open" if sys.platform == "darwin" else "xdg-open"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    services_path: Path = Path("services.json")
    host: str = "127.0.0.1"
    port: int = DEFAULT_HTTP_PORT
    settle_delay: float = 2.0
    stop_confirm_delay: float = 0.5
    probe_timeout: float = 5.0
    editor_command: str = "code"
    file_browser_command: str = field(default_factory=_default_file_browser)

    @classmethod
    def from_env(cls, env_path: str | Path | None = None) -> Config:
        load_dotenv(env_path)

        return cls(
            services_path=Path(os.getenv("LOCALDASH_SERVICES", "services.json")).expanduser(),
            host=os.getenv("LOCALDASH_HOST", "127.0.0.1"),
            port=_int_env("LOCALDASH_PORT", DEFAULT_HTTP_PORT),
            settle_delay=_float_env("LOCALDASH_SETTLE_DELAY", 2.0),
            stop_confirm_delay=_float_env("LOCALDASH_STOP_CONFIRM_DELAY", 0.5),
            probe_timeout=_float_env("LOCALDASH_PROBE_TIMEOUT", 5.0),
            editor_command=os.getenv("LOCALDASH_EDITOR", "code"),
            file_browser_command=os.getenv("LOCALDASH_FILE_BROWSER") or _default_file_browser(),
        )
