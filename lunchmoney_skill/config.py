"""Settings: config.json in the project root, overridden by environment."""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

ROOT = Path(__file__).resolve().parent.parent

DEFAULT_BASE_URL = "https://api.lunchmoney.dev/v2"
DEFAULT_TIMEOUT = 60.0
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Config:
    token: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    def require_token(self) -> str:
        if not self.token:
            raise ConfigError(
                "LUNCHMONEY_TOKEN is not set. Set env var or add token to config.json"
            )
        return self.token


def _read_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return raw


def load_config(env: Mapping[str, str] | None = None, path: Path | None = None) -> Config:
    """Build a Config from config.json and LUNCHMONEY_* environment variables.

    Environment wins over the file. ``path`` defaults to ``LUNCHMONEY_CONFIG``
    or ``config.json`` next to the package.
    """
    if env is None:
        env = os.environ
    if path is None:
        path = Path(env.get("LUNCHMONEY_CONFIG") or ROOT / "config.json")
    cfg = _read_file(path)

    token = env.get("LUNCHMONEY_TOKEN") or cfg.get("token") or ""
    base_url = env.get("LUNCHMONEY_BASE_URL") or cfg.get("base_url") or DEFAULT_BASE_URL
    log_level = env.get("LUNCHMONEY_LOG_LEVEL") or cfg.get("log_level") or DEFAULT_LOG_LEVEL

    raw_timeout = env.get("LUNCHMONEY_TIMEOUT") or cfg.get("timeout") or DEFAULT_TIMEOUT
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid timeout: {raw_timeout!r}") from e

    return Config(
        token=str(token),
        base_url=str(base_url).rstrip("/"),
        timeout=timeout,
        log_level=str(log_level).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    # stdout is reserved for MCP frames and CLI results
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
