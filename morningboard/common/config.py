"""Load and validate Morningboard configuration from config.yaml."""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

logger = logging.getLogger("morningboard")

REPO_DIR = Path(__file__).resolve().parent.parent.parent
_DEFAULT_CONFIG_PATH = REPO_DIR / "config" / "config.yaml"

DEFAULT_AGENT_URL = "http://localhost:8001"

_DEFAULTS: dict[str, Any] = {
    "user_name": "there",
    "debug": False,
    "log_level": "INFO",
    "log_dir": str(REPO_DIR / "logs"),
    "agent": {
        "base_url": DEFAULT_AGENT_URL,
        "timeout": 15,
    },
    "weather": {"location": "San Francisco"},
    "financial": {"symbols": ["MSFT", "BTC", "ETH", "NVDA"]},
    "server": {"host": "127.0.0.1", "port": 8765},
}

_TRUTHY = {"1", "true", "yes", "on"}


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from YAML file, with env-var overrides.

    A missing file is not an error: the built-in defaults are used instead,
    so the dashboard runs against a local agent out of the box.

    Environment variable overrides (if set):
        MORNINGBOARD_AGENT_URL  -> agent.base_url
        MORNINGBOARD_DEBUG      -> debug
        MORNINGBOARD_LOG_DIR    -> log_dir
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
    cfg = copy.deepcopy(_DEFAULTS)

    if path.is_file():
        with open(path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        _merge(cfg, raw)
    elif config_path:
        raise FileNotFoundError(f"Config file not found: {path}")

    _env_override(cfg, "MORNINGBOARD_AGENT_URL", "agent", "base_url")
    _env_override(cfg, "MORNINGBOARD_DEBUG", "debug")
    _env_override(cfg, "MORNINGBOARD_LOG_DIR", "log_dir")

    if isinstance(cfg["debug"], str):
        cfg["debug"] = cfg["debug"].strip().lower() in _TRUTHY

    _validate(cfg)
    return cfg


def _merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge ``override`` into ``base`` in place."""
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(base.get(key), dict):
            _merge(base[key], val)
        else:
            base[key] = val


def _env_override(cfg: dict, env_key: str, *keys: str) -> None:
    """Override a nested config value from an environment variable."""
    val = os.environ.get(env_key)
    if val is None:
        return
    target = cfg
    for k in keys[:-1]:
        target = target.setdefault(k, {})
    target[keys[-1]] = val


def _validate(cfg: dict[str, Any]) -> None:
    """Validate the agent URL and coerce numeric settings."""
    base_url = str(cfg["agent"]["base_url"]).rstrip("/")
    parsed = urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Agent base URL must be http(s): {base_url!r}")
    cfg["agent"]["base_url"] = base_url

    try:
        cfg["agent"]["timeout"] = float(cfg["agent"]["timeout"])
    except (TypeError, ValueError):
        raise ValueError(f"Agent timeout must be a number: {cfg['agent']['timeout']!r}")

    if not isinstance(cfg["financial"].get("symbols"), list):
        logger.warning("financial.symbols is not a list, using defaults")
        cfg["financial"]["symbols"] = list(_DEFAULTS["financial"]["symbols"])


def setup_logging(cfg: dict[str, Any]) -> None:
    """Configure root logging: stderr + rotating file."""
    log_dir = Path(cfg["log_dir"])
    log_dir.mkdir(parents=True, exist_ok=True)

    from logging.handlers import RotatingFileHandler

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root = logging.getLogger("morningboard")
    level = "DEBUG" if cfg.get("debug") else cfg.get("log_level", "INFO")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # stderr
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    root.addHandler(sh)

    # rotating file
    fh = RotatingFileHandler(log_dir / "morningboard.log", maxBytes=5_000_000, backupCount=3)
    fh.setFormatter(fmt)
    root.addHandler(fh)
